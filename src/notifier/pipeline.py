"""End-to-end load: sheet URL or CSV text in, rendered messages out.

``process_text`` is free of I/O and is what tests and offline runs use;
``load_assignments`` adds URL resolution and the download in front of it.
"""

from src.notifier.config import NotifierConfig, get_config
from src.notifier.csv_parser import is_blank_row, parse
from src.notifier.errors import EmptySheetError
from src.notifier.extractor import (
    SlotFilter,
    accept_all_slots,
    extract,
    slot_filter_from_config,
)
from src.notifier.logging import get_logger
from src.notifier.models import LoadResult, MessageTemplates
from src.notifier.render import DEFAULT_TEMPLATES, render_all
from src.notifier.source import check_proxy_sentinel, detect_source, fetch_csv

log = get_logger(__name__)


def process_text(
    text: str,
    slot_filter: SlotFilter = accept_all_slots,
    *,
    templates: MessageTemplates = DEFAULT_TEMPLATES,
    mark_range_start: bool = False,
) -> LoadResult:
    """Parse CSV text, extract assignments and render their messages.

    An empty result (header row present but no decodable cells) is returned,
    not raised; callers check ``LoadResult.is_empty``.

    Raises:
        ProxyError: If the text is a proxy "Error: ..." reply.
        EmptySheetError: If the sheet has fewer than two non-blank rows.
        MalformedInput: If ``text`` is not a string.
    """
    if isinstance(text, str):
        check_proxy_sentinel(text)
    grid = parse(text)

    data_rows = [row for row in grid if not is_blank_row(row)]
    if len(data_rows) < 2:
        raise EmptySheetError("No data found in the sheet")

    records = extract(grid, slot_filter, mark_range_start=mark_range_start)
    messages = render_all(records, templates)

    if not records:
        log.warning("no_assignments_found", rows=len(grid))
    else:
        log.info("assignments_loaded", count=len(records))
    return LoadResult(records=records, messages=messages)


def load_assignments(
    url: str,
    config: NotifierConfig | None = None,
    *,
    proxy: bool = False,
    templates: MessageTemplates = DEFAULT_TEMPLATES,
) -> LoadResult:
    """Download a sheet and turn it into rendered messages.

    Args:
        url: Export, published or proxy URL.
        config: Settings for timeouts, retries, slot policy and date format.
            Defaults to the environment configuration.
        proxy: Force the URL to be treated as a proxy endpoint.
        templates: Message templates.

    Raises:
        InvalidSourceUrl, FetchError, TransientError, ProxyError, EmptySheetError
    """
    config = config or get_config()
    source = detect_source(url, proxy=proxy)
    text = fetch_csv(
        source,
        timeout=config.request_timeout_seconds,
        attempts=config.fetch_attempts,
        wait_seconds=config.fetch_retry_wait_seconds,
    )
    return process_text(
        text,
        slot_filter_from_config(config),
        templates=templates,
        mark_range_start=config.mark_range_start,
    )
