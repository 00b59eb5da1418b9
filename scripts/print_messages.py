"""Print assignment notification messages from a schedule sheet.

Standalone CLI script: downloads the sheet (or reads a local CSV export),
extracts the assignments and prints one message per assignment so they can be
copied and sent one at a time.

Run with: python scripts/print_messages.py --url "https://docs.google.com/spreadsheets/d/<id>/edit#gid=0"
Local:    python scripts/print_messages.py --file schedule.csv
Titles:   python scripts/print_messages.py --titles
One:      python scripts/print_messages.py --index 3
JSON:     python scripts/print_messages.py --json
All:      python scripts/print_messages.py --all-slots

The URL defaults to NOTIFIER_SHEET_URL from the environment / .env.

Exit codes:
  0 = success (messages on stdout)
  1 = error (message on stderr)
  2 = sheet loaded but no assignments found
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.notifier.config import get_config  # noqa: E402
from src.notifier.errors import NotifierError, ProxyError  # noqa: E402
from src.notifier.extractor import slot_filter_from_config  # noqa: E402
from src.notifier.logging import setup_logging  # noqa: E402
from src.notifier.models import LoadResult  # noqa: E402
from src.notifier.pipeline import load_assignments, process_text  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for messages."""
    print(msg, file=sys.stderr)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Print assignment notification messages from a schedule sheet.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument(
        "--url",
        type=str,
        default=None,
        help="Sheet export/published URL or proxy endpoint (default: NOTIFIER_SHEET_URL).",
    )
    source_group.add_argument(
        "--file",
        type=str,
        default=None,
        help="Read a local CSV export instead of downloading.",
    )
    parser.add_argument(
        "--proxy",
        action="store_true",
        help="Treat --url as a proxy endpoint even if it doesn't look like one.",
    )

    parser.add_argument(
        "--all-slots",
        action="store_true",
        help="Keep every slot instead of the configured slot range.",
    )
    parser.add_argument("--slot-min", type=int, default=None, help="Lowest slot to keep.")
    parser.add_argument("--slot-max", type=int, default=None, help="Highest slot to keep.")
    parser.add_argument(
        "--mark-range-start",
        action="store_true",
        help="Render cross-month ranges as 1月26日-2月1日.",
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--json",
        action="store_true",
        help="Output messages as JSON (title, text, record).",
    )
    output_group.add_argument(
        "--titles",
        action="store_true",
        help="Output only the numbered one-line titles.",
    )
    output_group.add_argument(
        "--index",
        type=int,
        default=None,
        help="Output only message N (1-based, as numbered by --titles).",
    )

    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON on stderr.",
    )
    return parser.parse_args(argv)


def _format_messages(result: LoadResult) -> str:
    blocks = []
    for number, message in enumerate(result.messages, start=1):
        blocks.append(f"[{number}] {message.title}\n{message.text}")
    return "\n\n".join(blocks)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    overrides: dict = {}
    if args.all_slots:
        overrides["accept_all_slots"] = True
    if args.slot_min is not None:
        overrides["slot_min"] = args.slot_min
    if args.slot_max is not None:
        overrides["slot_max"] = args.slot_max
    if args.mark_range_start:
        overrides["mark_range_start"] = True
    if args.log_json:
        overrides["log_json"] = True
    config = get_config().model_copy(update=overrides)

    setup_logging(json_output=config.log_json, log_level=config.log_level)

    try:
        if args.file:
            path = Path(args.file)
            if not path.exists():
                _log(f"ERROR: CSV file not found at {path}")
                return 1
            result = process_text(
                path.read_text(encoding="utf-8-sig"),
                slot_filter_from_config(config),
                mark_range_start=config.mark_range_start,
            )
        else:
            url = args.url or config.sheet_url
            result = load_assignments(url, config, proxy=args.proxy)
    except ProxyError as e:
        _log(f"ERROR: proxy reported: {e.detail}")
        return 1
    except NotifierError as e:
        _log(f"ERROR: {e}")
        return 1

    if result.is_empty:
        _log(result.status_message)
        return 2
    _log(result.status_message)

    if args.index is not None:
        if not 1 <= args.index <= len(result.messages):
            _log(f"ERROR: --index must be between 1 and {len(result.messages)}")
            return 1
        print(result.messages[args.index - 1].text)
    elif args.titles:
        for number, message in enumerate(result.messages, start=1):
            print(f"{number:>3}. {message.title}")
    elif args.json:
        output = [message.model_dump(mode="json") for message in result.messages]
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(_format_messages(result))

    return 0


if __name__ == "__main__":
    sys.exit(main())
