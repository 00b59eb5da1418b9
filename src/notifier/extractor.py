"""Turns a parsed sheet grid into assignment records.

Sheet layout: row 0 holds one week header per column ("JANUARY 5-11"); the
cells below hold encoded assignments ("3 HXQ", "4 Alice / Bob"). Columns with
a blank header are ignored. Records are emitted column by column, top to
bottom, so the same grid always yields the same ordered list.
"""

from collections.abc import Callable

from src.notifier.cells import decode
from src.notifier.config import NotifierConfig
from src.notifier.csv_parser import Grid, cell_at
from src.notifier.dates import transliterate
from src.notifier.logging import get_logger
from src.notifier.models import AssignmentRecord

log = get_logger(__name__)

SlotFilter = Callable[[int], bool]


def accept_all_slots(slot_number: int) -> bool:
    return True


def slot_range(lowest: int | None = None, highest: int | None = None) -> SlotFilter:
    """Build a filter accepting slots within [lowest, highest] (inclusive).

    A bound of None leaves that side open.
    """

    def _in_range(slot_number: int) -> bool:
        if lowest is not None and slot_number < lowest:
            return False
        if highest is not None and slot_number > highest:
            return False
        return True

    return _in_range


def slot_filter_from_config(config: NotifierConfig) -> SlotFilter:
    """Slot policy for a deployment: all slots, or slot_min..slot_max."""
    if config.accept_all_slots:
        return accept_all_slots
    return slot_range(config.slot_min, config.slot_max)


def week_columns(grid: Grid) -> list[tuple[int, str]]:
    """Return (column index, header) for every column with a non-blank header."""
    if not grid:
        return []
    return [(col, header) for col, header in enumerate(grid[0]) if header.strip()]


def extract(
    grid: Grid,
    slot_filter: SlotFilter = accept_all_slots,
    *,
    mark_range_start: bool = False,
) -> list[AssignmentRecord]:
    """Extract assignment records from a grid.

    Blank cells, cells that don't decode and slots rejected by ``slot_filter``
    are skipped without error.

    Args:
        grid: Parsed sheet, header row first.
        slot_filter: Predicate on the slot number deciding which parts are kept.
        mark_range_start: Passed through to ``transliterate``.

    Returns:
        Records in column-major order.
    """
    records: list[AssignmentRecord] = []
    undecodable = 0
    filtered = 0

    columns = week_columns(grid)
    for col, header in columns:
        localized_date = transliterate(header, mark_range_start=mark_range_start)
        for row in range(1, len(grid)):
            cell_text = cell_at(grid, row, col)
            if not cell_text.strip():
                continue

            fragment = decode(cell_text)
            if fragment is None:
                undecodable += 1
                continue
            if not slot_filter(fragment.slot_number):
                filtered += 1
                continue

            records.append(
                AssignmentRecord(
                    source_date=header,
                    localized_date=localized_date,
                    slot_number=fragment.slot_number,
                    participant=fragment.participant,
                    co_participant=fragment.co_participant,
                )
            )

    log.debug(
        "assignments_extracted",
        columns=len(columns),
        records=len(records),
        undecodable=undecodable,
        filtered=filtered,
    )
    return records
