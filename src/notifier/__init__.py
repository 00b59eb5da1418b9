"""Meeting assignment notifier.

Reads a schedule sheet (one week per column, "3 Name" / "4 Name / Assistant"
cells) and renders one notification message per assignment.
"""

from src.notifier.cells import decode
from src.notifier.csv_parser import parse
from src.notifier.dates import transliterate
from src.notifier.extractor import accept_all_slots, extract, slot_range
from src.notifier.models import AssignmentFragment, AssignmentRecord, LoadResult, Role
from src.notifier.pipeline import load_assignments, process_text
from src.notifier.render import display_title, render

__all__ = [
    "parse",
    "transliterate",
    "decode",
    "extract",
    "accept_all_slots",
    "slot_range",
    "render",
    "display_title",
    "process_text",
    "load_assignments",
    "AssignmentFragment",
    "AssignmentRecord",
    "LoadResult",
    "Role",
]
