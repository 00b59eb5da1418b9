"""Decoding of compact schedule cells.

A cell holds the slot number followed by one name, or two names separated by
a slash when the part has an assistant:

    "3 HXQ"          -> slot 3, HXQ
    "4 Alice / Bob"  -> slot 4, Alice with Bob assisting

Anything else (headings, notes, bare numbers) is not an assignment and decodes
to None.
"""

import re

from src.notifier.models import AssignmentFragment

CELL_SHAPE = re.compile(r"(?P<slot>\d+)\s+(?P<names>\S.*)", re.DOTALL)
PAIR_DELIMITER = "/"


def decode(cell_text: str) -> AssignmentFragment | None:
    """Decode one cell into an assignment fragment, or None if it isn't one."""
    text = cell_text.strip()
    if not text:
        return None

    m = CELL_SHAPE.fullmatch(text)
    if m is None:
        return None

    names = m["names"].strip()
    co_participant = None
    if PAIR_DELIMITER in names:
        segments = names.split(PAIR_DELIMITER)
        participant = segments[0].strip()
        co_participant = segments[1].strip() or None
    else:
        participant = names

    return AssignmentFragment(
        slot_number=int(m["slot"]),
        participant=participant,
        co_participant=co_participant,
    )
