"""Line-oriented CSV parsing for sheet exports.

The text is split into lines first and each line is parsed on its own. A
quoted cell containing a newline is therefore NOT reassembled: its two halves
end up on separate rows. Sheet exports used for assignments never contain such
cells, so the limitation is accepted rather than worked around.
"""

from src.notifier.errors import MalformedInput

Grid = list[list[str]]

_QUOTE = '"'
_DELIMITER = ","


def parse_line(line: str) -> list[str]:
    """Parse one CSV line into trimmed cell values.

    An unquoted comma ends a cell, a double quote toggles quoted mode and two
    consecutive quotes inside quoted mode produce one literal quote.
    """
    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == _QUOTE:
            if in_quotes and line[i + 1 : i + 2] == _QUOTE:
                current.append(_QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == _DELIMITER and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    values.append("".join(current).strip())
    return values


def parse(text: str) -> Grid:
    """Parse CSV text into a grid of trimmed string cells.

    Rows keep their input order and may differ in length. A blank line,
    including the one after a trailing newline, becomes ``[""]``.

    Raises:
        MalformedInput: If ``text`` is not a string.
    """
    if not isinstance(text, str):
        raise MalformedInput(f"Expected CSV text, got {type(text).__name__}")
    if not text:
        return []

    return [parse_line(line) for line in text.split("\n")]


def _quote_cell(cell: str) -> str:
    if _DELIMITER in cell or _QUOTE in cell or "\n" in cell:
        return _QUOTE + cell.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return cell


def _encode_row(row: list[str]) -> str:
    # A lone empty cell is written as "" so the row survives as [""]
    if len(row) == 1 and row[0] == "":
        return _QUOTE * 2
    return _DELIMITER.join(_quote_cell(str(cell)) for cell in row)


def to_csv(grid: Grid) -> str:
    """Encode a grid the way the sheet proxy does (quote only when needed)."""
    return "\n".join(_encode_row(row) for row in grid)


def is_blank_row(row: list[str]) -> bool:
    """True when every cell of the row is empty or whitespace."""
    return all(not cell.strip() for cell in row)


def cell_at(grid: Grid, row: int, col: int) -> str:
    """Return the cell at (row, col), or ``""`` when the row is too short."""
    if row >= len(grid):
        return ""
    cells = grid[row]
    return cells[col] if col < len(cells) else ""
