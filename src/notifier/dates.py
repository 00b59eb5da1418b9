"""Week header transliteration: "JANUARY 26 - FEBRUARY 1" -> "1月26-2月1日".

Headers are matched against an ordered table of shapes; the first shape that
matches wins and anything that matches none is returned unchanged.
"""

import re
from collections.abc import Callable

MONTH_TOKENS: dict[str, str] = {
    "january": "1月",
    "february": "2月",
    "march": "3月",
    "april": "4月",
    "may": "5月",
    "june": "6月",
    "july": "7月",
    "august": "8月",
    "september": "9月",
    "october": "10月",
    "november": "11月",
    "december": "12月",
}

DAY_MARKER = "日"

# Unicode hyphen and dash variants plus the minus sign
_DASHES = re.compile(r"[‐‑‒–—―−]")

_MONTH = r"(?P<{name}>[A-Za-z]+)"
_DAY = r"(?P<{name}>\d{{1,2}})"


def _shape(*parts: str) -> re.Pattern[str]:
    return re.compile("".join(parts))


CROSS_MONTH = _shape(
    _MONTH.format(name="month1"), r"\s+", _DAY.format(name="day1"),
    r"\s*-\s*",
    _MONTH.format(name="month2"), r"\s+", _DAY.format(name="day2"),
)
SAME_MONTH = _shape(
    _MONTH.format(name="month"), r"\s+", _DAY.format(name="day1"),
    r"\s*-\s*",
    _DAY.format(name="day2"),
)
SINGLE_DATE = _shape(_MONTH.format(name="month"), r"\s+", _DAY.format(name="day"))


def month_token(name: str) -> str:
    """Translate an English month name, echoing the name when it is unknown."""
    return MONTH_TOKENS.get(name.lower(), name)


def normalize_dashes(text: str) -> str:
    return _DASHES.sub("-", text)


def _cross_month(m: re.Match[str], mark_range_start: bool) -> str:
    start_marker = DAY_MARKER if mark_range_start else ""
    return (
        f"{month_token(m['month1'])}{m['day1']}{start_marker}"
        f"-{month_token(m['month2'])}{m['day2']}{DAY_MARKER}"
    )


def _same_month(m: re.Match[str], mark_range_start: bool) -> str:
    return f"{month_token(m['month'])}{m['day1']}-{m['day2']}{DAY_MARKER}"


def _single_date(m: re.Match[str], mark_range_start: bool) -> str:
    return f"{month_token(m['month'])}{m['day']}{DAY_MARKER}"


# Tried in order, first full match wins.
DATE_SHAPES: tuple[tuple[str, re.Pattern[str], Callable[[re.Match[str], bool], str]], ...] = (
    ("cross_month", CROSS_MONTH, _cross_month),
    ("same_month", SAME_MONTH, _same_month),
    ("single_date", SINGLE_DATE, _single_date),
)


def match_shape(header: str) -> str | None:
    """Return the name of the first shape the header fits, if any."""
    text = normalize_dashes(header).strip()
    for name, pattern, _ in DATE_SHAPES:
        if pattern.fullmatch(text):
            return name
    return None


def transliterate(header: str, *, mark_range_start: bool = False) -> str:
    """Render a week header in Chinese month/day notation.

    Examples:
        "JANUARY 5-11"          -> "1月5-11日"
        "JANUARY 26-FEBRUARY 1" -> "1月26-2月1日"
        "March 3"               -> "3月3日"
        "garbage text"          -> "garbage text"

    Args:
        header: Column header from the sheet.
        mark_range_start: Also put 日 after the first day of a cross-month
            range ("1月26日-2月1日").

    Returns:
        The transliterated header, or ``header`` unchanged if no shape matches.
    """
    text = normalize_dashes(header).strip()
    for _, pattern, render in DATE_SHAPES:
        m = pattern.fullmatch(text)
        if m:
            return render(m, mark_range_start)
    return header
