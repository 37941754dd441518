"""Cell normalizers — convert raw spreadsheet cells into typed values.

Every function here is pure: one raw cell in (``str``, ``int``, ``float`` or
``None``, as produced by the tabular decoder), one typed value or ``None`` out.
Bad cells never raise; the caller drops the field instead of failing the row.
"""

from __future__ import annotations

import math
import re
from datetime import date, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Sequence, Union

Cell = Union[str, int, float, None]

# Day zero of the spreadsheet serial calendar (serial 1 == 1899-12-31).
SERIAL_EPOCH = date(1899, 12, 30)

_CURRENCY_PREFIX_RE = re.compile(r"R\$\s*")
_WHITESPACE_RE = re.compile(r"\s+")
_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})")
_MINUTES_PER_DAY = 24 * 60


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _expand_year(year: str) -> int | None:
    if not year.isdigit():
        return None
    if len(year) == 2:
        short = int(year)
        return 1900 + short if short > 50 else 2000 + short
    if len(year) == 4:
        return int(year)
    return None


def parse_date(value: Cell) -> date | None:
    """Parse ``DD/MM/YY``, ``DD/MM/YYYY`` or a numeric day serial.

    Two-digit years above 50 land in the 1900s, the rest in the 2000s.
    The result is a plain calendar date, never a timestamp.
    """
    if value is None or isinstance(value, bool):
        return None

    if _is_number(value):
        if not math.isfinite(value):
            return None
        try:
            return SERIAL_EPOCH + timedelta(days=math.floor(value))
        except OverflowError:
            return None

    text = str(value).strip()
    if not text:
        return None

    # "01/02/2024 10:00" -> "01/02/2024"
    parts = text.split()[0].split("/")
    if len(parts) != 3:
        return None

    day, month, year = parts
    if not (day.isdigit() and month.isdigit()):
        return None
    full_year = _expand_year(year)
    if full_year is None:
        return None

    try:
        return date(full_year, int(month), int(day))
    except ValueError:
        return None


def parse_time(value: Cell) -> time | None:
    """Parse ``HH:MM`` text or a fractional-day serial into a minute-precision time.

    Cells holding several times (``"08:00/14:00"``) keep only the first one.
    """
    if value is None or isinstance(value, bool):
        return None

    if _is_number(value):
        if not math.isfinite(value):
            return None
        # Only the fraction matters, so full datetime serials work too.
        minutes = math.floor((value % 1) * _MINUTES_PER_DAY + 0.5) % _MINUTES_PER_DAY
        return time(minutes // 60, minutes % 60)

    text = str(value).strip()
    if ":" not in text:
        return None

    first = text.split("/")[0]
    match = _TIME_RE.search(first)
    if match is None:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return time(hours, minutes)


def parse_currency(value: Cell) -> Decimal | None:
    """Parse a BRL amount such as ``"R$ 1.234,56"`` into a ``Decimal``.

    Native numbers pass through unchanged (zero included). Negative amounts
    are not rejected.
    """
    if value is None or isinstance(value, bool):
        return None

    if _is_number(value):
        if not math.isfinite(value):
            return None
        return Decimal(str(value))

    cleaned = _CURRENCY_PREFIX_RE.sub("", str(value))
    cleaned = cleaned.replace(".", "").replace(",", ".").strip()
    if not cleaned:
        return None

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def parse_integer(value: Cell) -> int | None:
    """Parse an integral number (``3``, ``3.0``, ``"3"``); anything else is ``None``."""
    amount = parse_currency(value)
    if amount is None or amount != amount.to_integral_value():
        return None
    return int(amount)


def clean_text(value: Cell) -> str | None:
    """Trim surrounding whitespace; blank cells become ``None``."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        # Numeric cells such as a court number typed as 76 come back as 76.0
        value = int(value)
    text = str(value).strip()
    return text or None


def collapse_whitespace(value: Cell) -> str | None:
    """Like :func:`clean_text`, with inner whitespace runs collapsed to one space."""
    text = clean_text(value)
    if text is None:
        return None
    return _WHITESPACE_RE.sub(" ", text)


def _is_marked(value: Cell) -> bool:
    if _is_number(value):
        return value == 1
    if isinstance(value, str):
        return value.strip() == "1"
    return False


def extract_marked_positions(cells: Sequence[Cell]) -> list[int] | None:
    """Return the 1-based positions of marked cells in a run of annex columns.

    A cell is marked when it holds the number 1 or the text ``"1"``.
    No marks yields ``None`` (not applicable), never an empty list.
    """
    positions = [pos for pos, cell in enumerate(cells, start=1) if _is_marked(cell)]
    return positions or None


def parse_int_set(value: Cell) -> list[int] | None:
    """Parse an annex list written as ``"1, 5, 13"`` (or a single number).

    Returns the sorted distinct codes, or ``None`` if no code could be read.
    """
    if value is None or isinstance(value, bool):
        return None

    if _is_number(value):
        code = parse_integer(value)
        return [code] if code is not None and code > 0 else None

    codes: set[int] = set()
    for token in re.split(r"[,;/\s]+", str(value)):
        if token.isdigit() and int(token) > 0:
            codes.add(int(token))
    return sorted(codes) or None
