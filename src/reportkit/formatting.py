"""
Display formatting for section chartData.

Every helper here is total: any input (``None``, malformed strings, ``NaN``)
produces a string, never an exception. Unit suffixes follow the Indonesian
convention used in the reports (``Bio`` = billion, ``Mio`` = million).
"""

from __future__ import annotations

import math
from typing import Any, Optional

MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MISSING = "-"


# ------------------------------------------------------------------
# Numeric coercion
# ------------------------------------------------------------------

def to_number(value: Any) -> float:
    """Coerce a raw measure to ``float``; anything unusable becomes ``0.0``."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, ArithmeticError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_int(value: Any) -> int:
    """Integer form of :func:`to_number` (truncates toward zero)."""
    return int(to_number(value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a spreadsheet does (0.5 goes up), not banker's rounding."""
    scale = 10 ** digits
    return math.floor(abs(value) * scale + 0.5) / scale * (1 if value >= 0 else -1)


# ------------------------------------------------------------------
# Magnitudes
# ------------------------------------------------------------------

# (scale, suffix, unit below, decimals shown in the unit below)
_MAGNITUDE_TIERS = ((1e9, "Bio", 1e6, 1), (1e6, "Mio", 1e3, 1), (1e3, "K", 1.0, 2))
_GMV_TIERS = ((1e9, "Bio", 1e6, 1), (1e6, "Mio", 1.0, 2))


def _tier(size: float, tiers: tuple) -> Optional[tuple]:
    """Largest tier *size* reaches, counting values that round up into it.

    ``999_950`` reads ``1000.0 K`` at one decimal, so it belongs to ``Mio``.
    """
    for scale, suffix, below, digits in tiers:
        if size >= scale or float(f"{size / below:.{digits}f}") * below >= scale:
            return scale, suffix
    return None


def format_magnitude(value: Any) -> str:
    """Scale to ``Bio`` / ``Mio`` / ``K`` with one decimal.

    Values below 1000 render plainly: integers without decimals, everything
    else with two. Negative values keep their sign.
    """
    number = to_number(value)
    tier = _tier(abs(number), _MAGNITUDE_TIERS)
    if tier:
        scale, suffix = tier
        return f"{number / scale:.1f} {suffix}"
    if number == int(number):
        return str(int(number))
    return f"{number:.2f}"


def format_bio(value: Any) -> str:
    """Always in billions: ``1500000000 -> '1.5 Bio'``."""
    return f"{to_number(value) / 1e9:.1f} Bio"


def format_gmv(value: Any) -> str:
    """Bio / Mio tiers for listing tables; two decimals below a million."""
    number = to_number(value)
    tier = _tier(number, _GMV_TIERS)
    if tier:
        scale, suffix = tier
        return f"{number / scale:.1f} {suffix}"
    return f"{number:.2f}"


def billions(value: Any, digits: int = 1) -> float:
    """Numeric chart value in billions, rounded for axis labels."""
    return round(to_number(value) / 1e9, digits)


# ------------------------------------------------------------------
# Currency
# ------------------------------------------------------------------

def format_rupiah_millions(value: Any) -> str:
    return f"Rp {to_number(value) / 1e6:.1f}M"


def format_rupiah_billions(value: Any) -> str:
    return f"Rp {to_number(value) / 1e9:.1f}B"


def format_idr_k(value: Any) -> str:
    """``12345 -> 'IDR 12K'``; amounts under a thousand are left whole."""
    number = to_int(value)
    if number >= 1000:
        return f"IDR {int(round_half_up(number / 1000))}K"
    return f"IDR {number}"


def format_idr(value: Any) -> str:
    """Indonesian grouping: ``1234567.5 -> 'Rp 1.234.567,5'`` (max 3 decimals)."""
    text = f"{to_number(value):,.3f}".rstrip("0").rstrip(".")
    return "Rp " + text.translate(str.maketrans({",": ".", ".": ","}))


# ------------------------------------------------------------------
# Percentages
# ------------------------------------------------------------------

def format_percent(value: Optional[Any], signed: bool = False, digits: int = 2) -> str:
    """Render ``'12.34%'``; ``None`` means "no comparison" and renders ``'-'``.

    With *signed* positive values get a leading ``+``.
    """
    if value is None:
        return MISSING
    number = to_number(value)
    text = f"{number:.{digits}f}%"
    if signed and number > 0:
        return "+" + text
    return text


# ------------------------------------------------------------------
# Months
# ------------------------------------------------------------------

def parse_month_key(ym: Any) -> Optional[tuple[int, int]]:
    """``'2024-01' -> (2024, 1)``; ``None`` when not a valid month key."""
    if not isinstance(ym, str):
        return None
    parts = ym.strip().split("-")
    if len(parts) < 2:
        return None
    try:
        year, month = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not 1 <= month <= 12:
        return None
    return year, month


def format_month_label(ym: Any, sep: str = "-") -> str:
    """``'2024-01' -> 'Jan-2024'`` (or ``'Jan 2024'`` with ``sep=' '``).

    Unparseable input is returned unchanged.
    """
    parsed = parse_month_key(ym)
    if parsed is None:
        return "" if ym is None else str(ym)
    year, month = parsed
    return f"{MONTH_ABBR[month - 1]}{sep}{year}"


def format_month_short(ym: Any) -> str:
    """``'2024-01' -> 'Jan'``."""
    parsed = parse_month_key(ym)
    if parsed is None:
        return "" if ym is None else str(ym)
    return MONTH_ABBR[parsed[1] - 1]


def month_label_sort_key(label: str) -> tuple[int, int]:
    """Chronological key for ``'Mon-YYYY'`` / ``'Mon YYYY'`` labels.

    Uses the month-name table, so ``Dec-2024`` sorts before ``Jan-2025``.
    Unknown labels sort last.
    """
    name, _, year = label.replace(" ", "-").partition("-")
    try:
        return int(year), MONTH_ABBR.index(name)
    except ValueError:
        return (10 ** 6, 0)


__all__ = [
    "MONTH_ABBR",
    "MISSING",
    "to_number",
    "to_int",
    "round_half_up",
    "format_magnitude",
    "format_bio",
    "format_gmv",
    "billions",
    "format_rupiah_millions",
    "format_rupiah_billions",
    "format_idr_k",
    "format_idr",
    "format_percent",
    "parse_month_key",
    "format_month_label",
    "format_month_short",
    "month_label_sort_key",
]
