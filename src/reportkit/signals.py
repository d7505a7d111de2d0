"""
Performance-signal classification.

Maps a (brand growth, market growth) pair onto a categorical label. The
branch structure is fixed; only the label text differs between the
platform-level and sub-category-level tables.

Branch order (market condition first, then brand within it):

    market < 0:
        brand > 0                         -> resilient
        brand < 0 and brand >= market     -> soft_lagging
        brand < 0 and brand <  market     -> losing_ground
        otherwise                         -> missing_out
    market >= 0:
        brand > 0 and brand >= market     -> winning
        brand > 0 and brand <  market     -> lagging
        otherwise (brand <= 0)            -> missing_out
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SignalLabels:
    resilient: str
    soft_lagging: str
    losing_ground: str
    winning: str
    lagging: str
    missing_out: str


PLATFORM_SIGNALS = SignalLabels(
    resilient="Resilient Performer",
    soft_lagging="Lagging",
    losing_ground="Losing Ground",
    winning="Winning",
    lagging="Lagging",
    missing_out="Missing Out",
)

# Same branches as PLATFORM_SIGNALS, sub-category wording.
SUBCATEGORY_SIGNALS = SignalLabels(
    resilient="Resilient in Soft Market",
    soft_lagging="Resilient in Soft Market",
    losing_ground="Underperforming",
    winning="Aligned Growth",
    lagging="Suboptimal Growth",
    missing_out="Underperforming",
)


def classify_signal(
    brand_growth: Optional[float],
    market_growth: Optional[float],
    labels: SignalLabels = PLATFORM_SIGNALS,
) -> str:
    """Return the signal label for the growth pair.

    ``None`` market growth (no prior market data) is read as a flat market.
    ``None`` brand growth cannot be positive or negative, so it lands on the
    ``missing_out`` label of whichever branch applies.
    """
    market = 0.0 if market_growth is None else market_growth

    if market < 0:
        if brand_growth is None:
            return labels.missing_out
        if brand_growth > 0:
            return labels.resilient
        if brand_growth < 0 and brand_growth >= market:
            return labels.soft_lagging
        if brand_growth < 0:
            return labels.losing_ground
        return labels.missing_out

    if brand_growth is not None and brand_growth > 0:
        if brand_growth >= market:
            return labels.winning
        return labels.lagging
    return labels.missing_out


__all__ = [
    "SignalLabels",
    "PLATFORM_SIGNALS",
    "SUBCATEGORY_SIGNALS",
    "classify_signal",
]
