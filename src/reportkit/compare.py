"""Latest-vs-previous period comparison over bucketed series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Mapping, Optional, Sequence, Tuple, Union

UNCHANGED = "unchanged"


@dataclass(frozen=True)
class PeriodComparison:
    current: float
    previous: float
    growth_pct: Optional[float]


def growth_pct(current: float, previous: float) -> Optional[float]:
    """Percent change, or ``None`` when there is no positive base to compare to."""
    if previous is None or previous <= 0:
        return None
    return (current - previous) / previous * 100


def latest_two_keys(
    series: Mapping[Hashable, Mapping[Hashable, float]],
) -> Tuple[Optional[Hashable], Optional[Hashable]]:
    """Return ``(latest, previous)`` keys of *series*.

    Keys are sorted across the whole series; month keys (``YYYY-MM``) sort
    chronologically as strings. Missing slots are ``None``.
    """
    keys = sorted((k for k in series.keys() if k is not None), key=str)
    latest = keys[-1] if keys else None
    previous = keys[-2] if len(keys) > 1 else None
    return latest, previous


def compare_latest_to_previous(
    series: Mapping[Hashable, Mapping[Hashable, float]],
    dimension: Hashable,
    keys: Optional[Sequence[Optional[Hashable]]] = None,
) -> PeriodComparison:
    """Compare *dimension* between the two most recent keys.

    Pass *keys* as ``(latest, previous)`` to compare on a window taken from a
    different series (e.g. a brand series on the market's months).
    """
    latest, previous = keys if keys is not None else latest_two_keys(series)
    current_value = series.get(latest, {}).get(dimension, 0.0) if latest is not None else 0.0
    previous_value = series.get(previous, {}).get(dimension, 0.0) if previous is not None else 0.0
    return PeriodComparison(
        current=current_value,
        previous=previous_value,
        growth_pct=growth_pct(current_value, previous_value),
    )


def rank_map(cells: Mapping[Hashable, float]) -> Dict[Hashable, int]:
    """1-based ranks by value, highest first; ties keep input order."""
    ordered = sorted(cells.items(), key=lambda kv: kv[1], reverse=True)
    return {name: idx for idx, (name, _) in enumerate(ordered, start=1)}


def rank_change(previous_rank: Optional[int], latest_rank: Optional[int]) -> Union[int, str]:
    """Positions moved up (positive) or down (negative) since the previous period.

    Equal ranks, or a rank missing on either side, give ``"unchanged"``.
    """
    if not previous_rank or not latest_rank:
        return UNCHANGED
    diff = previous_rank - latest_rank
    return diff if diff else UNCHANGED


__all__ = [
    "UNCHANGED",
    "PeriodComparison",
    "growth_pct",
    "latest_two_keys",
    "compare_latest_to_previous",
    "rank_map",
    "rank_change",
]
