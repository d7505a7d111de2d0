"""Group-by reducers that bucket raw query rows into sparse nested series."""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping

import numpy as np
import pandas as pd

from .formatting import to_number

RawRow = Mapping[str, Any]
Series = Dict[Hashable, Dict[Hashable, float]]


def _clean_measure(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().replace(",", "")
    if isinstance(value, (int, float)):
        return value
    # Decimal (BigQuery NUMERIC), None and anything exotic
    return to_number(value)


def coerce_numeric(values: Iterable[Any]) -> pd.Series:
    """Vectorised measure coercion: malformed, missing and infinite -> 0.0."""
    series = pd.Series(list(values), dtype=object).map(_clean_measure)
    numeric = pd.to_numeric(series, errors="coerce")
    return numeric.replace([np.inf, -np.inf], np.nan).fillna(0).astype(float)


def column(name: str, default: Any = None) -> Callable[[RawRow], Any]:
    """Accessor for a single row field."""
    return lambda row: row.get(name, default)


def first_field(row: RawRow, *names: str, default: Any = None) -> Any:
    """First truthy value among *names* (column aliases differ per query)."""
    for name in names:
        value = row.get(name)
        if value:
            return value
    return default


def unwrap(item: Any) -> RawRow:
    """Rows exported through automation tools arrive as ``{"json": {...}}``."""
    if isinstance(item, Mapping) and isinstance(item.get("json"), Mapping):
        return item["json"]
    return item


def _none_if_nan(value: Any) -> Any:
    # groupby(dropna=False) hands back missing keys as NaN
    return None if isinstance(value, float) and np.isnan(value) else value


def aggregate_by_key_and_dimension(
    rows: Iterable[RawRow],
    key_fn: Callable[[RawRow], Hashable],
    dimension_fn: Callable[[RawRow], Hashable],
    measure_fn: Callable[[RawRow], Any],
) -> Series:
    """Sum *measure_fn* into ``{key: {dimension: total}}``.

    Rows are visited once. Only (key, dimension) pairs present in the input
    appear in the result; row order does not change the result.
    """
    records = [(key_fn(row), dimension_fn(row), measure_fn(row)) for row in rows]
    if not records:
        return {}

    frame = pd.DataFrame.from_records(records, columns=["key", "dimension", "measure"])
    frame["measure"] = coerce_numeric(frame["measure"])
    totals = frame.groupby(["key", "dimension"], sort=False, dropna=False)["measure"].sum()

    series: Series = {}
    for (key, dimension), total in totals.items():
        series.setdefault(_none_if_nan(key), {})[_none_if_nan(dimension)] = float(total)
    return series


def ordered_unique(values: Iterable[Hashable]) -> List[Hashable]:
    """Distinct values in first-seen order."""
    return list(dict.fromkeys(values))


def rows_for(results: Any, *keys: str) -> List[Dict[str, Any]]:
    """Pick the first list found under *keys* in a query-results map.

    A bare list is accepted as-is; ``None``, missing keys or non-list values
    give ``[]``. Rows that are not mappings are dropped.
    """
    if isinstance(results, list):
        candidate = results
    else:
        candidate = None
        if isinstance(results, Mapping):
            for key in keys:
                value = results.get(key)
                if isinstance(value, list):
                    candidate = value
                    break
    if not candidate:
        return []
    return [row for row in candidate if isinstance(row, Mapping)]


__all__ = [
    "coerce_numeric",
    "column",
    "first_field",
    "unwrap",
    "aggregate_by_key_and_dimension",
    "ordered_unique",
    "rows_for",
]
