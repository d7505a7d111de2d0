#!/usr/bin/env python3
"""
Time-series sections: monthly GMV overviews and month x dimension pivots.

Each processor takes the query-results map (query id -> rows) plus the
report meta and returns ``{"chartData": [...]}``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from ..aggregate import aggregate_by_key_and_dimension, column, ordered_unique, rows_for
from ..formatting import (
    MISSING,
    billions,
    format_bio,
    format_month_label,
    format_month_short,
    month_label_sort_key,
)
from ..models import ProcessingMeta
from ..utils.logs import report

logger = report.settings(__file__)

GMV = "SUM of GMV"
OFFICIAL_STORE = "official store"


def _month_of(row: Mapping[str, Any]) -> Optional[str]:
    month = row.get("Month")
    return str(month) if month else None


def _channel_of(row: Mapping[str, Any]) -> str:
    return str(row.get("Channel") or "Unknown")


def _plain(value: float) -> Any:
    return int(value) if float(value).is_integer() else value


# ------------------------------------------------------------------
# sales_overview
# ------------------------------------------------------------------

def sales_overview(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Total GMV per month, in billions, oldest month first."""
    rows = [r for r in rows_for(results, "fullData", "monthly_sales") if _month_of(r)]
    totals = aggregate_by_key_and_dimension(
        rows,
        key_fn=lambda r: format_month_label(_month_of(r)),
        dimension_fn=lambda r: GMV,
        measure_fn=column("totalsales"),
    )
    chart_data = [
        {"Month": label, GMV: format_bio(totals[label][GMV])}
        for label in sorted(totals, key=month_label_sort_key)
    ]
    logger.debug("sales_overview: %d rows -> %d months", len(rows), len(chart_data))
    return {"chartData": chart_data}


# ------------------------------------------------------------------
# platform_sales_value
# ------------------------------------------------------------------

def platform_sales_value(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """One row per month, one ``x.x Bio`` column per channel.

    A channel with no sales in a month shows ``"-"`` rather than ``"0.0 Bio"``.
    """
    rows = [r for r in rows_for(results, "platform_gmv") if _month_of(r)]
    by_month = aggregate_by_key_and_dimension(
        rows,
        key_fn=lambda r: format_month_label(_month_of(r)),
        dimension_fn=_channel_of,
        measure_fn=column("totalsales"),
    )
    channels = ordered_unique(_channel_of(r) for r in rows)

    chart_data: List[Dict[str, Any]] = []
    for label in sorted(by_month, key=month_label_sort_key):
        entry: Dict[str, Any] = {"Month": label}
        for channel in channels:
            value = by_month[label].get(channel, 0.0)
            entry[channel] = format_bio(value) if value > 0 else MISSING
        chart_data.append(entry)

    logger.debug("platform_sales_value: %d months x %d channels", len(chart_data), len(channels))
    return {"chartData": chart_data}


# ------------------------------------------------------------------
# store_sales_value
# ------------------------------------------------------------------

def store_sales_value(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Official-store vs other-store GMV per month (numeric billions)."""
    rows = [r for r in rows_for(results, "store_sales_value") if _month_of(r)]

    def _store_kind(row: Mapping[str, Any]) -> str:
        shop_type = str(row.get("ShopTypeV2") or "").strip().lower()
        return "OfficialStore" if shop_type == OFFICIAL_STORE else "OtherStore"

    by_month = aggregate_by_key_and_dimension(rows, _month_of, _store_kind, column("totalsales"))

    chart_data = []
    for month in sorted(by_month):
        official = by_month[month].get("OfficialStore", 0.0)
        other = by_month[month].get("OtherStore", 0.0)
        chart_data.append({
            "Month": format_month_label(month),
            "OfficialStore": billions(official),
            "OtherStore": billions(other),
            "Total": billions(official + other),
        })
    return {"chartData": chart_data}


# ------------------------------------------------------------------
# volume_sales_value
# ------------------------------------------------------------------

_UNIT_SUFFIX = re.compile(r"/gr", re.IGNORECASE)
_DISALLOWED = re.compile(r"[^A-Za-z0-9_<>+.\-]")


def normalize_volume_label(label: Any) -> str:
    """Canonical pivot key for a free-text volume range.

    ``"100 - 200ml"``, ``"100-200 ML"`` and ``"100-200ml"`` all become
    ``"100-200ml"``. Decimal commas read as points, so ``"1,5-2L"`` and
    ``"1.5-2L"`` share a key while ``"15-2L"`` keeps its own. Applying it
    twice changes nothing.
    """
    text = re.sub(r"\s+", "", str(label or "")).replace(",", ".")
    text = _UNIT_SUFFIX.sub("", text)
    return _DISALLOWED.sub("", text).lower()


def volume_sales_value(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """GMV (billions) per normalised volume range, one row per month."""
    rows = [
        r for r in rows_for(results, "volume_sales_value")
        if _month_of(r) and normalize_volume_label(r.get("volume_range"))
    ]
    by_month = aggregate_by_key_and_dimension(
        rows,
        key_fn=_month_of,
        dimension_fn=lambda r: normalize_volume_label(r.get("volume_range")),
        measure_fn=column("totalsales"),
    )
    chart_data = []
    for month in sorted(by_month):
        entry: Dict[str, Any] = {"month": format_month_short(month)}
        entry.update({label: billions(total) for label, total in by_month[month].items()})
        chart_data.append(entry)
    return {"chartData": chart_data}


# ------------------------------------------------------------------
# seasonal_patterns
# ------------------------------------------------------------------

def seasonal_patterns(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Order counts per product per month, ordered by the ``month_sort`` column."""
    rows = rows_for(results, "monthly_top_products", "monthly_product_sales", "monthly_sales")

    def _month(row: Mapping[str, Any]) -> str:
        return str(row.get("month") or "Unknown Month")

    counts = aggregate_by_key_and_dimension(
        rows,
        key_fn=_month,
        dimension_fn=lambda r: str(r.get("product_name") or "Unknown Product"),
        measure_fn=column("order_count"),
    )
    sort_keys: Dict[str, str] = {}
    for row in rows:
        sort_keys.setdefault(_month(row), str(row.get("month_sort") or ""))

    chart_data = []
    for month in sorted(counts, key=lambda m: sort_keys.get(m, "")):
        entry: Dict[str, Any] = {"Month": month, "month_sort": sort_keys.get(month, "")}
        entry.update({product: _plain(total) for product, total in counts[month].items()})
        chart_data.append(entry)

    logger.debug(
        "seasonal_patterns: %d months, %d products",
        len(chart_data), len(ordered_unique(r.get("product_name") for r in rows)),
    )
    return {"chartData": chart_data}


__all__ = [
    "sales_overview",
    "platform_sales_value",
    "store_sales_value",
    "normalize_volume_label",
    "volume_sales_value",
    "seasonal_patterns",
]
