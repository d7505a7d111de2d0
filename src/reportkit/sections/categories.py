#!/usr/bin/env python3
"""
Top sub-categories per channel with rank movement.

Each channel is ranked independently on its own latest and previous month.
Rankings are recomputed from the rows on every run.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..aggregate import aggregate_by_key_and_dimension, column, rows_for
from ..compare import compare_latest_to_previous, latest_two_keys, rank_change, rank_map
from ..formatting import billions
from ..models import ProcessingMeta
from ..utils.logs import report

logger = report.settings(__file__)


def _subcategory(row: Mapping[str, Any]) -> str:
    return str(row.get("SubCategory") or row.get("category") or "")


def _month(row: Mapping[str, Any]) -> Optional[str]:
    return str(row["Month"]) if row.get("Month") else None


def _channel_categories(rows: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    series = aggregate_by_key_and_dimension(rows, _month, _subcategory, column("totalsales"))
    latest, previous = latest_two_keys(series)
    if latest is None:
        return []

    latest_sales = series[latest]
    latest_rank = rank_map(latest_sales)
    previous_rank = rank_map(series.get(previous, {})) if previous is not None else {}

    analysis: Dict[str, str] = {}
    for row in rows:
        if _month(row) == latest and row.get("analysis"):
            analysis.setdefault(_subcategory(row), str(row["analysis"]))

    categories = []
    for name, sales in sorted(latest_sales.items(), key=lambda kv: kv[1], reverse=True):
        comparison = compare_latest_to_previous(series, name, (latest, previous))
        growth = comparison.growth_pct if comparison.growth_pct is not None else 0.0
        categories.append({
            "category": name,
            "gmv": billions(sales),
            "rankChange": rank_change(previous_rank.get(name), latest_rank.get(name)),
            "growth": round(growth, 2),
            "analysis": analysis.get(name, ""),
        })
    return categories


def top_categories(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """``{channel: {"insights": [], "categories": [...]}}`` ordered by latest GMV."""
    by_channel: Dict[str, List[Mapping[str, Any]]] = {}
    for row in rows_for(results, "top_categories"):
        by_channel.setdefault(str(row.get("Channel") or "Unknown"), []).append(row)

    chart_data = {
        channel: {"insights": [], "categories": _channel_categories(rows)}
        for channel, rows in by_channel.items()
    }
    logger.debug("top_categories: %d channels", len(chart_data))
    return {"chartData": chart_data}


__all__ = ["top_categories"]
