#!/usr/bin/env python3
"""
Brand-versus-market sections.

``brand_performance_platform`` and ``brand_performance_sub_category`` bucket
GMV twice per (dimension, month): once for the whole market and once for the
brands in ``meta.brand_filter``. The latest two months of the *market* series
define the comparison window for both, so a brand that sold nothing last
month still gets compared on the same months as its market.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..aggregate import (
    aggregate_by_key_and_dimension,
    column,
    first_field,
    ordered_unique,
    rows_for,
    unwrap,
)
from ..compare import PeriodComparison, compare_latest_to_previous, latest_two_keys
from ..formatting import format_bio, format_gmv, format_percent
from ..models import ProcessingMeta
from ..signals import PLATFORM_SIGNALS, SUBCATEGORY_SIGNALS, SignalLabels, classify_signal
from ..utils.logs import report

logger = report.settings(__file__)


@dataclass(frozen=True)
class BrandMarketComparison:
    dimension: str
    brand: PeriodComparison
    market: PeriodComparison

    @property
    def brand_share(self) -> float:
        if self.market.current <= 0:
            return 0.0
        return self.brand.current / self.market.current * 100

    def signal(self, labels: SignalLabels) -> str:
        return classify_signal(self.brand.growth_pct, self.market.growth_pct, labels)


def compare_brand_to_market(
    rows: List[Mapping[str, Any]],
    dimension_column: str,
    brands: List[str],
) -> List[BrandMarketComparison]:
    """Brand and market period comparisons per value of *dimension_column*."""

    def _dimension(row: Mapping[str, Any]) -> str:
        return str(row.get(dimension_column) or "Unknown")

    def _month(row: Mapping[str, Any]) -> Optional[str]:
        return str(row["Month"]) if row.get("Month") else None

    allowed = set(brands)
    brand_rows = [r for r in rows if str(r.get("Brand") or "").strip() in allowed]

    market = aggregate_by_key_and_dimension(rows, _month, _dimension, column("totalsales"))
    brand = aggregate_by_key_and_dimension(brand_rows, _month, _dimension, column("totalsales"))
    window = latest_two_keys(market)

    return [
        BrandMarketComparison(
            dimension=dimension,
            brand=compare_latest_to_previous(brand, dimension, window),
            market=compare_latest_to_previous(market, dimension, window),
        )
        for dimension in ordered_unique(_dimension(r) for r in rows)
    ]


def _performance_row(label_column: str, item: BrandMarketComparison, labels: SignalLabels) -> Dict[str, str]:
    return {
        label_column: item.dimension,
        "Brand GMV (Bio)": format_bio(item.brand.current),
        "Brand Share (%)": format_percent(item.brand_share),
        "QoQ Growth": format_percent(item.brand.growth_pct),
        "Market Growth": format_percent(item.market.growth_pct),
        "Performance Signal": item.signal(labels),
    }


def brand_performance_platform(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Brand GMV, share, growth and signal per platform."""
    meta = meta or ProcessingMeta()
    rows = rows_for(results, "brand_performance_platform")
    comparisons = compare_brand_to_market(rows, "Channel", meta.brands)
    chart_data = [_performance_row("Platform", item, PLATFORM_SIGNALS) for item in comparisons]
    logger.debug("brand_performance_platform: %d platforms for %s", len(chart_data), meta.brands)
    return {"chartData": chart_data}


def brand_performance_sub_category(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Same table per sub-category, limited to where the brand sold last month.

    Rows are ordered by the brand's latest GMV, largest first.
    """
    meta = meta or ProcessingMeta()
    rows = rows_for(results, "brand_performance_sub_category")
    comparisons = [
        item for item in compare_brand_to_market(rows, "SubCategory", meta.brands)
        if item.brand.current > 0
    ]
    comparisons.sort(key=lambda item: item.brand.current, reverse=True)
    chart_data = [_performance_row("Subcategory", item, SUBCATEGORY_SIGNALS) for item in comparisons]
    logger.debug("brand_performance_sub_category: %d sub-categories", len(chart_data))
    return {"chartData": chart_data}


def _first_present(data: Mapping[str, Any], *names: str) -> Any:
    # 0 growth is kept; None means no prior month
    for name in names:
        if data.get(name) is not None:
            return data[name]
    return None


def top_brand_channel(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Top brands per channel with GMV and signed month-over-month growth."""
    items = rows_for(results, "top_brand_channel", "top_brand_by_channel")
    chart_data = []
    for item in items:
        data = unwrap(item)
        chart_data.append({
            "Channel": first_field(data, "Channel", "channel", default=""),
            "Brand": first_field(data, "Brand", "brand", "BrandName", default=""),
            "GMV (Bio)": format_gmv(
                first_field(data, "GMV", "totalsales", "gmv", "TotalSales", "Value", default=0)
            ),
            "Monthly Growth (%)": format_percent(
                _first_present(data, "MonthlyGrowthPct", "monthly_growth_pct", "MonthlyGrowth", "growth"),
                signed=True,
            ),
        })
    return {"chartData": chart_data}


__all__ = [
    "BrandMarketComparison",
    "compare_brand_to_market",
    "brand_performance_platform",
    "brand_performance_sub_category",
    "top_brand_channel",
]
