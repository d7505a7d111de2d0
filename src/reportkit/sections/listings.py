#!/usr/bin/env python3
"""
Single-pass table sections.

No period comparison happens here: each row is renamed into the display
schema and its money columns are formatted (``Bio``/``Mio``, ``IDR nK``,
``Rp x.xM``).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..aggregate import first_field, rows_for, unwrap
from ..formatting import (
    format_gmv,
    format_idr_k,
    format_percent,
    format_rupiah_millions,
    to_int,
    to_number,
)
from ..models import ProcessingMeta

ZERO_RUPIAH = "Rp 0M"


def top_reseller(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    chart_data = [
        {
            "ShopName": item.get("ShopName"),
            "Province": item.get("Province"),
            "Channel": item.get("Channel"),
            "ShopUrl": item.get("ShopUrl"),
            "Total Sales": format_gmv(item.get("Gmv")),
            "Units Sold": str(to_int(item.get("UnitSold"))),
            "AVG Sale Price": format_idr_k(item.get("avgSalePrice")),
        }
        for item in rows_for(results, "top_reseller")
    ]
    return {"chartData": chart_data}


def top_listing_performance(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    chart_data = []
    for item in rows_for(results, "top_listing_performance"):
        data = unwrap(item)
        chart_data.append({
            "Platform": data.get("channel") or "",
            "Listing Name": data.get("ListingName") or "",
            "GMV (Bio)": format_gmv(data.get("GMV")),
            "% of Brand GMV": format_percent(to_number(data.get("pct_of_brand_gmv"))),
            "QoQ Growth": format_percent(data.get("qoq_growth_pct")),
        })
    return {"chartData": chart_data}


def _rupiah_or_zero(value: Any) -> str:
    return format_rupiah_millions(value) if value else ZERO_RUPIAH


def customer_performance(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    chart_data = [
        {
            "Customer": row.get("customer_name") or "Unknown Customer",
            "Total Sales": _rupiah_or_zero(row.get("total_sales")),
        }
        for row in rows_for(results, "top_customers")
    ]
    return {"chartData": chart_data}


def clickhouse_customer_performance(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Same table as :func:`customer_performance`, fed by the ClickHouse query."""
    chart_data = [
        {
            "Customer": row.get("customer_name") or "Unknown",
            "Total Sales": format_rupiah_millions(row.get("total_sales")),
        }
        for row in rows_for(results, "top_customers_ch")
    ]
    return {"chartData": chart_data}


def product_insights(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    chart_data = [
        {
            "Product": row.get("product_name") or "Unknown Product",
            "Total Revenue": _rupiah_or_zero(row.get("total_revenue")),
        }
        for row in rows_for(results, "top_products")
    ]
    return {"chartData": chart_data}


def geographic_intelligence(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    """Sales per location; pre-formatted strings pass through, raw numbers get ``Rp x.xM``."""
    chart_data = []
    for row in rows_for(results, "top_locations"):
        sales = first_field(row, "Total_Sales", "Total Sales", "total_sales", default=ZERO_RUPIAH)
        chart_data.append({
            "Location": first_field(row, "Location", "location", default="Unknown"),
            "Total Sales": sales if isinstance(sales, str) else format_rupiah_millions(sales),
        })
    return {"chartData": chart_data}


__all__ = [
    "top_reseller",
    "top_listing_performance",
    "customer_performance",
    "clickhouse_customer_performance",
    "product_insights",
    "geographic_intelligence",
]
