#!/usr/bin/env python3
"""
Payment-terms analysis.

Inputs
------
payment_analysis : one row per (payment_term, customer_category) with
                   order_count, total_sales, avg_order_value,
                   unique_customers, total_quantity.
payment_trends   : one row per (payment_term, month) with monthly_sales,
                   avg_order_value, order_count.

Risk tiers come from ``PAYMENT_TERM_RISK``, keyed by normalised term text
("net 30", "30 days", "cod", ...). Terms not in the table get
``UNRECOGNISED_TERM`` and a warning in the log.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from ..aggregate import coerce_numeric, rows_for
from ..formatting import format_idr, format_rupiah_billions, format_rupiah_millions
from ..models import ProcessingMeta
from ..utils.logs import report

logger = report.settings(__file__)


# ------------------------------------------------------------------
# Risk lookup
# ------------------------------------------------------------------

@dataclass(frozen=True)
class TermRisk:
    risk_level: str
    cash_flow_impact: str
    collection_days: Optional[int]
    recommended_action: str


def _risk_for_days(days: int) -> TermRisk:
    if days <= 7:
        return TermRisk("Low", "Positive", days, "Continue current terms")
    if days <= 15:
        return TermRisk("Medium", "Moderate", days, "Continue current terms")
    return TermRisk("High", "Delayed", days, "Monitor closely")


def _build_risk_table() -> Dict[str, TermRisk]:
    table: Dict[str, TermRisk] = {}
    for alias in ("cash", "cod", "cash on delivery", "cbd", "cash before delivery", "prepaid"):
        table[alias] = TermRisk("Low", "Positive", 0, "Continue current terms")
    for days in (7, 14, 15, 30, 45, 60):
        for alias in (f"net {days}", f"{days} days", f"top {days}", f"{days} hari"):
            table[alias] = _risk_for_days(days)
    return table


PAYMENT_TERM_RISK: Mapping[str, TermRisk] = _build_risk_table()
UNRECOGNISED_TERM = TermRisk("Medium", "Unverified", None, "Review term")


def normalize_term(term: Any) -> str:
    """``"NET-30 "`` -> ``"net 30"``."""
    text = str(term or "").lower().replace("-", " ")
    return re.sub(r"\s+", " ", text).strip()


def term_risk(term: Any) -> TermRisk:
    risk = PAYMENT_TERM_RISK.get(normalize_term(term))
    if risk is None:
        logger.warning("Unrecognised payment term %r; using fallback risk tier", term)
        return UNRECOGNISED_TERM
    return risk


# ------------------------------------------------------------------
# Frames
# ------------------------------------------------------------------

ANALYSIS_MEASURES = ("order_count", "total_sales", "avg_order_value", "unique_customers", "total_quantity")
TREND_MEASURES = ("monthly_sales", "avg_order_value", "order_count")


def _frame(rows: List[Mapping[str, Any]], labels: List[str], measures: tuple) -> pd.DataFrame:
    df = pd.DataFrame([{c: row.get(c) for c in (*labels, *measures)} for row in rows])
    for col in labels:
        df[col] = df[col].fillna("Unknown").astype(str)
    for col in measures:
        df[col] = coerce_numeric(df[col]).values
    return df


def _share(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _terms_overview(df: pd.DataFrame) -> List[Dict[str, Any]]:
    grouped = df.groupby("payment_term", sort=False)
    totals = grouped[["order_count", "total_sales", "unique_customers"]].sum()
    overview = []
    for term, row in totals.iterrows():
        orders = int(row["order_count"])
        sales = float(row["total_sales"])
        avg_order = sales / orders if orders > 0 else 0.0
        categories = (
            df[df["payment_term"] == term]
            .groupby("customer_category", sort=False)["unique_customers"].sum()
        )
        overview.append({
            "paymentTerm": term,
            "orderCount": orders,
            "totalSales": sales,
            "uniqueCustomers": int(row["unique_customers"]),
            "avgOrderValue": avg_order,
            "formattedSales": format_rupiah_millions(sales),
            "formattedAvgOrder": format_idr(avg_order),
            "customerCategories": {str(k): int(v) for k, v in categories.items()},
        })
    overview.sort(key=lambda t: t["totalSales"], reverse=True)
    return overview


def _preference_analysis(df: pd.DataFrame) -> List[Dict[str, Any]]:
    analysis = []
    for category, group in df.groupby("customer_category", sort=False):
        by_term = group.groupby("payment_term", sort=False)["total_sales"].sum()
        category_total = float(by_term.sum())
        preferences = [
            {"paymentTerm": term, "sales": float(sales), "percentage": _share(float(sales), category_total)}
            for term, sales in by_term.items()
        ]
        preferences.sort(key=lambda p: p["percentage"], reverse=True)
        analysis.append({
            "customerCategory": category,
            "totalSales": category_total,
            "preferences": preferences,
            "preferredTerm": preferences[0]["paymentTerm"],
        })
    return analysis


def _trend_analysis(rows: List[Mapping[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    if not rows:
        return {}
    df = _frame(rows, ["payment_term", "month"], TREND_MEASURES)
    trends: Dict[str, List[Dict[str, Any]]] = {}
    for term, group in df.groupby("payment_term", sort=False):
        trends[term] = [
            {
                "month": r["month"],
                "monthlySales": float(r["monthly_sales"]),
                "avgOrderValue": float(r["avg_order_value"]),
                "orderCount": int(r["order_count"]),
            }
            for _, r in group.sort_values("month", kind="stable").iterrows()
        ]
    return trends


def _impact(term: Mapping[str, Any]) -> Dict[str, Any]:
    risk = term_risk(term["paymentTerm"])
    return {
        **term,
        "riskLevel": risk.risk_level,
        "cashFlowImpact": risk.cash_flow_impact,
        "averageCollectionPeriod": risk.collection_days,
        "creditExposure": term["totalSales"],
        "recommendedAction": risk.recommended_action,
    }


# ------------------------------------------------------------------
# Processor
# ------------------------------------------------------------------

def payment_terms(results: Any, meta: Optional[ProcessingMeta] = None) -> Dict[str, Any]:
    analysis_rows = rows_for(results, "payment_analysis")
    trend_rows = rows_for(results, "payment_trends") if isinstance(results, Mapping) else []
    if not analysis_rows and not trend_rows:
        return {"chartData": {}}

    if analysis_rows:
        df = _frame(analysis_rows, ["payment_term", "customer_category"], ANALYSIS_MEASURES)
        overview = _terms_overview(df)
        preference_analysis = _preference_analysis(df)
    else:
        overview, preference_analysis = [], []

    total_sales = sum(t["totalSales"] for t in overview)
    total_orders = sum(t["orderCount"] for t in overview)
    distribution = [
        {
            **term,
            "salesShare": _share(term["totalSales"], total_sales),
            "orderShare": _share(term["orderCount"], total_orders),
        }
        for term in overview
    ]
    impact_analysis = [_impact(term) for term in distribution]
    trend_analysis = _trend_analysis(trend_rows)

    exposure = sum(t["creditExposure"] for t in impact_analysis)
    riskiest = next((t["paymentTerm"] for t in impact_analysis if t["riskLevel"] == "High"), "None")
    payment_metrics = {
        "totalPaymentTerms": len(distribution),
        "dominantTerm": distribution[0]["paymentTerm"] if distribution else "N/A",
        "riskiestTerm": riskiest,
        "totalCreditExposure": exposure,
        "avgOrderValueAllTerms": total_sales / total_orders if total_orders > 0 else 0.0,
        "formattedCreditExposure": format_rupiah_billions(exposure),
    }

    logger.debug(
        "payment_terms: %d terms, %d categories, %d trend series",
        len(overview), len(preference_analysis), len(trend_analysis),
    )
    return {
        "chartData": {
            "termsOverview": overview,
            "termsDistribution": distribution,
            "preferenceAnalysis": preference_analysis,
            "trendAnalysis": trend_analysis,
            "impactAnalysis": impact_analysis,
            "paymentMetrics": payment_metrics,
            "visualizationData": {
                "distributionData": [
                    {"term": t["paymentTerm"], "sales": t["totalSales"], "percentage": round(t["salesShare"], 1)}
                    for t in distribution
                ],
                "preferencesData": preference_analysis,
                "trendsData": trend_analysis,
            },
        }
    }


__all__ = [
    "TermRisk",
    "PAYMENT_TERM_RISK",
    "UNRECOGNISED_TERM",
    "normalize_term",
    "term_risk",
    "payment_terms",
]
