#!/usr/bin/env python3
"""
Section dispatch and chartData merge.

``process_section`` looks up the processor for a section's ``type``, runs
the section's queries, feeds the results (keyed by query id) to the
processor and merges the returned ``chartData`` into a copy of the
section's content. Every other content field (titles, free text,
insights, query definitions) is carried over as-is.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import sections
from .models import ProcessingMeta
from .templates import QueryTemplates
from .utils.logs import report

logger = report.settings(__file__)

Processor = Callable[[Any, Optional[ProcessingMeta]], Dict[str, Any]]


class SectionType(str, Enum):
    SALES_OVERVIEW = "sales_overview"
    PLATFORM_SALES_VALUE = "platform_sales_value"
    STORE_SALES_VALUE = "store_sales_value"
    VOLUME_SALES_VALUE = "volume_sales_value"
    SEASONAL_PATTERNS = "seasonal_patterns"
    BRAND_PERFORMANCE_PLATFORM = "brand_performance_platform"
    BRAND_PERFORMANCE_SUB_CATEGORY = "brand_performance_sub_category"
    TOP_BRAND_CHANNEL = "top_brand_channel"
    TOP_CATEGORIES = "top_categories"
    TOP_RESELLER = "top_reseller"
    TOP_LISTING_PERFORMANCE = "top_listing_performance"
    CUSTOMER_PERFORMANCE = "customer_performance"
    CLICKHOUSE_CUSTOMER_PERFORMANCE = "clickhouse_customer_performance"
    PRODUCT_INSIGHTS = "product_insights"
    GEOGRAPHIC_INTELLIGENCE = "geographic_intelligence"
    PAYMENT_TERMS = "payment_terms"


PROCESSORS: Mapping[SectionType, Processor] = {
    SectionType.SALES_OVERVIEW: sections.sales_overview,
    SectionType.PLATFORM_SALES_VALUE: sections.platform_sales_value,
    SectionType.STORE_SALES_VALUE: sections.store_sales_value,
    SectionType.VOLUME_SALES_VALUE: sections.volume_sales_value,
    SectionType.SEASONAL_PATTERNS: sections.seasonal_patterns,
    SectionType.BRAND_PERFORMANCE_PLATFORM: sections.brand_performance_platform,
    SectionType.BRAND_PERFORMANCE_SUB_CATEGORY: sections.brand_performance_sub_category,
    SectionType.TOP_BRAND_CHANNEL: sections.top_brand_channel,
    SectionType.TOP_CATEGORIES: sections.top_categories,
    SectionType.TOP_RESELLER: sections.top_reseller,
    SectionType.TOP_LISTING_PERFORMANCE: sections.top_listing_performance,
    SectionType.CUSTOMER_PERFORMANCE: sections.customer_performance,
    SectionType.CLICKHOUSE_CUSTOMER_PERFORMANCE: sections.clickhouse_customer_performance,
    SectionType.PRODUCT_INSIGHTS: sections.product_insights,
    SectionType.GEOGRAPHIC_INTELLIGENCE: sections.geographic_intelligence,
    SectionType.PAYMENT_TERMS: sections.payment_terms,
}

_unhandled = [member.value for member in SectionType if member not in PROCESSORS]
if _unhandled:
    raise RuntimeError(f"Section types without a processor: {', '.join(_unhandled)}")


def resolve_processor(type_name: Any) -> Optional[Processor]:
    """Processor for *type_name*, or ``None`` when the type is not handled."""
    try:
        return PROCESSORS[SectionType(type_name)]
    except ValueError:
        return None


def section_queries(section: Mapping[str, Any], templates: Optional[QueryTemplates]) -> List[Dict[str, Any]]:
    """Queries declared on the section, else the templates for its type."""
    content = section.get("content") or {}
    declared = content.get("queries") or []
    if declared:
        return [dict(q) for q in declared]
    if templates is None:
        return []
    return [tpl.as_query() for tpl in templates.get(section.get("type"), ())]


def process_section(
    section: Mapping[str, Any],
    meta: ProcessingMeta,
    runner: Any,
    templates: Optional[QueryTemplates] = None,
) -> Dict[str, Any]:
    """Run one section through its queries and processor.

    *runner* is anything with ``run(sql, params, database) -> list[dict]``
    (normally :class:`reportkit.connectors.router.QueryRouter`). Engine
    errors propagate to the caller. The input section is not modified.
    """
    section_type = section.get("type")
    processor = resolve_processor(section_type)
    if processor is None:
        logger.warning("No processor for section type %r (section %s); leaving as-is",
                       section_type, section.get("id"))
        return copy.deepcopy(dict(section))

    queries = section_queries(section, templates)
    if not queries:
        logger.info("Section %s (%s) has no queries; leaving as-is", section.get("id"), section_type)
        return copy.deepcopy(dict(section))

    params = meta.query_params()
    results: Dict[str, Any] = {}
    for query in queries:
        engine = meta.engine_for(query.get("database"))
        logger.debug("Section %s: running %s on %s", section.get("id"), query.get("id"), engine)
        results[query.get("id")] = runner.run(query.get("query", ""), params, engine)

    processed = processor(results, meta)

    updated = copy.deepcopy(dict(section))
    content = dict(updated.get("content") or {})
    content["chartData"] = processed.get("chartData")
    updated["content"] = content
    return updated


__all__ = [
    "Processor",
    "SectionType",
    "PROCESSORS",
    "resolve_processor",
    "section_queries",
    "process_section",
]
