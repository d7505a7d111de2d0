#!/usr/bin/env python3
"""
Report run loop.

Loads a report and its client, pushes every section through
:func:`reportkit.dispatch.process_section` one after another and writes the
updated sections back in a single save.

If a query fails part-way, the sections already processed are saved along
with the untouched remainder before the error is re-raised, so earlier
sections keep their fresh chartData.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from .dispatch import process_section
from .models import ProcessingMeta
from .templates import QueryTemplates
from .utils.logs import report

logger = report.settings(__file__)

ProgressCallback = Callable[[int, int], None]


def process_report(
    report_id: str,
    store: Any,
    router: Any,
    templates: Optional[QueryTemplates] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> List[Dict[str, Any]]:
    """Process every section of *report_id* and persist the result.

    *store* needs ``fetch_report``, ``fetch_client`` and ``save_sections``
    (see :class:`reportkit.connectors.supabase.SupabaseReportStore`);
    *router* needs ``run(sql, params, database)``.
    """
    report_row = store.fetch_report(report_id)
    store.fetch_client(report_row.get("client_id"))

    meta = ProcessingMeta.from_report(report_row)
    sections = list(report_row.get("sections") or [])
    total = len(sections)
    logger.info("Processing report %s: %d sections", report_id, total)

    updated: List[Dict[str, Any]] = []
    for index, section in enumerate(sections, start=1):
        try:
            updated.append(process_section(section, meta, router, templates))
        except Exception:
            logger.error("Report %s stopped at section %d/%d (%s)",
                         report_id, index, total, section.get("type"))
            store.save_sections(report_id, updated + sections[len(updated):])
            raise
        if on_progress is not None:
            on_progress(index, total)

    store.save_sections(report_id, updated)
    return updated


def run_report(
    report_id: str,
    store: Any = None,
    router: Any = None,
    templates: Optional[QueryTemplates] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """Run a report and report the outcome as a dict instead of raising.

    Store, router and templates default to the Supabase store, the
    BigQuery/ClickHouse router and the bundled ``queries.yaml``.
    """
    if not report_id:
        raise ValueError("report_id is required")

    if store is None:
        from .connectors.supabase import SupabaseReportStore
        store = SupabaseReportStore()
    if router is None:
        from .connectors.router import QueryRouter
        router = QueryRouter()
    if templates is None:
        from .templates import load_query_templates
        templates = load_query_templates()

    try:
        sections = process_report(report_id, store, router, templates, on_progress)
    except Exception as exc:
        logger.error("Report %s failed: %s", report_id, exc)
        return {"success": False, "error": str(exc)}
    return {"success": True, "updated_sections": sections}


__all__ = ["ProgressCallback", "process_report", "run_report"]
