"""Shared types passed between the run loop, dispatch and processors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_DATABASE = "bigquery"


@dataclass(frozen=True)
class ProcessingMeta:
    """Report-level context every section processor receives.

    Attributes:
        client_id:       Client the report belongs to (bound as ``clientId``).
        period:          Free-form reporting period (bound as ``period``).
        brand_filter:    Comma-separated brand allow-list, e.g. ``"Erha, Wardah"``.
        dataset:         Optional dataset hint stored on the report.
        database_source: Report-level default engine for queries that do not
                         declare one.
    """
    client_id: Optional[str] = None
    period: Optional[str] = None
    brand_filter: Optional[str] = None
    dataset: Optional[str] = None
    database_source: Optional[str] = None

    @classmethod
    def from_report(cls, report: Mapping[str, Any]) -> "ProcessingMeta":
        return cls(
            client_id=report.get("client_id"),
            period=report.get("period"),
            brand_filter=report.get("brand_filter") or report.get("brandFilter"),
            dataset=report.get("dataset"),
            database_source=report.get("database_source"),
        )

    @property
    def brands(self) -> List[str]:
        """Trimmed, non-empty entries of :attr:`brand_filter`."""
        if not self.brand_filter:
            return []
        return [b.strip() for b in str(self.brand_filter).split(",") if b.strip()]

    def query_params(self) -> Dict[str, Any]:
        return {"clientId": self.client_id, "period": self.period}

    def engine_for(self, declared: Optional[str]) -> str:
        return (declared or self.database_source or DEFAULT_DATABASE).lower()


__all__ = ["DEFAULT_DATABASE", "ProcessingMeta"]
