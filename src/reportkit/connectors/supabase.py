#!/usr/bin/env python3
"""Report and client rows stored in Supabase (``reports`` / ``clients`` tables)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from reportkit.utils.logs import report

from .config import SupabaseAuth

logger = report.settings(__file__)

REPORTS_TABLE = "reports"
CLIENTS_TABLE = "clients"


class ReportNotFoundError(LookupError):
	pass


class ClientNotFoundError(LookupError):
	pass


class SupabaseReportStore:
	def __init__(self, client: Optional[Client] = None, auth: Optional[SupabaseAuth] = None) -> None:
		if client is None:
			auth = auth or SupabaseAuth.load()
			client = create_client(auth.url, auth.key)
		self.client = client

	def _first(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
		response = self.client.table(table).select("*").eq("id", row_id).limit(1).execute()
		rows = response.data or []
		return rows[0] if rows else None

	def fetch_report(self, report_id: str) -> Dict[str, Any]:
		row = self._first(REPORTS_TABLE, report_id)
		if row is None:
			raise ReportNotFoundError(f"Report not found: {report_id}")
		return row

	def fetch_client(self, client_id: str) -> Dict[str, Any]:
		row = self._first(CLIENTS_TABLE, client_id)
		if row is None:
			raise ClientNotFoundError(f"Client not found: {client_id}")
		return row

	def save_sections(self, report_id: str, sections: List[Dict[str, Any]]) -> None:
		self.client.table(REPORTS_TABLE).update({"sections": sections}).eq("id", report_id).execute()
		logger.info("Saved %d sections to report %s", len(sections), report_id)
