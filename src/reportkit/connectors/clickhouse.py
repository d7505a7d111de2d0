#!/usr/bin/env python3
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

import clickhouse_connect

from reportkit.utils.logs import report

from .config import ClickHouseAuth

logger = report.settings(__file__)

# {name} or {name:Type}
_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::([^{}]+))?\}")


def bind_placeholders(sql: str, params: Optional[Mapping[str, Any]]) -> tuple[str, Dict[str, Any]]:
	"""Turn SQL placeholders into ClickHouse server-side parameters.

	Bare ``{clientId}`` placeholders become ``{clientId:String}``; typed ones
	are kept. Only names present in *params* are bound, so literal braces
	elsewhere in the SQL are left alone. Values never enter the SQL text.
	"""
	params = params or {}
	bound: Dict[str, Any] = {}

	def _sub(match: re.Match) -> str:
		name, ch_type = match.group(1), match.group(2)
		if name not in params:
			return match.group(0)
		bound[name] = params[name]
		return f"{{{name}:{(ch_type or 'String').strip()}}}"

	return _PLACEHOLDER.sub(_sub, sql), bound


class ClickHouseRunner:
	def __init__(self, auth: Optional[ClickHouseAuth] = None, client: Any = None) -> None:
		if client is None:
			self.auth = auth or ClickHouseAuth.load()
			client = clickhouse_connect.get_client(
				host=self.auth.host,
				port=self.auth.port,
				username=self.auth.username,
				password=self.auth.password,
				database=self.auth.database,
			)
		else:
			self.auth = auth
		self.client = client

	def run(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
		query, bound = bind_placeholders(sql, params)
		result = self.client.query(query, parameters=bound)
		rows = list(result.named_results())
		logger.debug("ClickHouse returned %d rows", len(rows))
		return rows
