#!/usr/bin/env python3
"""Route each section query to the SQL engine it declares."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from reportkit.models import DEFAULT_DATABASE
from reportkit.utils.logs import report

logger = report.settings(__file__)

SUPPORTED_ENGINES = ("bigquery", "clickhouse")


class QueryExecutionError(RuntimeError):
	"""An engine rejected or failed a query; the message is the engine's."""

	def __init__(self, engine: str, message: str) -> None:
		super().__init__(message)
		self.engine = engine


def _bigquery_runner() -> Any:
	from .bigquery import BigQueryRunner
	return BigQueryRunner()


def _clickhouse_runner() -> Any:
	from .clickhouse import ClickHouseRunner
	return ClickHouseRunner()


DEFAULT_FACTORIES: Mapping[str, Callable[[], Any]] = {
	"bigquery": _bigquery_runner,
	"clickhouse": _clickhouse_runner,
}


class QueryRouter:
	"""Holds one runner per engine, created on first use.

	Pass *runners* (engine -> object with ``run(sql, params)``) to skip the
	real clients, e.g. in tests.
	"""

	def __init__(
		self,
		runners: Optional[Mapping[str, Any]] = None,
		factories: Optional[Mapping[str, Callable[[], Any]]] = None,
	) -> None:
		self._runners: Dict[str, Any] = dict(runners or {})
		self._factories = dict(DEFAULT_FACTORIES if factories is None else factories)

	def runner_for(self, database: Optional[str]) -> Any:
		engine = (database or DEFAULT_DATABASE).lower()
		if engine not in SUPPORTED_ENGINES:
			raise ValueError(f"Unsupported database {database!r}; expected one of {', '.join(SUPPORTED_ENGINES)}")
		if engine not in self._runners:
			factory = self._factories.get(engine)
			if factory is None:
				raise ValueError(f"No runner configured for {engine}")
			self._runners[engine] = factory()
		return self._runners[engine]

	def run(self, sql: str, params: Optional[Mapping[str, Any]] = None, database: Optional[str] = None) -> List[Dict[str, Any]]:
		engine = (database or DEFAULT_DATABASE).lower()
		runner = self.runner_for(engine)
		try:
			return runner.run(sql, params or {})
		except Exception as exc:
			logger.error("%s query failed: %s", engine, exc)
			raise QueryExecutionError(engine, str(exc)) from exc
