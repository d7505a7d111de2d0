#!/usr/bin/env python3
from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from google.cloud import bigquery

from reportkit.utils.logs import report

from .config import BigQueryAuth

logger = report.settings(__file__)

_NAMED_PARAM = re.compile(r"@([A-Za-z_][A-Za-z0-9_]*)")


def _param_type(value: Any) -> str:
	if isinstance(value, bool):
		return "BOOL"
	if isinstance(value, int):
		return "INT64"
	if isinstance(value, float):
		return "FLOAT64"
	if isinstance(value, Decimal):
		return "NUMERIC"
	if isinstance(value, dt.datetime):
		return "TIMESTAMP"
	if isinstance(value, dt.date):
		return "DATE"
	return "STRING"


def query_parameters(sql: str, params: Optional[Mapping[str, Any]]) -> List[bigquery.ScalarQueryParameter]:
	"""``ScalarQueryParameter`` for each ``@name`` the SQL references.

	BigQuery rejects parameters the query does not use, so extras are skipped.
	"""
	params = params or {}
	referenced = dict.fromkeys(_NAMED_PARAM.findall(sql))
	return [
		bigquery.ScalarQueryParameter(name, _param_type(params[name]), params[name])
		for name in referenced
		if name in params
	]


class BigQueryRunner:
	def __init__(self, auth: Optional[BigQueryAuth] = None, client: Optional[bigquery.Client] = None) -> None:
		if client is None:
			self.auth = auth or BigQueryAuth.load()
			client = bigquery.Client(project=self.auth.project_id, location=self.auth.location)
		else:
			self.auth = auth
		self.client = client

	def run(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
		job_config = bigquery.QueryJobConfig(query_parameters=query_parameters(sql, params))
		job = self.client.query(sql, job_config=job_config)
		rows = [dict(row.items()) for row in job.result()]
		logger.debug("BigQuery returned %d rows", len(rows))
		return rows
