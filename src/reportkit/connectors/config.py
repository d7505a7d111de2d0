#!/usr/bin/env python3
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from reportkit.utils.paths import config_path

DEFAULT_ENV_PATH = config_path("reportkit", ".env")


def _load_env(path: Path = DEFAULT_ENV_PATH) -> None:
	"""Fill the process environment from *path*; variables already set win."""
	if path.exists():
		load_dotenv(path, override=False)


def _require(name: str) -> str:
	value = os.getenv(name, "").strip()
	if not value:
		raise RuntimeError(f"{name} not set (export it or put it in {DEFAULT_ENV_PATH})")
	return value


@dataclass
class BigQueryAuth:
	project_id: str
	location: str = "US"
	credentials_file: Optional[Path] = None

	@staticmethod
	def load(env_path: Path = DEFAULT_ENV_PATH) -> "BigQueryAuth":
		_load_env(env_path)
		creds = os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or ""
		creds_path = Path(creds) if creds else None
		if creds_path is not None and not creds_path.exists():
			raise RuntimeError(f"BigQuery service account key not found at {creds_path}")
		return BigQueryAuth(
			project_id=_require("BQ_PROJECT_ID"),
			location=os.getenv("BQ_LOCATION") or "US",
			credentials_file=creds_path,
		)


@dataclass
class ClickHouseAuth:
	host: str
	port: int = 8123
	username: str = "default"
	password: str = ""
	database: str = "default"

	@staticmethod
	def load(env_path: Path = DEFAULT_ENV_PATH) -> "ClickHouseAuth":
		_load_env(env_path)
		port = os.getenv("CLICKHOUSE_PORT") or "8123"
		try:
			port_number = int(port)
		except ValueError:
			raise RuntimeError(f"CLICKHOUSE_PORT must be an integer, got {port!r}") from None
		return ClickHouseAuth(
			host=_require("CLICKHOUSE_HOST"),
			port=port_number,
			username=os.getenv("CLICKHOUSE_USERNAME") or "default",
			password=os.getenv("CLICKHOUSE_PASSWORD") or "",
			database=os.getenv("CLICKHOUSE_DATABASE") or "default",
		)


@dataclass
class SupabaseAuth:
	url: str
	key: str

	@staticmethod
	def load(env_path: Path = DEFAULT_ENV_PATH) -> "SupabaseAuth":
		_load_env(env_path)
		return SupabaseAuth(url=_require("SUPABASE_URL"), key=_require("SUPABASE_KEY"))
