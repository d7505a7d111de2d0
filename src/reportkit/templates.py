"""
Default SQL per section type.

Templates live in ``queries.yaml`` next to this module::

    sales_overview:
      - id: monthly_sales
        database: bigquery      # optional
        query: |
          SELECT ...

A section that declares its own ``content.queries`` never reaches these.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import yaml

DEFAULT_TEMPLATES = Path(__file__).with_name("queries.yaml")


@dataclass(frozen=True)
class QueryTemplate:
	id: str
	query: str
	database: Optional[str] = None

	def as_query(self) -> Dict[str, Any]:
		query: Dict[str, Any] = {"id": self.id, "query": self.query}
		if self.database:
			query["database"] = self.database
		return query


class QueryTemplates(Mapping[str, Tuple[QueryTemplate, ...]]):
	"""Read-only ``section type -> templates`` map."""

	def __init__(self, templates: Mapping[str, Any]):
		self._templates = MappingProxyType({
			str(section_type): tuple(_template(item) for item in items or ())
			for section_type, items in templates.items()
		})

	def __getitem__(self, section_type: str) -> Tuple[QueryTemplate, ...]:
		return self._templates[section_type]

	def __iter__(self) -> Iterator[str]:
		return iter(self._templates)

	def __len__(self) -> int:
		return len(self._templates)

	def __repr__(self) -> str:
		return f"QueryTemplates({sorted(self._templates)})"


def _template(item: Union[QueryTemplate, Mapping[str, Any]]) -> QueryTemplate:
	if isinstance(item, QueryTemplate):
		return item
	missing = [key for key in ("id", "query") if not item.get(key)]
	if missing:
		raise ValueError(f"Query template is missing {', '.join(missing)}: {dict(item)}")
	return QueryTemplate(id=str(item["id"]), query=str(item["query"]), database=item.get("database"))


def load_query_templates(path: Optional[Union[str, Path]] = None) -> QueryTemplates:
	"""Parse a templates YAML file (defaults to the bundled ``queries.yaml``)."""
	source = Path(path) if path else DEFAULT_TEMPLATES
	data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
	if not isinstance(data, Mapping):
		raise ValueError(f"{source}: expected a mapping of section type to query list")
	return QueryTemplates(data)


__all__ = ["DEFAULT_TEMPLATES", "QueryTemplate", "QueryTemplates", "load_query_templates"]
