"""Snapshot connector: serves tables from a local JSON file.

File shape: {"tables": {"<table name>": [{"id": "...", "fields": {...}}, ...]}}
Useful for offline runs and demos; filter formulas are not evaluated.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from lead_metrics.connectors.base import BaseConnector
from lead_metrics.errors import MalformedResponseError, NotFoundError
from lead_metrics.models.record import Record

logger = logging.getLogger(__name__)


class SnapshotConnector(BaseConnector):
    """Connector backed by a JSON snapshot of one or more tables."""

    source_id = "snapshot"

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._tables: Optional[dict[str, list[Record]]] = None

    def _load(self) -> dict[str, list[Record]]:
        if self._tables is None:
            try:
                text = self._path.read_text(encoding="utf-8")
            except OSError as e:
                raise NotFoundError(f"Snapshot {self._path} could not be read: {e}") from e
            except UnicodeDecodeError as e:
                raise MalformedResponseError(f"Snapshot {self._path} is not UTF-8 text: {e}") from e
            try:
                payload = json.loads(text)
            except ValueError as e:
                raise MalformedResponseError(f"Snapshot {self._path} is not valid JSON: {e}") from e
            tables = payload.get("tables") if isinstance(payload, dict) else None
            if not isinstance(tables, dict):
                raise MalformedResponseError(f"Snapshot {self._path} has no 'tables' object")
            try:
                self._tables = {
                    name: [Record.model_validate(r) for r in rows]
                    for name, rows in tables.items()
                }
            except (ValidationError, TypeError) as e:
                raise MalformedResponseError(f"Snapshot {self._path} has invalid records: {e}") from e
        return self._tables

    def _table(self, table: str) -> list[Record]:
        tables = self._load()
        if table not in tables:
            raise NotFoundError(f"Table not in snapshot: {table}")
        return tables[table]

    def fetch_all(
        self,
        table: str,
        fields: Sequence[str] = (),
        filter_formula: Optional[str] = None,
    ) -> list[Record]:
        """Return the table's records, projected to fields when given."""
        if filter_formula:
            logger.debug("Snapshot ignores filter formula for %s: %s", table, filter_formula)
        records = self._table(table)
        if not fields:
            return [r.model_copy(deep=True) for r in records]
        wanted = set(fields)
        return [
            Record(id=r.id, fields={k: v for k, v in r.fields.items() if k in wanted})
            for r in records
        ]

    def fetch_record(self, table: str, record_id: str) -> Record:
        for record in self._table(table):
            if record.id == record_id:
                return record.model_copy(deep=True)
        raise NotFoundError(f"Record not found: {record_id}")
