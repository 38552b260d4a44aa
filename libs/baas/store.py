"""Generic record store interface and the in-process implementation.

A record store persists schemaless records (plain dicts) in named tables.
Every stored record carries a backend-assigned ``objectId``; callers that
want the application-facing ``id`` use :func:`normalize_record`.
"""

import copy
import time
import uuid
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from libs.baas.errors import BackendError, TableNotFoundError
from libs.baas.filters import Predicate

OBJECT_ID = "objectId"

Record = dict[str, Any]


def normalize_record(record: Record) -> Record:
    """Copy the storage identifier into the application-facing ``id``."""
    normalized = dict(record)
    normalized["id"] = normalized.get(OBJECT_ID)
    return normalized


def record_object_id(record: Record) -> Optional[str]:
    """Storage id of a record, accepting records that only carry ``id``."""
    return record.get(OBJECT_ID) or record.get("id")


class RecordStore(ABC):
    """Named-table record storage (find / save / remove)."""

    @abstractmethod
    async def find(self, table: str, where: Optional[Predicate] = None) -> list[Record]:
        """Return every record of ``table`` matching ``where``.

        Raises:
            TableNotFoundError: the table does not exist yet.
            BackendError: any other backend failure.
        """

    @abstractmethod
    async def save(self, table: str, record: Record) -> Record:
        """Create the record, or update it when it carries an ``objectId``."""

    @abstractmethod
    async def remove(self, table: str, record: Record) -> None:
        """Delete the record identified by its ``objectId``."""

    async def aclose(self) -> None:
        return None


class MemoryRecordStore(RecordStore):
    """Record store held in process memory.

    Backs demo mode and tests. Tables come into existence on first save, so
    reading a table nobody has written to raises ``TableNotFoundError`` the
    same way a fresh Backendless app does.
    """

    def __init__(self, tables: Optional[dict[str, Iterable[Record]]] = None):
        self._tables: dict[str, list[Record]] = {}
        for name, rows in (tables or {}).items():
            self._tables[name] = [self._stamp(dict(row)) for row in rows]

    @staticmethod
    def _stamp(record: Record) -> Record:
        record.setdefault(OBJECT_ID, str(uuid.uuid4()).upper())
        now_ms = int(time.time() * 1000)
        record.setdefault("created", now_ms)
        record["updated"] = now_ms
        return record

    def _table(self, table: str) -> list[Record]:
        rows = self._tables.get(table)
        if rows is None:
            raise TableNotFoundError(
                f"Table not found by name '{table}'", status_code=404, backend_code=1009
            )
        return rows

    def tables(self) -> list[str]:
        return list(self._tables)

    async def find(self, table: str, where: Optional[Predicate] = None) -> list[Record]:
        rows = self._table(table)
        return [
            copy.deepcopy(row) for row in rows if where is None or where.matches(row)
        ]

    async def save(self, table: str, record: Record) -> Record:
        rows = self._tables.setdefault(table, [])
        object_id = record.get(OBJECT_ID)
        if object_id:
            for index, row in enumerate(rows):
                if row[OBJECT_ID] == object_id:
                    merged = {**row, **copy.deepcopy(record)}
                    rows[index] = self._stamp(merged)
                    return copy.deepcopy(rows[index])
        stored = self._stamp(copy.deepcopy(record))
        rows.append(stored)
        return copy.deepcopy(stored)

    async def remove(self, table: str, record: Record) -> None:
        rows = self._table(table)
        object_id = record_object_id(record)
        for index, row in enumerate(rows):
            if row[OBJECT_ID] == object_id:
                del rows[index]
                return
        raise BackendError(
            f"Object with id '{object_id}' is not found in table '{table}'",
            status_code=404,
            backend_code=1000,
        )
