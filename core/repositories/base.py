# =============================================================================
# core/repositories/base.py - Supabase Table Repository Base
# =============================================================================
# Shared query plumbing for the per-table repositories:
# - row serialization (UUID, Enum, datetime, Patch -> JSON-ready values)
# - single-row lookups, insert, update, delete
# - paginated listing with an exact total count
#
# Every query failure is raised as SupabaseClientError; callers never see
# raw postgrest exceptions.
# =============================================================================

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel
from supabase import Client

from core.models.patch import Patch
from lib.supabase_client import SupabaseClientError
from lib.utils import normalize_uuid, page_bounds

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def to_column(value: Any) -> Any:
    """Convert a Python value into what postgrest expects for a column."""
    if isinstance(value, Patch):
        return value.to_storage()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list):
        return [to_column(item) for item in value]
    return value


def to_row(data: dict[str, Any]) -> dict[str, Any]:
    return {key: to_column(value) for key, value in data.items()}


class BaseRepository(Generic[RecordT]):
    """
    Repository over one Supabase table.

    Subclasses set `table` and `record_type`; rows come back as validated
    record models.
    """

    table: str = ""
    record_type: type[RecordT]

    def __init__(self, client: Client):
        self._client = client

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def _query(self):
        return self._client.table(self.table)

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Failed to {action} in {self.table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to {action} in {self.table}: {e}",
                code="QUERY_FAILED",
                details={"table": self.table, "action": action},
            )

    def _to_record(self, row: dict[str, Any]) -> RecordT:
        return self.record_type.model_validate(row)

    def _first(self, response) -> RecordT | None:
        if response.data:
            return self._to_record(response.data[0])
        return None

    def _find_one(self, column: str, value: Any) -> RecordT | None:
        query = self._query().select("*").eq(column, to_column(value)).limit(1)
        return self._first(self._execute(query, f"find by {column}"))

    def _paginate(
        self,
        page: int,
        page_size: int,
        filters: Callable[[Any], Any] | None = None,
        columns: str = "*",
    ) -> tuple[list[RecordT], int]:
        """
        Run one page of a filtered query, newest first.

        Returns:
            Tuple of (records, total count across all pages)
        """
        query = self._query().select(columns, count="exact")
        if filters is not None:
            query = filters(query)

        start, end = page_bounds(page, page_size)
        query = query.order("created_at", desc=True).range(start, end)

        response = self._execute(query, "list")
        rows = response.data or []
        return [self._to_record(row) for row in rows], response.count or 0

    def _count(self, filters: Callable[[Any], Any] | None = None) -> int:
        query = self._query().select("id", count="exact")
        if filters is not None:
            query = filters(query)
        response = self._execute(query.limit(1), "count")
        return response.count or 0

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def find_by_id(self, record_id: UUID | str) -> RecordT | None:
        return self._find_one("id", normalize_uuid(record_id))

    def create(self, data: dict[str, Any]) -> RecordT:
        response = self._execute(self._query().insert(to_row(data)), "insert")
        record = self._first(response)
        if record is None:
            raise SupabaseClientError(
                message=f"Insert into {self.table} returned no data",
                code="INSERT_FAILED",
            )
        return record

    def update(self, record_id: UUID | str, changes: dict[str, Any]) -> RecordT | None:
        """
        Write all changes to one row in a single statement.

        Returns:
            The updated record, or None if the row does not exist
        """
        query = self._query().update(to_row(changes)).eq("id", normalize_uuid(record_id))
        return self._first(self._execute(query, "update"))

    def delete(self, record_id: UUID | str) -> bool:
        query = self._query().delete().eq("id", normalize_uuid(record_id))
        response = self._execute(query, "delete")
        return bool(response.data)

    def count(self) -> int:
        return self._count()
