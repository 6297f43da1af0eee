"""
Base repository class for database access.

Repositories wrap the Supabase client and map rows to Pydantic models.
Relation tables (follows, likes, saves, reports) are keyed by a composite
primary key, so the helpers here treat them as sets of rows.
"""

from typing import Any, TypeVar, Generic

from postgrest.exceptions import APIError
from supabase import Client

from .database import is_invalid_text_representation, is_unique_violation


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Subclasses implement domain lookups and handle the dict-to-model mapping
    themselves. They do not check permissions; services do.
    """

    def __init__(self, db: Client) -> None:
        self._db = db

    def _column_values(self, table: str, column: str, **filters: Any) -> list[str]:
        """Select a single column from a table and return its values as strings."""
        query = self._db.table(table).select(column)
        for key, value in filters.items():
            query = query.eq(key, value)
        result = query.execute()
        return [str(row[column]) for row in result.data]

    def _fetch_rows(self, query) -> list[dict[str, Any]]:
        """Run a lookup query. A key the column type cannot hold matches no rows."""
        try:
            return query.execute().data
        except APIError as e:
            if is_invalid_text_representation(e):
                return []
            raise

    def _has_row(self, table: str, **keys: Any) -> bool:
        query = self._db.table(table).select(next(iter(keys)))
        for key, value in keys.items():
            query = query.eq(key, value)
        return bool(query.execute().data)

    def _insert_unique(self, table: str, row: dict[str, Any]) -> bool:
        """Insert a row. Returns False if the key was already present."""
        try:
            self._db.table(table).insert(row).execute()
        except APIError as e:
            if is_unique_violation(e):
                return False
            raise
        return True

    def _delete_rows(self, table: str, **keys: Any) -> bool:
        """Delete matching rows. Returns False if nothing matched."""
        query = self._db.table(table).delete()
        for key, value in keys.items():
            query = query.eq(key, value)
        return bool(query.execute().data)
