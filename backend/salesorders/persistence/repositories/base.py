# =============================================================================
# SALES ORDERS v1.0 - BASE REPOSITORY
# =============================================================================
# Base class for PostgreSQL repositories
# =============================================================================

from typing import Any, Dict, Iterable, List, Optional

from ...database_pg import transaction
from ...utils.db_helpers import row_to_dict, rows_to_dicts


class BaseRepository:
    """
    Repository base with common query helpers.

    Helpers take the cursor of an open transaction() so several statements
    share one unit of work.

    Attributes:
        table_name: Main table
        primary_key: Primary key column (default: 'id')
    """

    def __init__(self, table_name: str, primary_key: str = 'id'):
        self.table_name = table_name
        self.primary_key = primary_key

    def _transaction(self):
        """Open a transaction (context manager yielding a cursor)."""
        return transaction()

    def _lock_by_id(self, cur, row_id: int, columns: str = '*') -> Optional[Dict[str, Any]]:
        """SELECT ... FOR UPDATE on the main table by primary key."""
        return self._execute_one(
            cur,
            f"SELECT {columns} FROM {self.table_name} "
            f"WHERE {self.primary_key} = %s FOR UPDATE",
            (row_id,)
        )

    def _update_by_id(self, cur, row_id: int, changes: Dict[str, Any]) -> None:
        """UPDATE the given columns of one row of the main table."""
        set_clause = ', '.join(f"{column} = %s" for column in changes)
        cur.execute(
            f"UPDATE {self.table_name} SET {set_clause} WHERE {self.primary_key} = %s",
            list(changes.values()) + [row_id]
        )

    def _delete_by_id(self, cur, row_id: int) -> None:
        cur.execute(
            f"DELETE FROM {self.table_name} WHERE {self.primary_key} = %s",
            (row_id,)
        )

    def _lookup_map(self, table: str, column: str, ids: Iterable[int]) -> Dict[int, Any]:
        """
        {id: column} for the given ids of a reference table.

        Args:
            table: Reference table (carriers, materials, ...)
            column: Column to return
            ids: Ids to resolve

        Returns:
            Dict with only the ids found
        """
        ids = sorted(set(ids))
        if not ids:
            return {}
        with self._transaction() as cur:
            rows = self._execute_query(
                cur,
                f"SELECT id, {column} AS value FROM {table} WHERE id = ANY(%s)",
                (ids,)
            )
        return {row['id']: row['value'] for row in rows}

    def _execute_query(self, cur, query: str, params: tuple = None) -> List[Dict[str, Any]]:
        """Run query and return list of dicts."""
        cur.execute(query, params or ())
        return rows_to_dicts(cur.fetchall())

    def _execute_one(self, cur, query: str, params: tuple = None) -> Optional[Dict[str, Any]]:
        """Run query and return a single dict."""
        cur.execute(query, params or ())
        return row_to_dict(cur.fetchone())

    def _execute_scalar(self, cur, query: str, params: tuple = None) -> Any:
        """Run query and return the first column of the first row."""
        cur.execute(query, params or ())
        row = cur.fetchone()
        if not row:
            return None
        return next(iter(row.values()))
