# =============================================================================
# SALES ORDERS v1.0 - UTILS/DB_HELPERS
# =============================================================================
# Helpers for database rows
# =============================================================================

from typing import Any, Dict, Iterable, List, Optional


def rows_to_dicts(rows) -> List[Dict[str, Any]]:
    """
    Convert PostgreSQL rows to list of dicts.

    Args:
        rows: Cursor fetchall result

    Returns:
        List of dictionaries
    """
    if not rows:
        return []
    return [dict(row) for row in rows]


def row_to_dict(row) -> Optional[Dict[str, Any]]:
    """Convert single row to dict (None stays None)."""
    return dict(row) if row else None


def prefixed(row: Dict[str, Any], prefix: str, fields: Iterable[str]) -> Optional[Dict[str, Any]]:
    """
    Extract a joined sub-record from a flat row.

    Columns are read as f"{prefix}{field}". Returns None when the first
    field is NULL, i.e. the LEFT JOIN matched nothing.
    """
    fields = list(fields)
    values = {field: row.get(f"{prefix}{field}") for field in fields}
    if values.get(fields[0]) is None:
        return None
    return values
