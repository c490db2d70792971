# =============================================================================
# SALES ORDERS v1.0 - DATABASE MANAGER (PostgreSQL)
# =============================================================================
# Connection pool, transactional cursors, schema bootstrap, operation log
# =============================================================================

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import psycopg2
from psycopg2 import errorcodes, pool
from psycopg2.extras import RealDictCursor

from .config import config
from .exceptions import DuplicateOrderNumberError, StoreError

logger = logging.getLogger('orders.store')


# =============================================================================
# CONNECTION POOL
# =============================================================================

_pool: Optional[pool.ThreadedConnectionPool] = None


def init_pool():
    """Create the PostgreSQL connection pool."""
    global _pool
    if _pool is not None:
        return

    options = None
    if config.PG_STATEMENT_TIMEOUT_MS > 0:
        options = f"-c statement_timeout={config.PG_STATEMENT_TIMEOUT_MS}"

    _pool = pool.ThreadedConnectionPool(
        minconn=config.PG_POOL_MIN,
        maxconn=config.PG_POOL_MAX,
        host=config.PG_HOST,
        port=config.PG_PORT,
        database=config.PG_DATABASE,
        user=config.PG_USER,
        password=config.PG_PASSWORD,
        options=options,
    )
    logger.info(f"PostgreSQL pool: {config.PG_HOST}:{config.PG_PORT}/{config.PG_DATABASE}")


def close_pool():
    """Close the connection pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None


# =============================================================================
# TRANSACTIONS
# =============================================================================

@contextmanager
def transaction() -> Iterator[RealDictCursor]:
    """
    Cursor inside one transaction, returned to the pool afterwards.

    Commits on normal exit; rolls back on any exception. psycopg2 errors are
    re-raised as StoreError (DuplicateOrderNumberError for a unique
    violation on the order number), other exceptions propagate unchanged.
    """
    if _pool is None:
        init_pool()

    conn = _pool.getconn()
    conn.autocommit = False
    cursor = conn.cursor(cursor_factory=RealDictCursor)
    try:
        yield cursor
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        if e.pgcode == errorcodes.UNIQUE_VIOLATION and 'order_number' in str(e):
            raise DuplicateOrderNumberError(str(e)) from e
        raise StoreError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        _pool.putconn(conn)


# =============================================================================
# SCHEMA
# =============================================================================

def init_database() -> Dict[str, int]:
    """
    Create the schema on an empty database and report row counts.

    Returns:
        Dict {table: count} for orders and order_items
    """
    from .persistence.schema import SCHEMA_STATEMENTS

    with transaction() as cur:
        cur.execute("""
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_schema = 'public' AND table_name = 'orders'
            ) AS has_orders
        """)
        if not cur.fetchone()['has_orders']:
            logger.info("Schema not found - creating")
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)

    stats = get_stats()
    logger.info(f"Database {config.PG_DATABASE}: {stats['orders']:,} orders, {stats['order_items']:,} items")
    return stats


def get_stats() -> Dict[str, int]:
    """Row counts of the order tables."""
    with transaction() as cur:
        cur.execute("SELECT COUNT(*) AS cnt FROM orders")
        orders = cur.fetchone()['cnt']
        cur.execute("SELECT COUNT(*) AS cnt FROM order_items")
        items = cur.fetchone()['cnt']
    return {'orders': orders, 'order_items': items}


# =============================================================================
# OPERATION LOG
# =============================================================================

def log_operation(cur, operation_type: str, entity: str = None, entity_id: int = None,
                  description: str = None, data: Dict[str, Any] = None,
                  actor_id: int = None):
    """
    Write an audit row with the caller's cursor (same transaction).

    Args:
        cur: Open cursor from transaction()
        operation_type: Operation type (CREATE, UPDATE, DELETE, UPDATE_STATUS)
        entity: Table involved
        entity_id: Row id
        description: Free text
        data: Extra JSON payload
        actor_id: User performing the operation
    """
    cur.execute('''
        INSERT INTO operation_log (operation_type, entity, entity_id, description, data_json, actor_id)
        VALUES (%s, %s, %s, %s, %s, %s)
    ''', (operation_type, entity, entity_id, description,
          json.dumps(data, default=str) if data else None, actor_id))
