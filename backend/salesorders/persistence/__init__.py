# =============================================================================
# SALES ORDERS v1.0 - PERSISTENCE PACKAGE
# =============================================================================
#   persistence/store.py        - OrderStore contract, default store
#   persistence/memory.py       - InMemoryOrderStore
#   persistence/repositories/   - PostgreSQL repositories
#   persistence/schema.py       - DDL
#
# Pool and schema helpers live in database_pg.py and are re-exported here
# =============================================================================

from ..database_pg import (
    init_pool,
    close_pool,
    init_database,
    get_stats,
    log_operation,
)

from .store import (
    OrderPage,
    OrderStatisticsRaw,
    OrderStore,
    get_order_store,
    set_order_store,
)
from .memory import InMemoryOrderStore

__all__ = [
    'init_pool',
    'close_pool',
    'init_database',
    'get_stats',
    'log_operation',
    'OrderPage',
    'OrderStatisticsRaw',
    'OrderStore',
    'get_order_store',
    'set_order_store',
    'InMemoryOrderStore',
]
