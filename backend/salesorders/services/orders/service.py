# =============================================================================
# SALES ORDERS v1.0 - ORDER SERVICE
# =============================================================================
# Facade binding the order functions to a store and a clock
# =============================================================================

from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ...persistence.store import OrderStore, get_order_store
from . import commands, queries, statistics
from .results import ServiceResult


class OrderService:
    """
    Order lifecycle and statistics operations.

    Usage:
        service = OrderService(store=InMemoryOrderStore())
        result = service.create_order(payload, actor_id=1)
        if result.success:
            order = result.data

    Args:
        store: Order store (default: the configured process-wide store)
        clock: Callable returning the current time (default: datetime.now)
    """

    def __init__(self, store: Optional[OrderStore] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self._store = store
        self.clock = clock

    @property
    def store(self) -> OrderStore:
        return self._store if self._store is not None else get_order_store()

    def create_order(self, data: Mapping[str, Any], actor_id: int) -> ServiceResult:
        return commands.create_order(self.store, data, actor_id, now=self.clock())

    def update_order(self, order_id: int, data: Mapping[str, Any], actor_id: int) -> ServiceResult:
        return commands.update_order(self.store, order_id, data, actor_id, now=self.clock())

    def delete_order(self, order_id: int) -> ServiceResult:
        return commands.delete_order(self.store, order_id)

    def get_order_by_id(self, order_id: int) -> ServiceResult:
        return queries.get_order_by_id(self.store, order_id)

    def list_orders(self, filters: Mapping[str, Any] = None) -> ServiceResult:
        return queries.list_orders(self.store, filters)

    def get_order_stats(self, filters: Mapping[str, Any] = None) -> ServiceResult:
        return statistics.get_order_stats(self.store, filters, now=self.clock())


def get_order_service() -> OrderService:
    """OrderService bound to the process-wide store and the system clock."""
    return OrderService()
