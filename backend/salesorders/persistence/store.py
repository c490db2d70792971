# =============================================================================
# SALES ORDERS v1.0 - ORDER STORE CONTRACT
# =============================================================================
# Persistence contract consumed by the order service.
#
# Implementations:
#   persistence/repositories/orders.py - OrdersRepository (PostgreSQL)
#   persistence/memory.py              - InMemoryOrderStore
#
# Multi-row writes (create, update with item replacement, delete) are atomic:
# on any failure nothing is applied. create() allocates the order number in
# the same unit of work as the insert.
# =============================================================================

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import config
from ..models import CreateOrderDTO, Order, OrderFilters, UpdateOrderDTO


@dataclass
class OrderPage:
    """One page of orders plus the total matching the filters."""
    orders: List[Order]
    total: int


@dataclass
class OrderStatisticsRaw:
    """
    Grouped counts for a statistics window, before shaping.

    Attributes:
        total_orders: Orders in the window
        status_counts: [(status, count)] ascending status
        month_counts: [("YYYY-MM", count)] ascending month
        carrier_counts: [(carrier_id, order_count)] first top_n by carrier_id
        material_counts: [(material_id, item_count, total_quantity)] first
            top_n by material_id
    """
    total_orders: int = 0
    status_counts: List[Tuple[int, int]] = field(default_factory=list)
    month_counts: List[Tuple[str, int]] = field(default_factory=list)
    carrier_counts: List[Tuple[int, int]] = field(default_factory=list)
    material_counts: List[Tuple[int, int, int]] = field(default_factory=list)


class OrderStore(ABC):
    """Durable CRUD and aggregate queries over orders and order items."""

    @abstractmethod
    def find_by_id(self, order_id: int) -> Optional[Order]:
        """Order with items and joined summaries, None if absent."""

    @abstractmethod
    def create(self, data: CreateOrderDTO, actor_id: int, now: datetime) -> Order:
        """
        Insert order and items atomically in DRAFT status.

        The order number is allocated from the day of `now`.
        """

    @abstractmethod
    def update(self, order_id: int, data: UpdateOrderDTO, actor_id: int, now: datetime) -> Order:
        """
        Apply a partial update, replacing items when supplied, atomically.

        Raises:
            OrderNotFoundError: order vanished
            OrderNotDraftError: order left DRAFT
        """

    @abstractmethod
    def delete(self, order_id: int) -> None:
        """
        Delete items then the order, atomically.

        Raises:
            OrderNotFoundError: order vanished
            OrderNotDraftError: order left DRAFT
        """

    @abstractmethod
    def list(self, filters: OrderFilters) -> OrderPage:
        """Filtered page, newest first."""

    @abstractmethod
    def get_stats(
        self,
        customer_id: Optional[int],
        window_start: datetime,
        top_n: int = config.STATS_TOP_N,
    ) -> OrderStatisticsRaw:
        """Grouped counts for orders created at or after window_start."""

    @abstractmethod
    def get_carrier_names(self, carrier_ids: Iterable[int]) -> Dict[int, str]:
        """{carrier_id: name} for the ids that exist."""

    @abstractmethod
    def get_material_codes(self, material_ids: Iterable[int]) -> Dict[int, str]:
        """{material_id: code} for the ids that exist."""

    @abstractmethod
    def set_status(self, order_id: int, status: int) -> bool:
        """
        Move an order to another status (external fulfillment process).

        Returns:
            True if the order exists
        """


# =============================================================================
# DEFAULT STORE
# =============================================================================

_store: Optional[OrderStore] = None
_store_lock = threading.Lock()


def get_order_store() -> OrderStore:
    """
    Process-wide store chosen by ORDER_STORE ("postgresql" or "memory").
    """
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                if config.ORDER_STORE == 'memory':
                    from .memory import InMemoryOrderStore
                    _store = InMemoryOrderStore()
                else:
                    from .repositories.orders import orders_repository
                    _store = orders_repository
    return _store


def set_order_store(store: Optional[OrderStore]) -> None:
    """Replace the process-wide store (None resets to the configured one)."""
    global _store
    with _store_lock:
        _store = store
