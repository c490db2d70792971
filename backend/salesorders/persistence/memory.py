# =============================================================================
# SALES ORDERS v1.0 - IN-MEMORY ORDER STORE
# =============================================================================
# OrderStore kept in process memory.
# Used by the test suite and for ORDER_STORE=memory.
#
# Tables are plain dicts of rows, like the PostgreSQL schema. A single RLock
# serializes writers. Inside _transaction() every row is saved before its
# first change (_touch); if anything raises, only those rows are restored,
# so multi-row writes are all-or-nothing at a cost proportional to the rows
# written.
# =============================================================================

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..config import config
from ..exceptions import (
    DuplicateOrderNumberError,
    OrderNotDraftError,
    OrderNotFoundError,
)
from ..models import (
    ITEM_STATUS_DEFAULT,
    CreateOrderDTO,
    Order,
    OrderFilters,
    OrderItemInput,
    OrderStatus,
    UpdateOrderDTO,
)
from ..services.orders.numbering import day_prefix, format_order_number, last_sequence
from ..utils.dates import month_bucket
from .store import OrderPage, OrderStatisticsRaw, OrderStore

logger = logging.getLogger('orders.store')

# Reference tables and the summary fields exposed for each
REFERENCE_FIELDS = {
    'customers': ('name',),
    'carriers': ('name', 'lookup_code'),
    'carrier_services': ('name', 'description'),
    'warehouses': ('name', 'city', 'state'),
    'accounts': ('name', 'address', 'city', 'state', 'zip_code'),
    'materials': ('code', 'description', 'uom'),
}

# Undo marker for rows inserted by the transaction
_MISSING = object()


class InMemoryOrderStore(OrderStore):
    """Thread-safe OrderStore without a database."""

    def __init__(self):
        self._lock = threading.RLock()
        self._orders: Dict[int, Dict[str, Any]] = {}
        self._items: Dict[int, Dict[str, Any]] = {}
        self._counters: Dict[str, int] = {}
        self._next_order_id = 1
        self._next_item_id = 1
        self._undo: Optional[List[tuple]] = None
        self._references: Dict[str, Dict[int, Dict[str, Any]]] = {
            table: {} for table in REFERENCE_FIELDS
        }

    # =========================================================================
    # REFERENCE DATA
    # =========================================================================

    def add_reference(self, table: str, ref_id: int, **fields) -> None:
        """
        Register a customer, carrier, warehouse, account, material...

        Args:
            table: One of REFERENCE_FIELDS
            ref_id: Row id
            **fields: Row columns (name, code, city, ...)
        """
        if table not in self._references:
            raise ValueError(f"Unknown reference table: {table}")
        with self._lock:
            self._references[table][ref_id] = dict(fields)

    def _summary(self, table: str, ref_id: Optional[int]) -> Optional[Dict[str, Any]]:
        row = self._references[table].get(ref_id) if ref_id is not None else None
        if row is None:
            return None
        return {name: row.get(name) for name in REFERENCE_FIELDS[table]}

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    @contextmanager
    def _transaction(self):
        with self._lock:
            if self._undo is not None:
                # Joins the enclosing transaction
                yield
                return

            self._undo = []
            next_ids = (self._next_order_id, self._next_item_id)
            try:
                yield
            except Exception:
                for table, key, saved in reversed(self._undo):
                    if saved is _MISSING:
                        table.pop(key, None)
                    else:
                        table[key] = saved
                self._next_order_id, self._next_item_id = next_ids
                raise
            finally:
                self._undo = None

    def _touch(self, table: Dict[Any, Any], key: Any) -> None:
        """Save a row before it is inserted, changed or deleted."""
        if self._undo is None:
            return
        saved = table.get(key, _MISSING)
        if isinstance(saved, dict):
            saved = dict(saved)
        self._undo.append((table, key, saved))

    def _allocate_order_number(self, now: datetime) -> str:
        """Increment the day's counter, seeding it from existing numbers."""
        prefix = day_prefix(now)
        current = self._counters.get(prefix)
        if current is None:
            current = last_sequence(
                (row['order_number'] for row in self._orders.values()), prefix
            )
        order_number = format_order_number(now, current + 1)
        self._touch(self._counters, prefix)
        self._counters[prefix] = current + 1
        return order_number

    def _insert_item(self, order_id: int, item: OrderItemInput, actor_id: int, now: datetime) -> int:
        item_id = self._next_item_id
        self._next_item_id += 1
        self._touch(self._items, item_id)
        self._items[item_id] = {
            'id': item_id,
            'order_id': order_id,
            'material_id': item.material_id,
            'quantity': item.quantity,
            'status': ITEM_STATUS_DEFAULT,
            'created_at': now,
            'created_by': actor_id,
            'modified_at': now,
            'modified_by': actor_id,
        }
        return item_id

    def _delete_items(self, order_id: int) -> int:
        item_ids = [i for i, row in self._items.items() if row['order_id'] == order_id]
        for item_id in item_ids:
            self._touch(self._items, item_id)
            del self._items[item_id]
        return len(item_ids)

    def _locked_draft(self, order_id: int) -> Dict[str, Any]:
        row = self._orders.get(order_id)
        if row is None:
            raise OrderNotFoundError(extra={'order_id': order_id})
        if row['status'] != OrderStatus.DRAFT:
            raise OrderNotDraftError(extra={'order_id': order_id, 'status': row['status']})
        return row

    # =========================================================================
    # READ MODEL
    # =========================================================================

    def _to_order(self, row: Dict[str, Any]) -> Order:
        items = sorted(
            (item for item in self._items.values() if item['order_id'] == row['id']),
            key=lambda item: item['id'],
        )
        return Order(
            **row,
            items=[
                {**item, 'material': self._summary('materials', item['material_id'])}
                for item in items
            ],
            carrier=self._summary('carriers', row['carrier_id']),
            carrier_service=self._summary('carrier_services', row['carrier_service_id']),
            warehouse=self._summary('warehouses', row['warehouse_id']),
            ship_to_account=self._summary('accounts', row['ship_to_account_id']),
            bill_to_account=self._summary('accounts', row['bill_to_account_id']),
            customer=self._summary('customers', row['customer_id']),
        )

    # =========================================================================
    # ORDER STORE
    # =========================================================================

    def find_by_id(self, order_id: int) -> Optional[Order]:
        with self._lock:
            row = self._orders.get(order_id)
            return self._to_order(row) if row else None

    def create(self, data: CreateOrderDTO, actor_id: int, now: datetime) -> Order:
        with self._transaction():
            order_number = self._allocate_order_number(now)
            if any(r['order_number'] == order_number for r in self._orders.values()):
                raise DuplicateOrderNumberError(extra={'order_number': order_number})

            order_id = self._next_order_id
            self._next_order_id += 1
            self._touch(self._orders, order_id)
            self._orders[order_id] = {
                'id': order_id,
                'lookup_code': order_number,
                'order_number': order_number,
                'status': int(OrderStatus.DRAFT),
                'order_type_id': data.order_type_id,
                'customer_id': data.customer_id,
                'ship_to_account_id': data.ship_to_account_id,
                'bill_to_account_id': data.bill_to_account_id,
                'carrier_id': data.carrier_id,
                'carrier_service_id': data.carrier_service_id,
                'warehouse_id': data.warehouse_id or None,
                'expected_delivery_date': data.expected_delivery_date,
                'created_at': now,
                'created_by': actor_id,
                'modified_at': now,
                'modified_by': actor_id,
            }
            for item in data.items:
                self._insert_item(order_id, item, actor_id, now)

            logger.debug(f"Order {order_number} stored with {len(data.items)} items")
            return self._to_order(self._orders[order_id])

    def update(self, order_id: int, data: UpdateOrderDTO, actor_id: int, now: datetime) -> Order:
        with self._transaction():
            row = self._locked_draft(order_id)

            if data.replaces_items:
                self._delete_items(order_id)
                for item in data.items:
                    self._insert_item(order_id, item, actor_id, now)

            self._touch(self._orders, order_id)
            row.update(data.scalar_changes())
            row['modified_at'] = now
            row['modified_by'] = actor_id
            return self._to_order(row)

    def delete(self, order_id: int) -> None:
        with self._transaction():
            self._locked_draft(order_id)
            self._delete_items(order_id)
            self._touch(self._orders, order_id)
            del self._orders[order_id]

    def list(self, filters: OrderFilters) -> OrderPage:
        with self._lock:
            rows = [row for row in self._orders.values() if _matches(row, filters)]
            rows.sort(key=lambda row: (row['created_at'], row['id']), reverse=True)
            page = rows[filters.offset:filters.offset + filters.limit]
            return OrderPage(orders=[self._to_order(row) for row in page], total=len(rows))

    def get_stats(
        self,
        customer_id: Optional[int],
        window_start: datetime,
        top_n: int = config.STATS_TOP_N,
    ) -> OrderStatisticsRaw:
        with self._lock:
            orders = [
                row for row in self._orders.values()
                if row['created_at'] >= window_start
                and (customer_id is None or row['customer_id'] == customer_id)
            ]
            order_ids = {row['id'] for row in orders}
            items = [item for item in self._items.values() if item['order_id'] in order_ids]

            status_counts: Dict[int, int] = {}
            month_counts: Dict[str, int] = {}
            carrier_counts: Dict[int, int] = {}
            for row in orders:
                status_counts[row['status']] = status_counts.get(row['status'], 0) + 1
                month = month_bucket(row['created_at'])
                month_counts[month] = month_counts.get(month, 0) + 1
                carrier_counts[row['carrier_id']] = carrier_counts.get(row['carrier_id'], 0) + 1

            material_counts: Dict[int, List[int]] = {}
            for item in items:
                entry = material_counts.setdefault(item['material_id'], [0, 0])
                entry[0] += 1
                entry[1] += item['quantity']

            # Ranked by ascending id, like the SQL implementation
            return OrderStatisticsRaw(
                total_orders=len(orders),
                status_counts=sorted(status_counts.items()),
                month_counts=sorted(month_counts.items()),
                carrier_counts=sorted(carrier_counts.items())[:top_n],
                material_counts=[
                    (material_id, count, quantity)
                    for material_id, (count, quantity) in sorted(material_counts.items())
                ][:top_n],
            )

    def get_carrier_names(self, carrier_ids: Iterable[int]) -> Dict[int, str]:
        carriers = self._references['carriers']
        return {cid: carriers[cid]['name'] for cid in carrier_ids if cid in carriers}

    def get_material_codes(self, material_ids: Iterable[int]) -> Dict[int, str]:
        materials = self._references['materials']
        return {mid: materials[mid]['code'] for mid in material_ids if mid in materials}

    def set_status(self, order_id: int, status: int) -> bool:
        with self._transaction():
            row = self._orders.get(order_id)
            if row is None:
                return False
            self._touch(self._orders, order_id)
            row['status'] = int(status)
            return True

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def set_created_at(self, order_id: int, created_at: datetime) -> None:
        """Backdate an order (statistics windows, list ordering)."""
        with self._lock:
            self._orders[order_id]['created_at'] = created_at

    def count_orders(self) -> int:
        with self._lock:
            return len(self._orders)

    def count_items(self, order_id: int = None) -> int:
        with self._lock:
            if order_id is None:
                return len(self._items)
            return sum(1 for item in self._items.values() if item['order_id'] == order_id)


def _matches(row: Dict[str, Any], filters: OrderFilters) -> bool:
    if filters.customer_id and row['customer_id'] != filters.customer_id:
        return False
    if filters.status and row['status'] != filters.status:
        return False
    if filters.has_date_range:
        if not (filters.from_date <= row['created_at'] <= filters.to_date):
            return False
    return True
