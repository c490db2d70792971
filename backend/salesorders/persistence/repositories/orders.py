# =============================================================================
# SALES ORDERS v1.0 - ORDERS REPOSITORY
# =============================================================================
# PostgreSQL OrderStore.
#
# Order numbers come from order_number_counters: one row per day prefix,
# upserted and incremented inside the create transaction. The row lock
# serializes concurrent creators until commit, and a rollback also undoes
# the increment, so numbers stay unique and gapless.
# =============================================================================

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from psycopg2.extras import execute_values

from ...config import config
from ...database_pg import log_operation
from ...exceptions import OrderNotDraftError, OrderNotFoundError
from ...models import (
    ITEM_STATUS_DEFAULT,
    CreateOrderDTO,
    Order,
    OrderFilters,
    OrderItemInput,
    OrderStatus,
    UpdateOrderDTO,
)
from ...services.orders.numbering import day_prefix, format_order_number, last_sequence
from ...utils.db_helpers import prefixed
from ..store import OrderPage, OrderStatisticsRaw, OrderStore
from .base import BaseRepository

logger = logging.getLogger('orders.store')


ORDER_COLUMNS = (
    'id', 'lookup_code', 'order_number', 'status', 'order_type_id',
    'customer_id', 'ship_to_account_id', 'bill_to_account_id', 'carrier_id',
    'carrier_service_id', 'warehouse_id', 'expected_delivery_date',
    'created_at', 'created_by', 'modified_at', 'modified_by',
)

ITEM_COLUMNS = (
    'id', 'material_id', 'quantity', 'status',
    'created_at', 'created_by', 'modified_at', 'modified_by',
)

ACCOUNT_FIELDS = ('name', 'address', 'city', 'state', 'zip_code')

ORDER_SELECT = """
    SELECT o.*,
           c.name AS carrier_name,
           c.lookup_code AS carrier_lookup_code,
           cs.name AS carrier_service_name,
           cs.description AS carrier_service_description,
           w.name AS warehouse_name,
           w.city AS warehouse_city,
           w.state AS warehouse_state,
           st.name AS ship_to_name,
           st.address AS ship_to_address,
           st.city AS ship_to_city,
           st.state AS ship_to_state,
           st.zip_code AS ship_to_zip_code,
           bt.name AS bill_to_name,
           bt.address AS bill_to_address,
           bt.city AS bill_to_city,
           bt.state AS bill_to_state,
           bt.zip_code AS bill_to_zip_code,
           cu.name AS customer_name
    FROM orders o
    LEFT JOIN carriers c ON c.id = o.carrier_id
    LEFT JOIN carrier_services cs ON cs.id = o.carrier_service_id
    LEFT JOIN warehouses w ON w.id = o.warehouse_id
    LEFT JOIN accounts st ON st.id = o.ship_to_account_id
    LEFT JOIN accounts bt ON bt.id = o.bill_to_account_id
    LEFT JOIN customers cu ON cu.id = o.customer_id
"""

ITEMS_SELECT = """
    SELECT oi.*,
           m.code AS material_code,
           m.description AS material_description,
           m.uom AS material_uom
    FROM order_items oi
    LEFT JOIN materials m ON m.id = oi.material_id
    WHERE oi.order_id = ANY(%s)
    ORDER BY oi.order_id, oi.id
"""


def build_order_filters(filters: OrderFilters, alias: str = 'o') -> Tuple[str, List[Any]]:
    """
    WHERE clause for the order list.

    All supplied filters are ANDed; the created_at range is inclusive and
    only applied when both from_date and to_date are set.

    Returns:
        (where_clause, params) - "1=1" when nothing is filtered
    """
    conditions = []
    params: List[Any] = []

    if filters.customer_id:
        conditions.append(f"{alias}.customer_id = %s")
        params.append(filters.customer_id)

    if filters.status:
        conditions.append(f"{alias}.status = %s")
        params.append(filters.status)

    if filters.has_date_range:
        conditions.append(f"{alias}.created_at BETWEEN %s AND %s")
        params.extend([filters.from_date, filters.to_date])

    where_clause = " AND ".join(conditions) if conditions else "1=1"
    return where_clause, params


def build_stats_filters(customer_id: Optional[int], window_start: datetime, alias: str = 'o') -> Tuple[str, List[Any]]:
    """WHERE clause for a statistics window."""
    conditions = [f"{alias}.created_at >= %s"]
    params: List[Any] = [window_start]
    if customer_id is not None:
        conditions.append(f"{alias}.customer_id = %s")
        params.append(customer_id)
    return " AND ".join(conditions), params


class OrdersRepository(BaseRepository, OrderStore):
    """Repository for orders and order_items."""

    def __init__(self):
        super().__init__('orders', 'id')

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _row_to_order(self, row: Dict[str, Any], items: List[Dict[str, Any]]) -> Order:
        return Order(
            **{column: row[column] for column in ORDER_COLUMNS},
            items=[
                {
                    **{column: item[column] for column in ITEM_COLUMNS},
                    'material': prefixed(item, 'material_', ('code', 'description', 'uom')),
                }
                for item in items
            ],
            carrier=prefixed(row, 'carrier_', ('name', 'lookup_code')),
            carrier_service=prefixed(row, 'carrier_service_', ('name', 'description')),
            warehouse=prefixed(row, 'warehouse_', ('name', 'city', 'state')),
            ship_to_account=prefixed(row, 'ship_to_', ACCOUNT_FIELDS),
            bill_to_account=prefixed(row, 'bill_to_', ACCOUNT_FIELDS),
            customer=prefixed(row, 'customer_', ('name',)),
        )

    def _load_orders(self, cur, rows: List[Dict[str, Any]]) -> List[Order]:
        """Attach items (one query for all rows) and map."""
        if not rows:
            return []
        items = self._execute_query(cur, ITEMS_SELECT, ([row['id'] for row in rows],))
        by_order: Dict[int, List[Dict[str, Any]]] = {}
        for item in items:
            by_order.setdefault(item['order_id'], []).append(item)
        return [self._row_to_order(row, by_order.get(row['id'], [])) for row in rows]

    def _load_order(self, cur, order_id: int) -> Optional[Order]:
        row = self._execute_one(cur, f"{ORDER_SELECT} WHERE o.id = %s", (order_id,))
        if not row:
            return None
        return self._load_orders(cur, [row])[0]

    # =========================================================================
    # WRITE HELPERS
    # =========================================================================

    def _allocate_order_number(self, cur, now: datetime) -> str:
        """
        Next number of the day from the counter row.

        The seed (greatest existing sequence of the day) only matters the
        first time a day's row is created.
        """
        prefix = day_prefix(now)
        existing = self._execute_scalar(
            cur,
            "SELECT MAX(order_number) AS last FROM orders WHERE order_number LIKE %s",
            (f"{prefix}%",)
        )
        seed = last_sequence([existing], prefix) if existing else 0

        sequence = self._execute_scalar(cur, """
            INSERT INTO order_number_counters AS c (prefix, last_value)
            VALUES (%s, %s)
            ON CONFLICT (prefix) DO UPDATE SET last_value = c.last_value + 1
            RETURNING last_value
        """, (prefix, seed + 1))
        return format_order_number(now, sequence)

    def _insert_items(self, cur, order_id: int, items: List[OrderItemInput], actor_id: int, now: datetime) -> None:
        execute_values(cur, """
            INSERT INTO order_items
                (order_id, material_id, quantity, status,
                 created_at, created_by, modified_at, modified_by)
            VALUES %s
        """, [
            (order_id, item.material_id, item.quantity, ITEM_STATUS_DEFAULT,
             now, actor_id, now, actor_id)
            for item in items
        ])

    def _lock_draft(self, cur, order_id: int) -> Dict[str, Any]:
        """Row-lock the order and check it is still DRAFT."""
        row = self._lock_by_id(cur, order_id, "id, order_number, status")
        if not row:
            raise OrderNotFoundError(extra={'order_id': order_id})
        if row['status'] != OrderStatus.DRAFT:
            raise OrderNotDraftError(extra={'order_id': order_id, 'status': row['status']})
        return row

    # =========================================================================
    # ORDER STORE
    # =========================================================================

    def find_by_id(self, order_id: int) -> Optional[Order]:
        with self._transaction() as cur:
            return self._load_order(cur, order_id)

    def create(self, data: CreateOrderDTO, actor_id: int, now: datetime) -> Order:
        with self._transaction() as cur:
            order_number = self._allocate_order_number(cur, now)

            order_id = self._execute_scalar(cur, """
                INSERT INTO orders
                    (lookup_code, order_number, status, order_type_id, customer_id,
                     ship_to_account_id, bill_to_account_id, carrier_id,
                     carrier_service_id, warehouse_id, expected_delivery_date,
                     created_at, created_by, modified_at, modified_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id
            """, (
                order_number, order_number, int(OrderStatus.DRAFT), data.order_type_id,
                data.customer_id, data.ship_to_account_id, data.bill_to_account_id,
                data.carrier_id, data.carrier_service_id, data.warehouse_id or None,
                data.expected_delivery_date, now, actor_id, now, actor_id,
            ))

            self._insert_items(cur, order_id, data.items, actor_id, now)

            log_operation(cur, 'CREATE', 'orders', order_id,
                          f"Created order {order_number}",
                          {'items': len(data.items)}, actor_id)

            logger.debug(f"Order {order_number} stored with {len(data.items)} items")
            return self._load_order(cur, order_id)

    def update(self, order_id: int, data: UpdateOrderDTO, actor_id: int, now: datetime) -> Order:
        with self._transaction() as cur:
            locked = self._lock_draft(cur, order_id)

            if data.replaces_items:
                cur.execute("DELETE FROM order_items WHERE order_id = %s", (order_id,))
                self._insert_items(cur, order_id, data.items, actor_id, now)

            changes = data.scalar_changes()
            self._update_by_id(cur, order_id, {**changes, 'modified_at': now, 'modified_by': actor_id})

            log_operation(cur, 'UPDATE', 'orders', order_id,
                          f"Updated order {locked['order_number']}",
                          {'fields': sorted(changes), 'items_replaced': data.replaces_items},
                          actor_id)

            return self._load_order(cur, order_id)

    def delete(self, order_id: int) -> None:
        with self._transaction() as cur:
            locked = self._lock_draft(cur, order_id)
            cur.execute("DELETE FROM order_items WHERE order_id = %s", (order_id,))
            self._delete_by_id(cur, order_id)
            log_operation(cur, 'DELETE', 'orders', order_id,
                          f"Deleted order {locked['order_number']}")

    def list(self, filters: OrderFilters) -> OrderPage:
        where_clause, params = build_order_filters(filters)

        with self._transaction() as cur:
            total = self._execute_scalar(
                cur, f"SELECT COUNT(*) AS cnt FROM orders o WHERE {where_clause}", tuple(params)
            )
            rows = self._execute_query(cur, f"""
                {ORDER_SELECT}
                WHERE {where_clause}
                ORDER BY o.created_at DESC, o.id DESC
                LIMIT %s OFFSET %s
            """, tuple(params + [filters.limit, filters.offset]))
            return OrderPage(orders=self._load_orders(cur, rows), total=total or 0)

    def get_stats(
        self,
        customer_id: Optional[int],
        window_start: datetime,
        top_n: int = config.STATS_TOP_N,
    ) -> OrderStatisticsRaw:
        where_clause, params = build_stats_filters(customer_id, window_start)
        params = tuple(params)

        with self._transaction() as cur:
            total = self._execute_scalar(
                cur, f"SELECT COUNT(*) AS cnt FROM orders o WHERE {where_clause}", params
            )

            by_status = self._execute_query(cur, f"""
                SELECT o.status, COUNT(*) AS count
                FROM orders o
                WHERE {where_clause}
                GROUP BY o.status
                ORDER BY o.status
            """, params)

            by_month = self._execute_query(cur, f"""
                SELECT to_char(o.created_at, 'YYYY-MM') AS month, COUNT(*) AS count
                FROM orders o
                WHERE {where_clause}
                GROUP BY 1
                ORDER BY 1
            """, params)

            # Ranked by ascending id, not by count (observed behaviour)
            carriers = self._execute_query(cur, f"""
                SELECT o.carrier_id, COUNT(*) AS count
                FROM orders o
                WHERE {where_clause}
                GROUP BY o.carrier_id
                ORDER BY o.carrier_id ASC
                LIMIT %s
            """, params + (top_n,))

            materials = self._execute_query(cur, f"""
                SELECT oi.material_id, COUNT(*) AS count, COALESCE(SUM(oi.quantity), 0) AS quantity
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                WHERE {where_clause}
                GROUP BY oi.material_id
                ORDER BY oi.material_id ASC
                LIMIT %s
            """, params + (top_n,))

        return OrderStatisticsRaw(
            total_orders=total or 0,
            status_counts=[(row['status'], row['count']) for row in by_status],
            month_counts=[(row['month'], row['count']) for row in by_month],
            carrier_counts=[(row['carrier_id'], row['count']) for row in carriers],
            material_counts=[
                (row['material_id'], row['count'], int(row['quantity'])) for row in materials
            ],
        )

    def get_carrier_names(self, carrier_ids: Iterable[int]) -> Dict[int, str]:
        return self._lookup_map('carriers', 'name', carrier_ids)

    def get_material_codes(self, material_ids: Iterable[int]) -> Dict[int, str]:
        return self._lookup_map('materials', 'code', material_ids)

    def set_status(self, order_id: int, status: int) -> bool:
        with self._transaction() as cur:
            updated = self._execute_scalar(cur, """
                UPDATE orders
                SET status = %s
                WHERE id = %s
                RETURNING id
            """, (int(status), order_id))
            if updated is None:
                return False
            log_operation(cur, 'UPDATE_STATUS', 'orders', order_id,
                          f"Status changed to {int(status)}")
            return True


# Singleton instance
orders_repository = OrdersRepository()
