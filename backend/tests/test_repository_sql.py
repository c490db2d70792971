# =============================================================================
# SALES ORDERS v1.0 - POSTGRESQL REPOSITORY TESTS
# =============================================================================
# SQL filter builders (unit) and OrdersRepository against a live database
# (integration, skipped when PostgreSQL is not reachable)
# =============================================================================

import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from salesorders.exceptions import OrderNotDraftError
from salesorders.models import CreateOrderDTO, OrderFilters, OrderStatus, UpdateOrderDTO
from salesorders.persistence.repositories.base import BaseRepository
from salesorders.persistence.repositories.orders import (
    OrdersRepository,
    build_order_filters,
    build_stats_filters,
)

from factories import OrderPayloadFactory


# Day reserved for integration data, cleaned before and after each test
TEST_DAY = datetime(2099, 12, 31, 12, 0)
TEST_PREFIX = "ORD991231"


@pytest.mark.unit
class TestOrderFilterSQL:
    """Test WHERE clause builder."""

    def test_no_filters(self):
        """Everything matches."""
        assert build_order_filters(OrderFilters()) == ("1=1", [])

    def test_all_filters(self):
        """Customer, status and range ANDed, range inclusive."""
        filters = OrderFilters(
            customerId=7, status=10, fromDate="2024-01-01", toDate="2024-01-31"
        )

        where, params = build_order_filters(filters)

        assert where == (
            "o.customer_id = %s AND o.status = %s AND o.created_at BETWEEN %s AND %s"
        )
        assert params == [7, 10, datetime(2024, 1, 1), datetime(2024, 1, 31)]

    def test_half_range_ignored(self):
        """A single bound adds no condition."""
        where, params = build_order_filters(OrderFilters(toDate="2024-01-31"))

        assert where == "1=1"
        assert params == []

    def test_stats_window(self):
        """Window start always, customer only when given."""
        start = datetime(2023, 3, 21)

        assert build_stats_filters(None, start) == ("o.created_at >= %s", [start])
        assert build_stats_filters(7, start) == (
            "o.created_at >= %s AND o.customer_id = %s", [start, 7]
        )


class RecordingCursor:
    """Cursor stand-in keeping executed statements."""

    def __init__(self, row=None):
        self.row = row
        self.statements = []

    def execute(self, query, params=()):
        self.statements.append((" ".join(query.split()), list(params)))

    def fetchone(self):
        return self.row


@pytest.mark.unit
class TestBaseRepositorySQL:
    """Test row helpers built from table name and primary key."""

    def test_lock_by_id(self):
        """FOR UPDATE on the repository table."""
        cur = RecordingCursor(row={'id': 5, 'status': 10})

        row = OrdersRepository()._lock_by_id(cur, 5, "id, status")

        assert row == {'id': 5, 'status': 10}
        assert cur.statements == [
            ("SELECT id, status FROM orders WHERE id = %s FOR UPDATE", [5])
        ]

    def test_lock_missing_row(self):
        """No row gives None."""
        assert OrdersRepository()._lock_by_id(RecordingCursor(), 99) is None

    def test_update_and_delete(self):
        """Columns in order, key parameter last."""
        repository = BaseRepository('order_items', 'order_id')
        cur = RecordingCursor()

        repository._update_by_id(cur, 5, {'quantity': 3, 'status': 1})
        repository._delete_by_id(cur, 5)

        assert cur.statements == [
            ("UPDATE order_items SET quantity = %s, status = %s WHERE order_id = %s", [3, 1, 5]),
            ("DELETE FROM order_items WHERE order_id = %s", [5]),
        ]


# =============================================================================
# INTEGRATION
# =============================================================================

def _cleanup():
    from salesorders.database_pg import transaction

    with transaction() as cur:
        cur.execute("""
            DELETE FROM order_items WHERE order_id IN (
                SELECT id FROM orders WHERE order_number LIKE %s
            )
        """, (f"{TEST_PREFIX}%",))
        cur.execute("DELETE FROM orders WHERE order_number LIKE %s", (f"{TEST_PREFIX}%",))
        cur.execute("DELETE FROM order_number_counters WHERE prefix = %s", (TEST_PREFIX,))


@pytest.fixture
def repository():
    """
    OrdersRepository on the configured database.
    """
    from salesorders.database_pg import init_database
    from salesorders.persistence.repositories import orders_repository

    try:
        init_database()
    except Exception as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    _cleanup()
    yield orders_repository
    _cleanup()


def _dto(**kwargs) -> CreateOrderDTO:
    return CreateOrderDTO.model_validate(
        OrderPayloadFactory.with_items([(1, 3), (2, 5)], **kwargs)
    )


@pytest.mark.integration
class TestOrdersRepository:
    """Test OrdersRepository against PostgreSQL."""

    def test_create_and_find(self, repository):
        """Numbering, DRAFT status and items round trip."""
        order = repository.create(_dto(), actor_id=1, now=TEST_DAY)

        assert order.order_number == f"{TEST_PREFIX}0001"
        assert order.lookup_code == order.order_number
        assert order.status == OrderStatus.DRAFT
        assert [(i.material_id, i.quantity) for i in order.items] == [(1, 3), (2, 5)]
        assert repository.find_by_id(order.id) == order

    def test_update_replaces_items(self, repository):
        """Items replaced and scalar applied in one transaction."""
        order = repository.create(_dto(), actor_id=1, now=TEST_DAY)
        dto = UpdateOrderDTO.model_validate({
            "warehouseId": None,
            "items": [{"materialId": 3, "quantity": 1}],
        })

        updated = repository.update(order.id, dto, actor_id=2, now=TEST_DAY)

        assert updated.warehouse_id is None
        assert updated.modified_by == 2
        assert [(i.material_id, i.quantity) for i in updated.items] == [(3, 1)]

    def test_update_non_draft_raises(self, repository):
        """Locked re-check of the DRAFT status."""
        order = repository.create(_dto(), actor_id=1, now=TEST_DAY)
        repository.set_status(order.id, OrderStatus.SUBMITTED)

        with pytest.raises(OrderNotDraftError):
            repository.update(order.id, UpdateOrderDTO(carrierId=4), actor_id=1, now=TEST_DAY)

    def test_delete(self, repository):
        """Order and items removed."""
        order = repository.create(_dto(), actor_id=1, now=TEST_DAY)

        repository.delete(order.id)

        assert repository.find_by_id(order.id) is None

    def test_list_filters(self, repository):
        """Customer filter and pagination totals."""
        repository.create(_dto(customerId=7), actor_id=1, now=TEST_DAY)
        repository.create(_dto(customerId=8), actor_id=1, now=TEST_DAY)

        page = repository.list(OrderFilters(
            customerId=8, fromDate=TEST_DAY, toDate=TEST_DAY
        ))

        assert page.total == 1
        assert page.orders[0].customer_id == 8

    @pytest.mark.slow
    def test_concurrent_numbers(self, repository):
        """Counter row serializes concurrent creators."""
        count = 20

        with ThreadPoolExecutor(max_workers=5) as pool:
            orders = list(pool.map(
                lambda _: repository.create(_dto(), actor_id=1, now=TEST_DAY),
                range(count)
            ))

        numbers = sorted(order.order_number for order in orders)
        assert numbers == [f"{TEST_PREFIX}{n:04d}" for n in range(1, count + 1)]
