# =============================================================================
# SALES ORDERS v1.0 - ORDERS QUERIES TESTS
# =============================================================================
# get_order_by_id and list_orders
# =============================================================================

import math
import pytest
from datetime import datetime

from salesorders.exceptions import StoreError
from salesorders.models import OrderStatus
from salesorders.persistence import InMemoryOrderStore
from salesorders.services import OrderService, ResultKind
from salesorders.services.orders.results import (
    MSG_GET_FAILED,
    MSG_LIST_FAILED,
    MSG_ORDER_NOT_FOUND,
)

from conftest import ACTOR_ID
from factories import OrderPayloadFactory


class BrokenStore(InMemoryOrderStore):
    def find_by_id(self, order_id):
        raise StoreError("timeout")

    def list(self, filters):
        raise StoreError("timeout")


@pytest.fixture
def orders(service, store):
    """
    Five orders: customer 7 (x3) and 8 (x2), created on different days.
    """
    created = []
    days = [
        (7, datetime(2024, 1, 10, 9, 0)),
        (7, datetime(2024, 2, 10, 9, 0)),
        (8, datetime(2024, 2, 20, 9, 0)),
        (7, datetime(2024, 3, 1, 9, 0)),
        (8, datetime(2024, 3, 10, 9, 0)),
    ]
    for customer_id, created_at in days:
        order = service.create_order(
            OrderPayloadFactory.with_items([(1, 2), (2, 3)], customerId=customer_id),
            actor_id=ACTOR_ID
        ).data
        store.set_created_at(order.id, created_at)
        created.append(order)
    return created


class TestGetOrder:
    """Test single order retrieval."""

    def test_found(self, service, draft_order):
        """Full order with items."""
        result = service.get_order_by_id(draft_order.id)

        assert result.success
        assert result.data.order_number == draft_order.order_number
        assert result.data.item_count == 2

    def test_not_found(self, service):
        """Unknown id."""
        result = service.get_order_by_id(404)

        assert result.kind is ResultKind.NOT_FOUND
        assert result.error == MSG_ORDER_NOT_FOUND
        assert result.to_dict() == {
            "success": False,
            "error": MSG_ORDER_NOT_FOUND,
            "code": "NOT_FOUND",
        }

    def test_store_failure(self, clock):
        """Store exceptions become a terse operation error."""
        result = OrderService(store=BrokenStore(), clock=clock).get_order_by_id(1)

        assert result.kind is ResultKind.OPERATION_ERROR
        assert result.error == MSG_GET_FAILED

    def test_to_dict_uses_camel_case(self, service, draft_order):
        """Serialized order uses the data model names."""
        data = service.get_order_by_id(draft_order.id).to_dict()["data"]

        assert data["orderNumber"] == "ORD2403150001"
        assert data["shipToAccount"]["zipCode"] == "62701"
        assert data["items"][0]["materialId"] == 1
        assert data["expectedDeliveryDate"] == "2024-03-22T00:00:00"


class TestListOrders:
    """Test filtered, paginated list."""

    def test_newest_first(self, service, orders):
        """Ordered by created_at descending."""
        result = service.list_orders()

        ids = [summary.id for summary in result.data.orders]
        assert ids == [o.id for o in reversed(orders)]

    def test_tie_on_created_at_breaks_by_id(self, service, store, orders):
        """Same created_at: higher id first."""
        for order in orders:
            store.set_created_at(order.id, datetime(2024, 3, 1))

        ids = [s.id for s in service.list_orders().data.orders]

        assert ids == sorted(ids, reverse=True)

    def test_summary_fields(self, service, orders):
        """Summaries carry customer name and item totals."""
        summary = service.list_orders({"customerId": 7}).data.orders[0]

        assert summary.customer_name == "ACME Corp"
        assert summary.item_count == 2
        assert summary.total_quantity == 5

    def test_filter_customer(self, service, orders):
        """Only the customer's orders."""
        result = service.list_orders({"customerId": 8})

        assert result.data.pagination.total == 2
        assert {s.id for s in result.data.orders} == {orders[2].id, orders[4].id}

    def test_filter_status(self, service, store, orders):
        """Status filter."""
        store.set_status(orders[0].id, OrderStatus.SUBMITTED)

        result = service.list_orders({"status": OrderStatus.SUBMITTED})

        assert [s.id for s in result.data.orders] == [orders[0].id]

    def test_date_range_inclusive(self, service, orders):
        """Both ends are inclusive."""
        result = service.list_orders({
            "fromDate": "2024-02-10T09:00:00",
            "toDate": "2024-03-01T09:00:00",
        })

        assert {s.id for s in result.data.orders} == {orders[1].id, orders[2].id, orders[3].id}

    def test_date_range_needs_both_ends(self, service, orders):
        """A single bound is ignored."""
        result = service.list_orders({"fromDate": "2024-03-01"})

        assert result.data.pagination.total == 5

    def test_filters_combined(self, service, orders):
        """Filters are ANDed."""
        result = service.list_orders({
            "customerId": 7,
            "fromDate": "2024-02-01",
            "toDate": "2024-03-31",
        })

        assert {s.id for s in result.data.orders} == {orders[1].id, orders[3].id}

    @pytest.mark.parametrize("limit", [1, 2, 3, 5, 10])
    def test_total_pages(self, service, orders, limit):
        """totalPages = ceil(total / limit)."""
        pagination = service.list_orders({"limit": limit}).data.pagination

        assert pagination.total == 5
        assert pagination.limit == limit
        assert pagination.total_pages == math.ceil(5 / limit)

    def test_second_page(self, service, orders):
        """Offset = (page - 1) x limit."""
        result = service.list_orders({"page": 2, "limit": 2})

        assert [s.id for s in result.data.orders] == [orders[2].id, orders[1].id]

    def test_page_beyond_range(self, service, orders):
        """Empty page, real totals."""
        result = service.list_orders({"page": 10, "limit": 2})

        assert result.success
        assert result.data.orders == []
        assert result.data.pagination.total == 5
        assert result.data.pagination.total_pages == 3

    def test_empty_store(self, service):
        """No orders, zero pages."""
        result = service.list_orders()

        assert result.data.orders == []
        assert result.data.pagination.total_pages == 0
        assert result.data.pagination.page == 1
        assert result.data.pagination.limit == 20

    def test_to_dict(self, service, orders):
        """Serialized list uses camelCase pagination."""
        data = service.list_orders({"limit": 2}).to_dict()["data"]

        assert data["pagination"] == {"total": 5, "page": 1, "limit": 2, "totalPages": 3}
        assert data["orders"][0]["customerName"] == "Globex"

    def test_invalid_page(self, service):
        """page must be >= 1."""
        result = service.list_orders({"page": 0})

        assert result.kind is ResultKind.VALIDATION_ERROR
        assert result.errors[0].startswith("page")

    def test_store_failure(self, clock):
        """Store exceptions become a terse operation error."""
        result = OrderService(store=BrokenStore(), clock=clock).list_orders()

        assert result.kind is ResultKind.OPERATION_ERROR
        assert result.error == MSG_LIST_FAILED
