# =============================================================================
# SALES ORDERS v1.0 - ORDERS QUERIES
# =============================================================================
# Read operations: single order, filtered page
# =============================================================================

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from ...models import OrderFilters, OrderListResponse, Pagination
from ...persistence.store import OrderStore
from ...utils.response import pagination
from .results import (
    MSG_GET_FAILED,
    MSG_LIST_FAILED,
    MSG_ORDER_NOT_FOUND,
    ServiceResult,
    describe_error,
)
from .validation import errors_from_pydantic

logger = logging.getLogger('orders')


def get_order_by_id(store: OrderStore, order_id: int) -> ServiceResult:
    """Order with items and joined summaries."""
    try:
        order = store.find_by_id(order_id)
    except Exception as e:
        logger.error(f"Get order failed: {describe_error(e)}")
        return ServiceResult.operation_error(MSG_GET_FAILED)

    if order is None:
        logger.warning(f"Get order failed - Not found: {order_id}")
        return ServiceResult.not_found(MSG_ORDER_NOT_FOUND)

    return ServiceResult.ok(order)


def list_orders(
    store: OrderStore,
    filters: Optional[Union[OrderFilters, Mapping[str, Any]]] = None
) -> ServiceResult:
    """
    Filtered, paginated order list, newest first.

    Args:
        store: Order store
        filters: OrderFilters or mapping with status, fromDate, toDate,
            customerId, page, limit

    Returns:
        ServiceResult with OrderListResponse. A page past the end has no
        orders but carries the real totals.
    """
    if not isinstance(filters, OrderFilters):
        try:
            filters = OrderFilters.model_validate(filters or {})
        except ValidationError as e:
            errors = errors_from_pydantic(e)
            logger.warning(f"List orders failed - Validation errors: {errors}")
            return ServiceResult.validation_error(errors)

    try:
        page = store.list(filters)
    except Exception as e:
        logger.error(f"List orders failed: {describe_error(e)}")
        return ServiceResult.operation_error(MSG_LIST_FAILED)

    return ServiceResult.ok(OrderListResponse(
        orders=[order.to_summary() for order in page.orders],
        pagination=Pagination(**pagination(page.total, filters.page, filters.limit)),
    ))
