# =============================================================================
# SALES ORDERS v1.0 - ORDER STATISTICS
# =============================================================================
# Aggregates over a rolling window of N months (30 days each):
#   - breakdown by status with percentage of the total
#   - monthly trend (YYYY-MM)
#   - top carriers by order count, top materials by item count
# =============================================================================

import logging
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from ...config import config
from ...models import (
    OrderMonthStats,
    OrderStatistics,
    OrderStatsFilters,
    OrderStatusStats,
    TopCarrierStats,
    TopMaterialStats,
)
from ...persistence.store import OrderStore
from .results import MSG_STATS_FAILED, ServiceResult, describe_error
from .validation import errors_from_pydantic

logger = logging.getLogger('orders.statistics')

DAYS_PER_MONTH = 30
UNKNOWN_NAME = 'Unknown'


def window_start(now: datetime, period_in_months: int) -> datetime:
    """Start of the statistics window: now - months x 30 days."""
    return now - timedelta(days=period_in_months * DAYS_PER_MONTH)


def percentage(count: int, total: int) -> float:
    """count/total x 100, rounded half-up to one decimal; 0 when total is 0."""
    if not total:
        return 0.0
    value = Decimal(count) * 100 / Decimal(total)
    return float(value.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def get_order_stats(
    store: OrderStore,
    filters: Optional[Union[OrderStatsFilters, Mapping[str, Any]]] = None,
    now: Optional[datetime] = None
) -> ServiceResult:
    """
    Order statistics for a customer (or all customers) over a window.

    Args:
        store: Order store
        filters: customerId (optional), periodInMonths (default 12)
        now: End of the window (default: datetime.now())

    Returns:
        ServiceResult with OrderStatistics
    """
    if not isinstance(filters, OrderStatsFilters):
        try:
            filters = OrderStatsFilters.model_validate(filters or {})
        except ValidationError as e:
            errors = errors_from_pydantic(e)
            logger.warning(f"Order statistics failed - Validation errors: {errors}")
            return ServiceResult.validation_error(errors)

    start = window_start(now or datetime.now(), filters.period_in_months)

    try:
        raw = store.get_stats(filters.customer_id, start, config.STATS_TOP_N)
        carrier_names = store.get_carrier_names(cid for cid, _ in raw.carrier_counts)
        material_codes = store.get_material_codes(mid for mid, _, _ in raw.material_counts)
    except Exception as e:
        logger.error(f"Order statistics failed: {describe_error(e)}")
        return ServiceResult.operation_error(MSG_STATS_FAILED)

    stats = OrderStatistics(
        total_orders=raw.total_orders,
        orders_by_status=[
            OrderStatusStats(status=status, count=count,
                             percentage=percentage(count, raw.total_orders))
            for status, count in raw.status_counts
        ],
        orders_by_month=[
            OrderMonthStats(month=month, count=count)
            for month, count in raw.month_counts
        ],
        top_carriers=[
            TopCarrierStats(carrier_id=carrier_id,
                            carrier_name=carrier_names.get(carrier_id, UNKNOWN_NAME),
                            order_count=count)
            for carrier_id, count in raw.carrier_counts
        ],
        top_materials=[
            TopMaterialStats(material_id=material_id,
                             material_code=material_codes.get(material_id, UNKNOWN_NAME),
                             order_count=count,
                             total_quantity=quantity)
            for material_id, count, quantity in raw.material_counts
        ],
    )

    logger.debug(f"Order statistics: {stats.total_orders} orders since {start:%Y-%m-%d}")
    return ServiceResult.ok(stats)
