# =============================================================================
# SALES ORDERS v1.0 - SERVICES PACKAGE
# =============================================================================
# Export main services
# =============================================================================

from .orders import (
    OrderService,
    ResultKind,
    ServiceResult,
    get_order_service,
    create_order,
    update_order,
    delete_order,
    get_order_by_id,
    list_orders,
    get_order_stats,
)

from . import orders

__all__ = [
    # Orders
    'OrderService',
    'ResultKind',
    'ServiceResult',
    'get_order_service',
    'create_order',
    'update_order',
    'delete_order',
    'get_order_by_id',
    'list_orders',
    'get_order_stats',
    # Modules
    'orders',
]
