# =============================================================================
# SALES ORDERS v1.0 - ORDERS SERVICE PACKAGE
# =============================================================================
# Order service split into modules:
#   orders/numbering.py   - Order number format and sequence helpers
#   orders/validation.py  - Payload rules
#   orders/results.py     - ServiceResult and messages
#   orders/commands.py    - create_order, update_order, delete_order
#   orders/queries.py     - get_order_by_id, list_orders
#   orders/statistics.py  - get_order_stats
#   orders/service.py     - OrderService facade (store + clock)
# =============================================================================

# Numbering
from .numbering import (
    day_prefix,
    format_order_number,
    is_valid_order_number,
    next_order_number,
)

# Validation
from .validation import (
    ValidationResult,
    validate_create,
    validate_update,
)

# Results
from .results import (
    ResultKind,
    ServiceResult,
)

# Command functions
from .commands import (
    create_order,
    update_order,
    delete_order,
)

# Query functions
from .queries import (
    get_order_by_id,
    list_orders,
)

# Statistics
from .statistics import get_order_stats

# Facade
from .service import OrderService, get_order_service


__all__ = [
    # Numbering
    'day_prefix',
    'format_order_number',
    'is_valid_order_number',
    'next_order_number',
    # Validation
    'ValidationResult',
    'validate_create',
    'validate_update',
    # Results
    'ResultKind',
    'ServiceResult',
    # Commands
    'create_order',
    'update_order',
    'delete_order',
    # Queries
    'get_order_by_id',
    'list_orders',
    # Statistics
    'get_order_stats',
    # Facade
    'OrderService',
    'get_order_service',
]
