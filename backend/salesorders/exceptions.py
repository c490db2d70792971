# =============================================================================
# SALES ORDERS v1.0 - EXCEPTIONS
# =============================================================================
# Custom exceptions raised by the persistence layer.
# The order service converts them to ServiceResult values, they never
# reach the caller.
# =============================================================================

from typing import Optional, Dict, Any


class OrdersException(Exception):
    """
    Base exception for the orders core.

    All custom exceptions extend this class.
    """
    code: str = "INTERNAL_ERROR"
    detail: str = "Internal error"

    def __init__(self, detail: Optional[str] = None, extra: Dict[str, Any] = None):
        self.detail = detail or self.__class__.detail
        self.extra = extra or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Dict form for logging."""
        return {
            "code": self.code,
            "message": self.detail,
            **self.extra
        }


# =============================================================================
# GENERIC
# =============================================================================

class NotFoundError(OrdersException):
    """Resource not found."""
    code = "NOT_FOUND"
    detail = "Resource not found"


class ConflictError(OrdersException):
    """Conflict with the current state of the resource."""
    code = "CONFLICT"
    detail = "Conflict with the current state of the resource"


class StoreError(OrdersException):
    """Persistence failure (connectivity, constraint, timeout)."""
    code = "STORE_ERROR"
    detail = "Order store failure"


# =============================================================================
# ORDERS DOMAIN
# =============================================================================

class OrderNotFoundError(NotFoundError):
    """Order not found."""
    code = "ORDER_NOT_FOUND"
    detail = "Order not found"


class OrderNotDraftError(ConflictError):
    """Order is past DRAFT and can no longer be changed."""
    code = "ORDER_NOT_DRAFT"
    detail = "Only draft orders can be modified"


class OrderNumberExhaustedError(StoreError):
    """No 4-digit sequence left for the day."""
    code = "ORDER_NUMBER_EXHAUSTED"
    detail = "Daily order number sequence exhausted"


class DuplicateOrderNumberError(StoreError):
    """Order number already assigned."""
    code = "DUPLICATE_ORDER_NUMBER"
    detail = "Order number already exists"
