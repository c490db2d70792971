# =============================================================================
# SALES ORDERS v1.0 - SERVICE RESULTS
# =============================================================================
# Tagged outcome of every order operation.
# Expected failures (bad input, missing order, wrong status, store failure)
# are values, never exceptions.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ...exceptions import OrdersException
from ...utils.response import error_response, success_response


class ResultKind(str, Enum):
    OK = 'OK'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    NOT_FOUND = 'NOT_FOUND'
    STATE_VIOLATION = 'STATE_VIOLATION'
    OPERATION_ERROR = 'OPERATION_ERROR'


@dataclass
class ServiceResult:
    """
    Result of a lifecycle or statistics operation.

    Attributes:
        kind: Outcome tag
        data: Payload for OK (Order, OrderListResponse, OrderStatistics)
        error: Message for NOT_FOUND, STATE_VIOLATION, OPERATION_ERROR
        errors: Messages for VALIDATION_ERROR
    """
    kind: ResultKind
    data: Any = None
    error: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.kind is ResultKind.OK

    @classmethod
    def ok(cls, data: Any = None) -> 'ServiceResult':
        return cls(ResultKind.OK, data=data)

    @classmethod
    def validation_error(cls, errors: List[str]) -> 'ServiceResult':
        return cls(ResultKind.VALIDATION_ERROR, errors=list(errors))

    @classmethod
    def not_found(cls, message: str) -> 'ServiceResult':
        return cls(ResultKind.NOT_FOUND, error=message)

    @classmethod
    def state_violation(cls, message: str) -> 'ServiceResult':
        return cls(ResultKind.STATE_VIOLATION, error=message)

    @classmethod
    def operation_error(cls, message: str) -> 'ServiceResult':
        return cls(ResultKind.OPERATION_ERROR, error=message)

    def to_dict(self) -> Dict[str, Any]:
        """
        {success, data} on OK, {success, error|errors, code} otherwise.

        Pydantic payloads are dumped with camelCase keys.
        """
        if self.success:
            data = self.data.to_dict() if isinstance(self.data, BaseModel) else self.data
            return success_response(data)
        return error_response(self.error, code=self.kind.value, errors=self.errors)


def describe_error(exc: Exception) -> Any:
    """Log form of an exception caught at the service boundary."""
    if isinstance(exc, OrdersException):
        return exc.to_dict()
    return f"{type(exc).__name__}: {exc}"


# =============================================================================
# MESSAGES
# =============================================================================

MSG_ORDER_NOT_FOUND = 'Order not found'
MSG_UPDATE_NOT_DRAFT = 'Only draft orders can be updated'
MSG_DELETE_NOT_DRAFT = 'Only draft orders can be deleted'

MSG_CREATE_FAILED = 'Error creating order'
MSG_UPDATE_FAILED = 'Error updating order'
MSG_DELETE_FAILED = 'Error deleting order'
MSG_GET_FAILED = 'Error retrieving order'
MSG_LIST_FAILED = 'Error listing orders'
MSG_STATS_FAILED = 'Error retrieving order statistics'
