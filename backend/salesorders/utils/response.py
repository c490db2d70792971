# =============================================================================
# SALES ORDERS v1.0 - UTILS/RESPONSE
# =============================================================================
# Builders for the {success, data, error, errors} result shape
# =============================================================================

import math
from typing import Any, Dict, List


def success_response(data: Any = None, message: str = None, **kwargs) -> Dict[str, Any]:
    """
    Build standard success response.

    Args:
        data: Response payload
        message: Optional message
        **kwargs: Additional fields

    Returns:
        Standardized success response dict
    """
    response = {"success": True}
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    response.update(kwargs)
    return response


def error_response(message: str = None, code: str = None, errors: List[str] = None) -> Dict[str, Any]:
    """
    Build standard error response.

    Args:
        message: Error message (single failure)
        code: Optional error code
        errors: Validation messages (multiple failures)

    Returns:
        Standardized error response dict
    """
    response = {"success": False}
    if message:
        response["error"] = message
    if errors:
        response["errors"] = list(errors)
    if code:
        response["code"] = code
    return response


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit), 0 for an empty result."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def pagination(total: int, page: int, limit: int) -> Dict[str, int]:
    """Pagination metadata for page-numbered lists."""
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages(total, limit),
    }
