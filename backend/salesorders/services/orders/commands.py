# =============================================================================
# SALES ORDERS v1.0 - ORDERS COMMANDS
# =============================================================================
# Create, update and delete orders.
#
# Each function takes the store explicitly and returns a ServiceResult.
# Validation runs before the store is touched; store exceptions are logged
# and mapped to NOT_FOUND / STATE_VIOLATION / OPERATION_ERROR.
# =============================================================================

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from ...exceptions import OrderNotDraftError, OrderNotFoundError
from ...models import CreateOrderDTO, UpdateOrderDTO
from ...persistence.store import OrderStore
from .results import (
    MSG_CREATE_FAILED,
    MSG_DELETE_FAILED,
    MSG_DELETE_NOT_DRAFT,
    MSG_ORDER_NOT_FOUND,
    MSG_UPDATE_FAILED,
    MSG_UPDATE_NOT_DRAFT,
    ServiceResult,
    describe_error,
)
from .validation import errors_from_pydantic, validate_create, validate_update

logger = logging.getLogger('orders')

Payload = Union[Mapping[str, Any], BaseModel]


def _as_payload(data: Payload) -> Mapping[str, Any]:
    """Plain mapping for the validator; DTOs keep only the fields set."""
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return data if data is not None else {}


# =============================================================================
# CREATE
# =============================================================================

def create_order(
    store: OrderStore,
    data: Payload,
    actor_id: int,
    now: Optional[datetime] = None
) -> ServiceResult:
    """
    Validate and persist a new DRAFT order.

    Args:
        store: Order store
        data: Creation payload (camelCase or snake_case keys)
        actor_id: User creating the order
        now: Creation time (default: datetime.now())

    Returns:
        ServiceResult with the stored Order
    """
    payload = _as_payload(data)
    logger.info(f"Create order attempt - user {actor_id}")

    validation = validate_create(payload)
    if not validation.is_valid:
        logger.warning(f"Create order failed - Validation errors: {validation.errors}")
        return ServiceResult.validation_error(validation.errors)

    try:
        dto = CreateOrderDTO.model_validate(payload)
    except ValidationError as e:
        errors = errors_from_pydantic(e)
        logger.warning(f"Create order failed - Validation errors: {errors}")
        return ServiceResult.validation_error(errors)

    try:
        order = store.create(dto, actor_id, now or datetime.now())
    except Exception as e:
        logger.error(f"Create order failed: {describe_error(e)}")
        return ServiceResult.operation_error(MSG_CREATE_FAILED)

    logger.info(f"Create order successful - {order.order_number} (id {order.id}, {order.item_count} items)")
    return ServiceResult.ok(order)


# =============================================================================
# UPDATE
# =============================================================================

def update_order(
    store: OrderStore,
    order_id: int,
    data: Payload,
    actor_id: int,
    now: Optional[datetime] = None
) -> ServiceResult:
    """
    Apply a partial update to a DRAFT order.

    Only supplied fields change; supplied items replace all existing items.

    Args:
        store: Order store
        order_id: Order to update
        data: Partial payload
        actor_id: User performing the update
        now: Modification time (default: datetime.now())

    Returns:
        ServiceResult with the updated Order
    """
    payload = _as_payload(data)
    logger.info(f"Update order attempt - order {order_id}, user {actor_id}")

    validation = validate_update(payload)
    if not validation.is_valid:
        logger.warning(f"Update order failed - Validation errors: {validation.errors}")
        return ServiceResult.validation_error(validation.errors)

    try:
        dto = UpdateOrderDTO.model_validate(payload)
    except ValidationError as e:
        errors = errors_from_pydantic(e)
        logger.warning(f"Update order failed - Validation errors: {errors}")
        return ServiceResult.validation_error(errors)

    try:
        existing = store.find_by_id(order_id)
        if existing is None:
            logger.warning(f"Update order failed - Not found: {order_id}")
            return ServiceResult.not_found(MSG_ORDER_NOT_FOUND)
        if not existing.is_draft:
            logger.warning(f"Update order failed - Not in draft status: {order_id} (status {existing.status})")
            return ServiceResult.state_violation(MSG_UPDATE_NOT_DRAFT)

        order = store.update(order_id, dto, actor_id, now or datetime.now())

    except OrderNotFoundError:
        logger.warning(f"Update order failed - Not found: {order_id}")
        return ServiceResult.not_found(MSG_ORDER_NOT_FOUND)
    except OrderNotDraftError:
        logger.warning(f"Update order failed - Not in draft status: {order_id}")
        return ServiceResult.state_violation(MSG_UPDATE_NOT_DRAFT)
    except Exception as e:
        logger.error(f"Update order failed: {describe_error(e)}")
        return ServiceResult.operation_error(MSG_UPDATE_FAILED)

    logger.info(f"Update order successful - {order.order_number} (id {order.id})")
    return ServiceResult.ok(order)


# =============================================================================
# DELETE
# =============================================================================

def delete_order(store: OrderStore, order_id: int) -> ServiceResult:
    """Delete a DRAFT order and its items."""
    logger.info(f"Delete order attempt - order {order_id}")

    try:
        existing = store.find_by_id(order_id)
        if existing is None:
            logger.warning(f"Delete order failed - Not found: {order_id}")
            return ServiceResult.not_found(MSG_ORDER_NOT_FOUND)
        if not existing.is_draft:
            logger.warning(f"Delete order failed - Not in draft status: {order_id} (status {existing.status})")
            return ServiceResult.state_violation(MSG_DELETE_NOT_DRAFT)

        store.delete(order_id)

    except OrderNotFoundError:
        logger.warning(f"Delete order failed - Not found: {order_id}")
        return ServiceResult.not_found(MSG_ORDER_NOT_FOUND)
    except OrderNotDraftError:
        logger.warning(f"Delete order failed - Not in draft status: {order_id}")
        return ServiceResult.state_violation(MSG_DELETE_NOT_DRAFT)
    except Exception as e:
        logger.error(f"Delete order failed: {describe_error(e)}")
        return ServiceResult.operation_error(MSG_DELETE_FAILED)

    logger.info(f"Delete order successful - {existing.order_number} (id {order_id})")
    return ServiceResult.ok()
