# =============================================================================
# SALES ORDERS v1.0 - ORDER VALIDATION
# =============================================================================
# Pure checks on create/update payloads.
# Every rule is evaluated (no short-circuit) and contributes its message;
# nothing here raises for invalid data.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import ValidationError

from ...utils.dates import is_valid_date


MSG_ORDER_TYPE_REQUIRED = 'Order type is required'
MSG_CUSTOMER_REQUIRED = 'Customer is required'
MSG_SHIP_TO_REQUIRED = 'Ship to account is required'
MSG_BILL_TO_REQUIRED = 'Bill to account is required'
MSG_CARRIER_REQUIRED = 'Carrier is required'
MSG_CARRIER_SERVICE_REQUIRED = 'Carrier service is required'
MSG_DELIVERY_DATE_REQUIRED = 'Expected delivery date is required'
MSG_DELIVERY_DATE_INVALID = 'Invalid expected delivery date'
MSG_ITEMS_REQUIRED = 'At least one item is required'
MSG_ITEMS_QUANTITY = 'All items must have a quantity greater than zero'

# (snake_case key, camelCase key, message), in evaluation order
REQUIRED_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ('order_type_id', 'orderTypeId', MSG_ORDER_TYPE_REQUIRED),
    ('customer_id', 'customerId', MSG_CUSTOMER_REQUIRED),
    ('ship_to_account_id', 'shipToAccountId', MSG_SHIP_TO_REQUIRED),
    ('bill_to_account_id', 'billToAccountId', MSG_BILL_TO_REQUIRED),
    ('carrier_id', 'carrierId', MSG_CARRIER_REQUIRED),
    ('carrier_service_id', 'carrierServiceId', MSG_CARRIER_SERVICE_REQUIRED),
)


@dataclass
class ValidationResult:
    """Outcome of a payload check."""
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {'isValid': self.is_valid, 'errors': list(self.errors)}


def _get(data: Mapping[str, Any], snake: str, camel: str) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel)


def _is_positive_quantity(item: Any) -> bool:
    if not isinstance(item, Mapping):
        return False
    quantity = item.get('quantity')
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return False
    return quantity > 0


def _items_errors(items: Any) -> List[str]:
    errors = []
    if not isinstance(items, list) or len(items) == 0:
        errors.append(MSG_ITEMS_REQUIRED)
    if not isinstance(items, list) or not all(_is_positive_quantity(i) for i in items):
        errors.append(MSG_ITEMS_QUANTITY)
    return errors


def validate_create(data: Mapping[str, Any]) -> ValidationResult:
    """
    Check a creation payload.

    Rules, in order: order type, customer, ship-to, bill-to, carrier and
    carrier service present; delivery date present and parseable; at least
    one item; every quantity > 0.

    Args:
        data: Payload (camelCase or snake_case keys)

    Returns:
        ValidationResult with all failing messages
    """
    errors = []

    for snake, camel, message in REQUIRED_FIELDS:
        if not _get(data, snake, camel):
            errors.append(message)

    delivery = _get(data, 'expected_delivery_date', 'expectedDeliveryDate')
    if not delivery:
        errors.append(MSG_DELIVERY_DATE_REQUIRED)
    elif not is_valid_date(delivery):
        errors.append(MSG_DELIVERY_DATE_INVALID)

    # Missing items also fail the quantity rule
    errors.extend(_items_errors(data.get('items')))

    return ValidationResult(errors)


def validate_update(data: Mapping[str, Any]) -> ValidationResult:
    """
    Check a partial update payload; only supplied fields are checked.

    Args:
        data: Payload (camelCase or snake_case keys)

    Returns:
        ValidationResult
    """
    errors = []

    delivery = _get(data, 'expected_delivery_date', 'expectedDeliveryDate')
    if delivery and not is_valid_date(delivery):
        errors.append(MSG_DELIVERY_DATE_INVALID)

    if 'items' in data and data['items'] is not None:
        errors.extend(_items_errors(data['items']))

    return ValidationResult(errors)


def errors_from_pydantic(exc: ValidationError) -> List[str]:
    """
    Flatten a pydantic ValidationError into "loc: message" strings.

    Example: "items.0.materialId: Field required"
    """
    messages = []
    for error in exc.errors():
        location = '.'.join(str(part) for part in error.get('loc', ()))
        text = error.get('msg', 'Invalid value')
        messages.append(f"{location}: {text}" if location else text)
    return messages
