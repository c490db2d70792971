# =============================================================================
# SALES ORDERS v1.0 - MODELS
# =============================================================================
# Pydantic models for the orders core.
#
# STRUCTURE:
# - Enumerations (OrderStatus)
# - Input DTOs (CreateOrderDTO, UpdateOrderDTO, OrderFilters, OrderStatsFilters)
# - Order aggregate (Order, OrderItem + joined summaries)
# - List and statistics projections
#
# Attributes are snake_case; every model also accepts and dumps the camelCase
# names used by callers (orderTypeId, expectedDeliveryDate, ...).
# =============================================================================

from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import config
from .utils.dates import parse_datetime


# =============================================================================
# ENUMERATIONS
# =============================================================================

class OrderStatus(IntEnum):
    """
    Order lifecycle codes.

    DRAFT -> SUBMITTED -> PROCESSING -> COMPLETED, forward only.
    Only DRAFT orders can be updated or deleted.
    """
    DRAFT = 10
    SUBMITTED = 11
    PROCESSING = 12
    COMPLETED = 13


# Status given to every order item when written
ITEM_STATUS_DEFAULT = 1


class CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode='json')


def _coerce_datetime(value: Any) -> Any:
    if value is None or isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    return parsed if parsed is not None else value


def _coerce_local_datetime(value: Any) -> Any:
    """Like _coerce_datetime, aware values converted to naive local time."""
    value = _coerce_datetime(value)
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# =============================================================================
# INPUT DTOs
# =============================================================================

class OrderItemInput(CamelModel):
    """Material/quantity line as supplied by the caller."""
    material_id: int
    quantity: int = Field(..., gt=0)


class CreateOrderDTO(CamelModel):
    """Payload for order creation."""
    order_type_id: int
    customer_id: int
    ship_to_account_id: int
    bill_to_account_id: int
    carrier_id: int
    carrier_service_id: int
    warehouse_id: Optional[int] = None
    expected_delivery_date: datetime
    items: List[OrderItemInput] = Field(..., min_length=1)

    @field_validator('expected_delivery_date', mode='before')
    @classmethod
    def parse_delivery_date(cls, v):
        return _coerce_datetime(v)


# Scalar fields an update may change. The required references ignore an
# explicit null, warehouse_id can be cleared.
UPDATABLE_FIELDS = (
    'order_type_id',
    'ship_to_account_id',
    'bill_to_account_id',
    'carrier_id',
    'carrier_service_id',
    'warehouse_id',
    'expected_delivery_date',
)
NULLABLE_FIELDS = ('warehouse_id',)


class UpdateOrderDTO(CamelModel):
    """
    Partial update payload.

    Presence is tracked by pydantic (model_fields_set): a field that was not
    supplied is left untouched, a field supplied as None is distinguishable
    from an absent one.
    """
    order_type_id: Optional[int] = None
    ship_to_account_id: Optional[int] = None
    bill_to_account_id: Optional[int] = None
    carrier_id: Optional[int] = None
    carrier_service_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    expected_delivery_date: Optional[datetime] = None
    items: Optional[List[OrderItemInput]] = None

    @field_validator('expected_delivery_date', mode='before')
    @classmethod
    def parse_delivery_date(cls, v):
        # Blank means not supplied
        if isinstance(v, str) and not v.strip():
            return None
        return _coerce_datetime(v)

    @field_validator('warehouse_id')
    @classmethod
    def clear_empty_warehouse(cls, v):
        return v or None

    @property
    def replaces_items(self) -> bool:
        return 'items' in self.model_fields_set and self.items is not None

    def scalar_changes(self) -> Dict[str, Any]:
        """
        Scalar fields to write, keyed by attribute name.

        Returns:
            Dict {field: value} for supplied fields only
        """
        changes = {}
        for name in UPDATABLE_FIELDS:
            if name not in self.model_fields_set:
                continue
            value = getattr(self, name)
            if value is None and name not in NULLABLE_FIELDS:
                continue
            changes[name] = value
        return changes


class OrderFilters(CamelModel):
    """List filters; the created_at range applies only when both ends are set."""
    status: Optional[int] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    customer_id: Optional[int] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: config.ORDERS_PAGE_SIZE, ge=1)

    @field_validator('from_date', 'to_date', mode='before')
    @classmethod
    def parse_dates(cls, v):
        # Compared with naive created_at values
        return _coerce_local_datetime(v)

    @property
    def has_date_range(self) -> bool:
        return self.from_date is not None and self.to_date is not None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class OrderStatsFilters(CamelModel):
    """Statistics window; no customer_id means all customers."""
    customer_id: Optional[int] = None
    period_in_months: int = Field(default_factory=lambda: config.STATS_PERIOD_MONTHS, ge=1)


# =============================================================================
# JOINED SUMMARIES (read-only)
# =============================================================================

class CarrierSummary(CamelModel):
    name: str
    lookup_code: Optional[str] = None


class CarrierServiceSummary(CamelModel):
    name: str
    description: Optional[str] = None


class WarehouseSummary(CamelModel):
    name: str
    city: Optional[str] = None
    state: Optional[str] = None


class AccountSummary(CamelModel):
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class CustomerSummary(CamelModel):
    name: str


class MaterialSummary(CamelModel):
    code: str
    description: Optional[str] = None
    uom: Optional[str] = None


# =============================================================================
# ORDER AGGREGATE
# =============================================================================

class OrderItem(CamelModel):
    """Order line, owned by exactly one order."""
    id: Optional[int] = None
    material_id: int
    quantity: int
    status: int = ITEM_STATUS_DEFAULT
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None
    modified_at: Optional[datetime] = None
    modified_by: Optional[int] = None
    material: Optional[MaterialSummary] = None


class OrderSummary(CamelModel):
    """Row of an order list."""
    id: int
    order_number: str
    status: int
    expected_delivery_date: datetime
    customer_name: str = ''
    item_count: int = 0
    total_quantity: int = 0
    created_at: datetime
    modified_at: datetime


class Order(CamelModel):
    """Order with its items and display summaries."""
    id: int
    lookup_code: str
    order_number: str
    status: int
    order_type_id: int
    customer_id: int
    ship_to_account_id: int
    bill_to_account_id: int
    carrier_id: int
    carrier_service_id: int
    warehouse_id: Optional[int] = None
    expected_delivery_date: datetime
    created_at: datetime
    modified_at: datetime
    created_by: Optional[int] = None
    modified_by: Optional[int] = None
    items: List[OrderItem] = Field(default_factory=list)

    carrier: Optional[CarrierSummary] = None
    carrier_service: Optional[CarrierServiceSummary] = None
    warehouse: Optional[WarehouseSummary] = None
    ship_to_account: Optional[AccountSummary] = None
    bill_to_account: Optional[AccountSummary] = None
    customer: Optional[CustomerSummary] = None

    @property
    def is_draft(self) -> bool:
        return self.status == OrderStatus.DRAFT

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_summary(self) -> OrderSummary:
        return OrderSummary(
            id=self.id,
            order_number=self.order_number,
            status=self.status,
            expected_delivery_date=self.expected_delivery_date,
            customer_name=self.customer.name if self.customer else '',
            item_count=self.item_count,
            total_quantity=self.total_quantity,
            created_at=self.created_at,
            modified_at=self.modified_at,
        )


# =============================================================================
# LIST
# =============================================================================

class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class OrderListResponse(CamelModel):
    orders: List[OrderSummary]
    pagination: Pagination


# =============================================================================
# STATISTICS
# =============================================================================

class OrderStatusStats(CamelModel):
    status: int
    count: int
    percentage: float


class OrderMonthStats(CamelModel):
    month: str
    count: int


class TopCarrierStats(CamelModel):
    carrier_id: int
    carrier_name: str
    order_count: int


class TopMaterialStats(CamelModel):
    material_id: int
    material_code: str
    order_count: int
    total_quantity: int


class OrderStatistics(CamelModel):
    total_orders: int
    orders_by_status: List[OrderStatusStats] = Field(default_factory=list)
    orders_by_month: List[OrderMonthStats] = Field(default_factory=list)
    top_carriers: List[TopCarrierStats] = Field(default_factory=list)
    top_materials: List[TopMaterialStats] = Field(default_factory=list)
