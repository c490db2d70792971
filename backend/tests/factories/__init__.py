# =============================================================================
# SALES ORDERS v1.0 - TEST FACTORIES
# =============================================================================
# Factory Boy factories for test data generation
# =============================================================================

from .orders import OrderPayloadFactory, OrderItemPayloadFactory

__all__ = [
    "OrderPayloadFactory",
    "OrderItemPayloadFactory",
]
