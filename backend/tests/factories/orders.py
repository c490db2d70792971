# =============================================================================
# SALES ORDERS v1.0 - ORDER FACTORIES
# =============================================================================
# Factories for order creation payloads (camelCase keys, as callers send them)
# =============================================================================

import factory
from typing import Any, Dict, List


class OrderItemPayloadFactory(factory.Factory):
    """
    Factory for order item lines.
    """

    class Meta:
        model = dict

    materialId = factory.Iterator([1, 2, 3])
    quantity = factory.Faker("random_int", min=1, max=50)


class OrderPayloadFactory(factory.Factory):
    """
    Factory for a valid create payload.

    Reference ids match the data seeded by the `store` fixture.
    """

    class Meta:
        model = dict

    orderTypeId = 1
    customerId = 7
    shipToAccountId = 70
    billToAccountId = 71
    carrierId = 3
    carrierServiceId = 30
    warehouseId = 5
    expectedDeliveryDate = "2024-03-22"
    items = factory.LazyFunction(lambda: OrderItemPayloadFactory.create_batch(2))

    @classmethod
    def with_items(cls, lines: List[tuple], **kwargs) -> Dict[str, Any]:
        """Payload with explicit (materialId, quantity) lines."""
        return cls(
            items=[{"materialId": m, "quantity": q} for m, q in lines],
            **kwargs
        )
