# =============================================================================
# SALES ORDERS v1.0 - TEST CONFIGURATION
# =============================================================================
# Global fixtures and configuration for pytest
# =============================================================================

import pytest
from datetime import datetime
from typing import Any, Dict

from salesorders.models import Order
from salesorders.persistence import InMemoryOrderStore, set_order_store
from salesorders.services import OrderService

from factories import OrderPayloadFactory


# Day of the end-to-end scenario
FROZEN_NOW = datetime(2024, 3, 15, 10, 30, 0)

ACTOR_ID = 42


# =============================================================================
# STORE FIXTURES
# =============================================================================

def seed_references(store: InMemoryOrderStore) -> InMemoryOrderStore:
    """Reference rows used by the payload factories."""
    store.add_reference('customers', 7, name='ACME Corp')
    store.add_reference('customers', 8, name='Globex')
    store.add_reference('accounts', 70, name='ACME Warehouse', address='1 Main St',
                        city='Springfield', state='IL', zip_code='62701')
    store.add_reference('accounts', 71, name='ACME Billing', address='2 Main St',
                        city='Springfield', state='IL', zip_code='62701')
    store.add_reference('carriers', 3, name='FastShip', lookup_code='FST')
    store.add_reference('carriers', 4, name='SlowBoat', lookup_code='SLB')
    store.add_reference('carrier_services', 30, name='Ground', description='3-5 days')
    store.add_reference('warehouses', 5, name='Central DC', city='Chicago', state='IL')
    store.add_reference('materials', 1, code='MAT-001', description='Bolts', uom='BOX')
    store.add_reference('materials', 2, code='MAT-002', description='Nuts', uom='BOX')
    store.add_reference('materials', 3, code='MAT-003', description='Washers', uom='BAG')
    return store


@pytest.fixture
def store() -> InMemoryOrderStore:
    """
    Fresh in-memory store with reference data.
    """
    return seed_references(InMemoryOrderStore())


@pytest.fixture
def clock():
    """
    Mutable frozen clock: set clock.now to move time.
    """
    class FrozenClock:
        now = FROZEN_NOW

        def __call__(self) -> datetime:
            return self.now

    return FrozenClock()


@pytest.fixture
def service(store, clock) -> OrderService:
    """
    OrderService bound to the in-memory store and the frozen clock.
    """
    return OrderService(store=store, clock=clock)


@pytest.fixture(autouse=True)
def reset_defaults():
    """
    Reset the process-wide store after each test.
    """
    yield
    set_order_store(None)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def order_payload() -> Dict[str, Any]:
    """
    Valid create payload with two items.
    """
    return OrderPayloadFactory.with_items([(1, 3), (2, 5)])


@pytest.fixture
def draft_order(service, order_payload) -> Order:
    """
    DRAFT order created through the service.
    """
    result = service.create_order(order_payload, actor_id=ACTOR_ID)
    assert result.success, result.to_dict()
    return result.data


# =============================================================================
# MARKER CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """
    Register custom markers.
    """
    config.addinivalue_line(
        "markers", "slow: long-running tests"
    )
    config.addinivalue_line(
        "markers", "integration: integration tests (require PostgreSQL)"
    )
    config.addinivalue_line(
        "markers", "unit: isolated unit tests"
    )
