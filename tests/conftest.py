"""
Shared fixtures: an in-memory order store wired into the app through
dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from foodtruck.main import app
from foodtruck.services.orders import OrderService, get_order_service
from foodtruck.services.storage import MemoryOrderStore


@pytest.fixture
def store():
    return MemoryOrderStore()


@pytest.fixture
def service(store):
    return OrderService(store)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_order_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_order():
    return {
        "items": [{"name": "Taco", "qty": 2}],
        "total": 8.5,
        "customerName": "Ana",
    }
