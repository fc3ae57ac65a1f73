import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain

from stockroom.api import (
    domain_context_middleware,
    inventory_router,
    kiosk_router,
    receiving_router,
    register_exception_handlers,
    replenishment_router,
)
from stockroom.auth import get_authenticator
from stockroom.ledger.sku import SKU


@pytest.fixture()
def client():
    app = FastAPI()
    app.middleware("http")(domain_context_middleware)
    register_exception_handlers(app)
    app.include_router(kiosk_router)
    app.include_router(receiving_router)
    app.include_router(inventory_router)
    app.include_router(replenishment_router)
    return TestClient(app)


@pytest.fixture(autouse=True)
def tokens():
    authenticator = get_authenticator()
    authenticator.configure("owner-token", "u-owner", "owner")
    authenticator.configure("staff-token", "u-staff", "staff")
    return authenticator


@pytest.fixture()
def add_sku():
    def _add(**overrides):
        defaults = {"name": "Iced Americano", "stock": 10, "price": 1500, "external_code": "880001"}
        defaults.update(overrides)
        sku = SKU.create(**defaults)
        current_domain.repository_for(SKU).add(sku)
        return sku

    return _add
