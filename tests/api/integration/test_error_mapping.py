"""Errors raised by protean itself are answered in the stockroom error shape."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ObjectNotFoundError
from protean.exceptions import ValidationError as ProteanValidationError

from stockroom.api import register_exception_handlers
from stockroom.exceptions import InsufficientStock


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/invalid")
    async def invalid():
        raise ProteanValidationError({"name": ["is required"]})

    @app.get("/missing")
    async def missing():
        raise ObjectNotFoundError("SKU with id sku-1 does not exist")

    @app.get("/short")
    async def short():
        raise InsufficientStock("sku-1", available=1, requested=3, name="Eggs")

    return TestClient(app)


class TestProteanErrors:
    def test_validation_error_is_400(self, client):
        response = client.get("/invalid")
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"] == {"messages": {"name": ["is required"]}}

    def test_object_not_found_is_404(self, client):
        response = client.get("/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestStockroomErrors:
    def test_stockroom_handler_wins_over_protean_base_class(self, client):
        response = client.get("/short")
        assert response.status_code == 409
        assert response.json()["details"]["available"] == 1
