import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from ordering.api.errors import register_error_handlers
from ordering.api.routes import admin_router, agent_router, order_router
from ordering.domain import ordering
from storefront import get_storefront


@pytest.fixture()
def client(menu, gateway):
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with ordering.domain_context():
            return await call_next(request)

    register_error_handlers(app)
    app.include_router(order_router)
    app.include_router(admin_router)
    app.include_router(agent_router)

    get_storefront().set_online(True)
    return TestClient(app)


@pytest.fixture()
def place_order(client, address):
    """Helper: POST /orders and return the created order payload."""

    def _place(customer_id="cust-api-001", payment_method="online", items=None):
        response = client.post(
            "/orders",
            json={
                "items": items or [{"menu_item_id": "paneer-tikka", "quantity": 2}],
                "address": address,
                "payment_method": payment_method,
            },
            headers={"X-User-Id": customer_id},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _place
