"""FastAPI routes for the Payments context: development gateway controls."""

import os

from fastapi import APIRouter, HTTPException

from payments.api.schemas import ConfigureGatewayRequest, GatewayConfigResponse
from payments.gateway import get_gateway, set_gateway
from payments.gateway.fake_adapter import FakeGateway

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Switch to the fake gateway and set whether signatures pass.

    This endpoint is only available when PROTEAN_ENV is not 'production'.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        gateway = FakeGateway()
        set_gateway(gateway)

    gateway.configure(should_succeed=body.should_succeed, available=body.available)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        available=gateway.available,
    )
