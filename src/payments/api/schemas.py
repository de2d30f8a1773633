"""Pydantic request/response schemas for the Payments API."""

from pydantic import BaseModel


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    available: bool = True


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    available: bool
