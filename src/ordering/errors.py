"""Typed failures raised by ordering operations.

Every error carries a stable ``code`` for API clients, the HTTP status the
boundary layer should answer with, and a Protean-style ``messages`` dict
(field name -> list of messages) so it renders the same way as
``protean.exceptions.ValidationError``.
"""


class FoodstreamError(Exception):
    code = "ERROR"
    status_code = 400
    field = "_entity"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.messages = {field or self.field: [message]}

    def to_dict(self) -> dict:
        return {"code": self.code, "details": self.messages}


class NotFound(FoodstreamError):
    code = "NOT_FOUND"
    status_code = 404


class InvalidTransition(FoodstreamError):
    code = "INVALID_TRANSITION"
    field = "status"


class OrderNotReady(FoodstreamError):
    code = "ORDER_NOT_READY"
    field = "status"


class AlreadyAssigned(FoodstreamError):
    code = "ALREADY_ASSIGNED"
    field = "courier"


class AgentUnavailable(FoodstreamError):
    code = "AGENT_UNAVAILABLE"
    field = "agent"


class ItemNotFound(FoodstreamError):
    code = "ITEM_NOT_FOUND"
    field = "items"


class OutOfDeliveryRange(FoodstreamError):
    code = "OUT_OF_DELIVERY_RANGE"
    field = "address"


class InvalidSignature(FoodstreamError):
    code = "INVALID_SIGNATURE"
    field = "signature"


class InvalidOtp(FoodstreamError):
    code = "INVALID_OTP"
    field = "otp"


class Forbidden(FoodstreamError):
    code = "FORBIDDEN"
    status_code = 403


class RestaurantClosed(FoodstreamError):
    code = "RESTAURANT_CLOSED"
    status_code = 403


class GatewayUnavailable(FoodstreamError):
    code = "GATEWAY_UNAVAILABLE"
    status_code = 503
    field = "payment"
