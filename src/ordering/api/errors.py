"""Exception handlers that render failures in the API envelope.

    {"success": false, "message": ..., "error": {"code": ..., "details": ...}}
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers
from starlette.exceptions import HTTPException as StarletteHTTPException

from ordering.errors import FoodstreamError

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str, code: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {"code": code, "details": details},
        },
    )


async def foodstream_error_handler(request: Request, exc: FoodstreamError) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        code=exc.code,
        status_code=exc.status_code,
    )
    return error_response(exc.status_code, exc.message, exc.code, exc.messages)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(400, "Validation failed", "VALIDATION_ERROR", exc.messages)


async def object_not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, "Not found", "NOT_FOUND", {"_entity": [str(exc)]})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), f"HTTP_{exc.status_code}")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(422, "Invalid request", "REQUEST_VALIDATION_ERROR", jsonable_encoder(exc.errors()))


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's defaults, then the envelope handlers on top."""
    register_exception_handlers(app)
    app.add_exception_handler(FoodstreamError, foodstream_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, object_not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
