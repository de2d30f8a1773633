"""FastAPI routes for the restaurant storefront status."""

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from ordering.api.schemas import ok
from shared.auth import require_admin
from storefront import get_storefront

storefront_router = APIRouter(prefix="/storefront", tags=["storefront"])


class StorefrontStatusRequest(BaseModel):
    is_online: bool | None = None
    auto_schedule: bool | None = None


class SpecialClosingRequest(BaseModel):
    reason: str | None = None
    closed_until: datetime | None = None


@storefront_router.get("/status")
async def get_status() -> dict:
    return ok(get_storefront().snapshot())


@storefront_router.get("/status/stream")
async def stream_status() -> StreamingResponse:
    """Server-sent events: the current status, then every change."""
    storefront = get_storefront()
    return StreamingResponse(
        storefront.broadcaster.stream(initial=storefront.snapshot()),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@storefront_router.put("/status", dependencies=[Depends(require_admin)])
async def update_status(body: StorefrontStatusRequest) -> dict:
    status = get_storefront().update(**body.model_dump(exclude_none=True))
    return ok(status, message=f"Restaurant is now {'open' if status['is_open'] else 'closed'}")


@storefront_router.post("/special-closing", dependencies=[Depends(require_admin)])
async def close_specially(body: SpecialClosingRequest) -> dict:
    return ok(get_storefront().close_specially(reason=body.reason, until=body.closed_until))


@storefront_router.delete("/special-closing", dependencies=[Depends(require_admin)])
async def lift_special_closing() -> dict:
    return ok(get_storefront().lift_special_closing())
