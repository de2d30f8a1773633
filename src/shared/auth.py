"""Caller identity as handed over by the authenticating gateway.

Token verification happens upstream; by the time a request reaches these
routes the subject is in ``X-User-Id`` and the role in ``X-User-Role``.
"""

from fastapi import Header, HTTPException


async def caller_id(x_user_id: str = Header(default="")) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id


async def require_admin(x_user_role: str = Header(default="")) -> str:
    if x_user_role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return x_user_role
