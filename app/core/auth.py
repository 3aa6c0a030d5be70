import logging
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from uuid import UUID

from app.core.permissions import RequestContext
from app.core.security import verify_token
from app.db.base import get_db
from app.db.models.user import User as UserModel

logger = logging.getLogger(__name__)


def _extract_bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    # Validate token structure before decoding
    if len(token.split('.')) != 3:
        return None
    return token


async def get_request_context(request: Request, db: AsyncSession = Depends(get_db)) -> RequestContext:
    """
    Resolve the caller's identity and permissions from the bearer token.

    Never raises for a missing or bad token: the anonymous context is returned
    and the operation itself decides between 401 and 403.
    """
    token = _extract_bearer_token(request)
    if token is None:
        return RequestContext.anonymous()

    try:
        payload = verify_token(token)
        user_id = UUID(payload["sub"])
    except (ValueError, KeyError, TypeError) as e:
        logger.info(f"Rejected bearer token: {e}")
        return RequestContext.anonymous()

    stmt = select(UserModel).where(UserModel.id == user_id)
    result = await db.execute(stmt)
    user = result.scalars().first()

    if user is None or not user.is_active:
        return RequestContext.anonymous()
    if user.role is None or user.role.permissions is None:
        return RequestContext(user_id=user.id)

    return RequestContext(user_id=user.id, permissions=list(user.role.permissions))
