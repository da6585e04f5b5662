"""
FastAPI dependencies for authentication and database sessions.

Routes never inspect tokens themselves: they receive an ``Actor`` and pass
it explicitly into the engines. Auth failures are raised as domain errors so
they render with the same ``{detail, code}`` body as engine errors.
"""

import uuid
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from practicum.database import get_db
from practicum.kernel.errors import Forbidden, Unauthenticated
from practicum.kernel.identity.actor import Actor
from practicum.kernel.identity.identity_service import IdentityService
from practicum.kernel.identity.jwt import verify_access_token
from practicum.kernel.models.user import User, UserRole


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> User:
    """Get current authenticated user or raise Unauthenticated."""
    if not credentials:
        raise Unauthenticated("Not authenticated")

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise Unauthenticated("Invalid or expired token")

    try:
        user_id = uuid.UUID(payload.sub)
    except ValueError:
        raise Unauthenticated("Invalid or expired token") from None

    user = await IdentityService(db).get_user_by_id(user_id)
    if not user:
        raise Unauthenticated("User not found")

    if not user.is_active:
        raise Forbidden("User account is disabled")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_current_actor(user: CurrentUser) -> Actor:
    return Actor.from_user(user)


CurrentActor = Annotated[Actor, Depends(get_current_actor)]


async def require_admin(user: CurrentUser) -> User:
    """Require the current user to be an admin."""
    if UserRole(user.role) != UserRole.ADMIN:
        raise Forbidden("Admin access required")
    return user


AdminUser = Annotated[User, Depends(require_admin)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def get_user_agent(request: Request) -> Optional[str]:
    """Extract user agent from request."""
    return request.headers.get("User-Agent")
