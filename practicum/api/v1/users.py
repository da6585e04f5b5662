"""
User administration endpoints (admin only).
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from practicum.api.deps import AdminUser, DbSession, get_client_ip
from practicum.kernel.identity.identity_service import IdentityService
from practicum.kernel.models.user import UserRole
from practicum.schemas.auth import UserCreate, UserResponse

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    data: UserCreate,
    admin: AdminUser,
    db: DbSession,
):
    """Create an account with any role."""
    user = await IdentityService(db).create_user(
        email=data.email,
        password=data.password,
        full_name=data.full_name,
        role=data.role,
        created_by=admin.id,
        ip_address=get_client_ip(request),
    )
    return UserResponse.model_validate(user)


@router.get("", response_model=List[UserResponse])
async def list_users(
    admin: AdminUser,
    db: DbSession,
    role: Optional[UserRole] = Query(None, description="Only users with this role"),
):
    """List accounts, ordered by name."""
    users = await IdentityService(db).list_users(role=role)
    return [UserResponse.model_validate(u) for u in users]
