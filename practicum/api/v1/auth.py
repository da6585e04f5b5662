"""
Authentication endpoints.
"""

from fastapi import APIRouter, Request

from practicum.api.deps import CurrentUser, DbSession, get_client_ip, get_user_agent
from practicum.kernel.errors import Unauthenticated
from practicum.kernel.identity.identity_service import IdentityService
from practicum.schemas.auth import TokenResponse, UserLogin, UserResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    data: UserLogin,
    db: DbSession,
):
    """
    Authenticate with email and password and return a bearer token.
    """
    result = await IdentityService(db).authenticate(
        email=data.email,
        password=data.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )

    if not result:
        raise Unauthenticated("Invalid email or password")

    user, token, expires_in = result
    return TokenResponse(
        access_token=token,
        expires_in=expires_in,
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: CurrentUser):
    """Get the signed-in user's profile."""
    return UserResponse.model_validate(user)
