"""
Identity service for user management operations.
"""

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practicum.kernel.errors import ValidationError
from practicum.kernel.events.event_store import EventStore
from practicum.kernel.identity.jwt import JWTManager
from practicum.kernel.identity.password import hash_password, verify_password
from practicum.kernel.models.event_log import EventType
from practicum.kernel.models.user import User, UserRole
from practicum.logging_config import get_logger

logger = get_logger(__name__)


class IdentityService:
    """
    Service for user identity operations.

    Handles account creation, password authentication and user lookup.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.jwt_manager = JWTManager()
        self.event_store = EventStore(session)

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.STUDENT,
        created_by: Optional[uuid.UUID] = None,
        ip_address: Optional[str] = None,
    ) -> User:
        """
        Create a user account.

        Raises:
            ValidationError: If the email is already registered
        """
        if await self.get_user_by_email(email):
            raise ValidationError("Email already registered", field="email")

        user = User(
            email=email.lower().strip(),
            password_hash=hash_password(password),
            full_name=full_name.strip(),
            role=role.value,
        )
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)

        await self.event_store.log(
            event_type=EventType.USER_CREATED,
            entity_type="user",
            entity_id=user.id,
            user_id=created_by,
            payload={"email": user.email, "role": role},
            ip_address=ip_address,
        )
        logger.info("User created", extra={"user_id": str(user.id), "role": role.value})
        return user

    async def authenticate(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[tuple[User, str, int]]:
        """
        Check a password and sign an access token.

        Returns:
            Tuple of (User, access_token, expires_in_seconds), or None when the
            credentials are wrong or the account is disabled
        """
        user = await self.get_user_by_email(email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None

        role_value = user.role.value if hasattr(user.role, "value") else user.role
        token, _, _ = self.jwt_manager.create_access_token(
            user_id=user.id,
            email=user.email,
            role=role_value,
        )

        await self.event_store.log(
            event_type=EventType.USER_LOGGED_IN,
            entity_type="user",
            entity_id=user.id,
            user_id=user.id,
            payload={"method": "password"},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return user, token, self.jwt_manager.access_token_expire_minutes * 60

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == email.lower().strip())
        )
        return result.scalar_one_or_none()

    async def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        query = select(User).order_by(User.full_name)
        if role is not None:
            query = query.where(User.role == role.value)
        result = await self.session.execute(query)
        return list(result.scalars().all())
