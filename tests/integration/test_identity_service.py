"""Integration tests for account creation and password login."""

import pytest

from practicum.kernel.errors import ValidationError
from practicum.kernel.identity.identity_service import IdentityService
from practicum.kernel.identity.jwt import verify_access_token
from practicum.kernel.models.user import UserRole


@pytest.fixture
def identity(db_session) -> IdentityService:
    return IdentityService(db_session)


class TestIdentityService:

    @pytest.mark.asyncio
    async def test_create_and_authenticate(self, identity):
        user = await identity.create_user("New.Mentor@Example.com", "SecurePass123", "New Mentor", UserRole.MENTOR)

        assert user.email == "new.mentor@example.com"
        assert user.role == "mentor"

        result = await identity.authenticate("new.mentor@example.com", "SecurePass123")
        assert result is not None
        authed, token, expires_in = result
        assert authed.id == user.id
        assert expires_in > 0
        payload = verify_access_token(token)
        assert payload.sub == str(user.id)
        assert payload.role == "mentor"

    @pytest.mark.asyncio
    async def test_wrong_password_or_disabled(self, db_session, identity):
        user = await identity.create_user("s@example.com", "SecurePass123", "S")

        assert await identity.authenticate("s@example.com", "nope") is None

        user.is_active = False
        await db_session.flush()
        assert await identity.authenticate("s@example.com", "SecurePass123") is None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, identity, student):
        with pytest.raises(ValidationError) as exc_info:
            await identity.create_user(student.email.upper(), "SecurePass123", "Dup")
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_list_users_by_role(self, identity, admin, mentor, student, other_student):
        students = await identity.list_users(role=UserRole.STUDENT)

        assert [u.full_name for u in students] == ["Alex Student", "Blake Student"]
        assert len(await identity.list_users()) == 4
