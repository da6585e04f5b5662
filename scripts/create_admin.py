"""
Bootstrap an admin account so the first users and assignments can be created
through the API.

Usage:
    python scripts/create_admin.py admin@example.com "Ada Admin" 'Secret123'
"""

import asyncio
import sys

from practicum.database import async_session_maker, close_db, init_db
from practicum.kernel.errors import ValidationError
from practicum.kernel.identity.identity_service import IdentityService
from practicum.kernel.models.user import UserRole


async def main(email: str, full_name: str, password: str) -> int:
    await init_db()
    try:
        async with async_session_maker() as session:
            try:
                user = await IdentityService(session).create_user(
                    email=email,
                    password=password,
                    full_name=full_name,
                    role=UserRole.ADMIN,
                )
                await session.commit()
            except ValidationError as e:
                await session.rollback()
                print(f"Not created: {e.detail}")
                return 1
    finally:
        await close_db()
    print(f"Created admin {user.email} ({user.id})")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(*sys.argv[1:])))
