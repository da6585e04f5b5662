"""
The authenticated identity making a request.

An Actor is built once per request from the bearer token and passed
explicitly into every service call; nothing reads identity from globals.
"""

import uuid
from dataclasses import dataclass

from practicum.kernel.models.user import User, UserRole


@dataclass(frozen=True)
class Actor:
    id: uuid.UUID
    role: UserRole
    full_name: str = ""

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        # role comes back as a plain str from SQLite
        return cls(id=user.id, role=UserRole(user.role), full_name=user.full_name)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_mentor(self) -> bool:
        return self.role == UserRole.MENTOR

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    @property
    def is_reviewer(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.MENTOR)
