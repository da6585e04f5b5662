"""
Identity Core - Authentication and actors.
"""

from practicum.kernel.identity.actor import Actor
from practicum.kernel.identity.password import PasswordHasher, verify_password, hash_password
from practicum.kernel.identity.jwt import (
    JWTManager,
    AccessTokenPayload,
    create_access_token,
    verify_access_token,
)
from practicum.kernel.identity.identity_service import IdentityService

__all__ = [
    "Actor",
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "JWTManager",
    "AccessTokenPayload",
    "create_access_token",
    "verify_access_token",
    "IdentityService",
]
