"""
Password hashing utilities using bcrypt.
"""

import bcrypt

BCRYPT_ROUNDS = 12


class PasswordHasher:
    """Password hashing service."""

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """bcrypt only uses the first 72 bytes of a password."""
        return password.encode("utf-8")[:72]

    @staticmethod
    def hash(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password
            rounds: bcrypt cost factor

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=rounds)
        hashed = bcrypt.hashpw(PasswordHasher._truncate_password(password), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. A malformed hash never verifies."""
        try:
            return bcrypt.checkpw(
                PasswordHasher._truncate_password(plain_password),
                hashed_password.encode("utf-8"),
            )
        except ValueError:
            return False


def hash_password(password: str) -> str:
    """Hash a password."""
    return PasswordHasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher.verify(plain_password, hashed_password)
