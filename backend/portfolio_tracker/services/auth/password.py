"""
Password hashing and verification using bcrypt.

passlib's CryptContext picks the bcrypt backend and handles salts and
constant-time comparison.
"""

from passlib.context import CryptContext


# "deprecated='auto'" lets a future scheme change re-hash on next login
_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12,
)


class PasswordService:
    """
    Stateless password helpers.
    """

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a plaintext password.

        Example:
            >>> PasswordService.hash_password("s3cret-pass").startswith("$2b$")
            True
        """
        return _pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Return True when plain_password matches hashed_password."""
        return _pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def needs_rehash(hashed_password: str) -> bool:
        """Whether a stored hash was made with outdated parameters."""
        return _pwd_context.needs_update(hashed_password)
