"""Password hashing and validation utilities."""

import re

import bcrypt

from muebleria_api.config import get_settings


class PasswordService:
    """Service for password hashing and validation."""

    BCRYPT_ROUNDS = 12

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=self.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash.

        Args:
            password: Plain text password
            hashed: Hashed password

        Returns:
            True if password matches
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, UnicodeDecodeError, UnicodeEncodeError):
            # Invalid hash format or encoding issues
            return False

    @property
    def min_length(self) -> int:
        """Minimum password length from settings."""
        return get_settings().password_min_length

    def validate_password_strength(self, password: str) -> tuple[bool, list[str]]:
        """Validate password meets complexity requirements.

        Args:
            password: Password to validate

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        if len(password) < self.min_length:
            errors.append(f"Password must be at least {self.min_length} characters")

        if not re.search(r"[A-Za-z]", password):
            errors.append("Password must contain at least one letter")

        if not re.search(r"\d", password):
            errors.append("Password must contain at least one digit")

        # bcrypt ignores everything past 72 bytes
        if len(password.encode("utf-8")) > 72:
            errors.append("Password must be at most 72 bytes")

        return len(errors) == 0, errors


# Singleton instance
_password_service: PasswordService | None = None


def get_password_service() -> PasswordService:
    """Get the password service singleton."""
    global _password_service
    if _password_service is None:
        _password_service = PasswordService()
    return _password_service
