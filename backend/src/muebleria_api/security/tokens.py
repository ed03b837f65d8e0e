"""JWT access tokens and credential freshness."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt

from muebleria_api.config import get_settings
from muebleria_api.exceptions import AuthenticationError
from muebleria_api.models.domain.role import Role


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of an access token."""

    subject: UUID
    issued_at: datetime
    expires_at: datetime


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _issue_instant(now: datetime, password_changed_at: datetime | None) -> datetime:
    """Whole-second ``iat`` that never precedes the last password change."""
    issued = _as_aware(now).replace(microsecond=0)
    if password_changed_at is not None and issued < _as_aware(password_changed_at):
        issued += timedelta(seconds=1)
    return issued


def create_access_token(
    account_id: UUID,
    username: str,
    role: Role,
    issued_at: datetime | None = None,
    password_changed_at: datetime | None = None,
) -> tuple[str, datetime]:
    """Create a signed JWT access token.

    ``iat`` is encoded in whole seconds. When dropping the fraction would
    put it before ``password_changed_at``, it is rounded up to the next
    second instead.

    Args:
        account_id: Account UUID (token subject)
        username: Login name
        role: Account role
        issued_at: Issue instant (defaults to now)
        password_changed_at: The account's last password change, if any

    Returns:
        Tuple of (token string, expiration instant)
    """
    settings = get_settings()
    issued_at = _issue_instant(issued_at or datetime.now(timezone.utc), password_changed_at)
    expire = issued_at + timedelta(minutes=settings.jwt_expiration_minutes)

    payload = {
        "sub": str(account_id),
        "username": username,
        "role": role.value,
        "iat": issued_at,
        "exp": expire,
    }

    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, expire


def decode_token(token: str) -> TokenClaims:
    """Decode and verify a JWT access token.

    Args:
        token: JWT token string

    Returns:
        TokenClaims with subject and issue instant

    Raises:
        AuthenticationError: If the token is invalid, expired or malformed
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
        return TokenClaims(
            subject=UUID(payload["sub"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (JWTError, KeyError, TypeError, ValueError) as e:
        raise AuthenticationError("Invalid or expired token") from e


def is_token_still_valid(token_issued_at: datetime, password_changed_at: datetime | None) -> bool:
    """Check that a token was not issued before the last password change.

    Both instants are compared exactly.

    Args:
        token_issued_at: The token's ``iat`` instant
        password_changed_at: The account's last password change, if any

    Returns:
        True if the token is still acceptable
    """
    if password_changed_at is None:
        return True
    return _as_aware(token_issued_at) >= _as_aware(password_changed_at)
