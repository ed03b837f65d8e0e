"""JWT and credential freshness tests."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import jwt

from muebleria_api.config import get_settings
from muebleria_api.exceptions import AuthenticationError
from muebleria_api.models.domain.role import Role
from muebleria_api.security.tokens import create_access_token, decode_token, is_token_still_valid


class TestAccessToken:
    """Tests for token creation and decoding."""

    def test_round_trip_claims(self) -> None:
        account_id = uuid4()
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)

        token, expires_at = create_access_token(account_id, "maria", Role.VENDEDOR, issued_at=issued_at)
        claims = decode_token(token)

        assert claims.subject == account_id
        assert claims.issued_at == issued_at
        assert claims.expires_at == expires_at.replace(microsecond=0)
        assert expires_at - issued_at == timedelta(minutes=get_settings().jwt_expiration_minutes)

    def test_payload_carries_username_and_role(self) -> None:
        settings = get_settings()
        token, _ = create_access_token(uuid4(), "maria", Role.DRIVER)
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        assert payload["username"] == "maria"
        assert payload["role"] == "DRIVER"

    def test_expired_token_rejected(self) -> None:
        long_ago = datetime.now(timezone.utc) - timedelta(days=2)
        token, _ = create_access_token(uuid4(), "maria", Role.AGENT, issued_at=long_ago)
        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            decode_token(token)

    def test_foreign_signature_rejected(self) -> None:
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": str(uuid4()), "iat": now, "exp": now + timedelta(hours=1)},
            "another-secret-entirely-0123456789abcdef",
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            decode_token(token)

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_rejected(self, token: str) -> None:
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_missing_subject_rejected(self) -> None:
        settings = get_settings()
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"iat": now, "exp": now + timedelta(hours=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(AuthenticationError):
            decode_token(token)


class TestTokenFreshness:
    """Tests for the password-change freshness check."""

    def test_never_changed_password(self) -> None:
        assert is_token_still_valid(datetime.now(timezone.utc), None) is True

    def test_issued_after_change(self) -> None:
        changed = datetime(2025, 3, 7, 10, 0, tzinfo=timezone.utc)
        assert is_token_still_valid(changed + timedelta(minutes=5), changed) is True

    def test_issued_before_change(self) -> None:
        changed = datetime(2025, 3, 7, 10, 0, tzinfo=timezone.utc)
        assert is_token_still_valid(changed - timedelta(seconds=1), changed) is False

    def test_earlier_in_same_second_is_stale(self) -> None:
        issued = datetime(2025, 3, 7, 10, 0, 0, tzinfo=timezone.utc)
        changed = datetime(2025, 3, 7, 10, 0, 0, 750000, tzinfo=timezone.utc)
        assert is_token_still_valid(issued, changed) is False

    def test_issued_at_change_instant_is_fresh(self) -> None:
        changed = datetime(2025, 3, 7, 10, 0, 0, tzinfo=timezone.utc)
        assert is_token_still_valid(changed, changed) is True

    def test_login_in_same_second_as_change_stays_valid(self) -> None:
        second = datetime.now(timezone.utc).replace(microsecond=0)
        changed = second.replace(microsecond=400000)
        now = second.replace(microsecond=900000)

        token, _ = create_access_token(
            uuid4(), "maria", Role.VENDEDOR, issued_at=now, password_changed_at=changed
        )
        claims = decode_token(token)

        assert claims.issued_at == second + timedelta(seconds=1)
        assert is_token_still_valid(claims.issued_at, changed) is True

    def test_token_issued_before_change_in_same_second_is_stale(self) -> None:
        second = datetime.now(timezone.utc).replace(microsecond=0)
        issued = second.replace(microsecond=200000)
        changed = second.replace(microsecond=600000)

        token, _ = create_access_token(uuid4(), "maria", Role.VENDEDOR, issued_at=issued)

        assert is_token_still_valid(decode_token(token).issued_at, changed) is False

    def test_issue_instant_not_rounded_without_change(self) -> None:
        issued_at = datetime.now(timezone.utc)
        token, expires_at = create_access_token(uuid4(), "maria", Role.VENDEDOR, issued_at=issued_at)
        assert decode_token(token).issued_at == issued_at.replace(microsecond=0)
        assert expires_at.microsecond == 0

    def test_naive_change_time_is_utc(self) -> None:
        changed = datetime(2025, 3, 7, 10, 0)
        issued = datetime(2025, 3, 7, 9, 0, tzinfo=timezone.utc)
        assert is_token_still_valid(issued, changed) is False

    def test_offsets_compared_as_instants(self) -> None:
        changed = datetime(2025, 3, 7, 10, 0, tzinfo=timezone.utc)
        # 05:30 in UTC-6 is 11:30 UTC
        issued = datetime(2025, 3, 7, 5, 30, tzinfo=timezone(timedelta(hours=-6)))
        assert is_token_still_valid(issued, changed) is True
