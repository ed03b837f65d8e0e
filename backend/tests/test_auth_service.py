"""Login flow tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from fakes import DEFAULT_PASSWORD, FakeAccountRepository, as_actor, make_account, make_rule
from muebleria_api.exceptions import AccountDisabledError, AccountLockedError, InvalidCredentialsError
from muebleria_api.models.domain.account import DayOfWeek
from muebleria_api.models.domain.role import Role
from muebleria_api.security.tokens import decode_token
from muebleria_api.services.auth_service import AuthService

# 09:00 and 07:00 Monday in Mexico City
MONDAY_MORNING = datetime(2025, 3, 3, 15, 0, tzinfo=timezone.utc)
MONDAY_EARLY = datetime(2025, 3, 3, 13, 0, tzinfo=timezone.utc)


def service_with(*accounts) -> AuthService:
    service = AuthService(AsyncMock())
    service.account_repo = FakeAccountRepository(*accounts)
    return service


class TestAuthenticate:
    """Tests for AuthService.authenticate."""

    @pytest.mark.asyncio
    async def test_success_inside_window(self, vendedor) -> None:
        service = service_with(vendedor)

        result = await service.authenticate("vendedor", DEFAULT_PASSWORD, now=MONDAY_MORNING)

        assert result.token_type == "bearer"
        assert result.user.username == "vendedor"
        assert result.user.role == Role.VENDEDOR
        assert decode_token(result.access_token).subject == vendedor.id

    @pytest.mark.asyncio
    async def test_username_is_trimmed(self, admin) -> None:
        service = service_with(admin)
        result = await service.authenticate("  admin ", DEFAULT_PASSWORD)
        assert result.user.id == admin.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, vendedor) -> None:
        service = service_with(vendedor)
        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("vendedor", "Wrong12345", now=MONDAY_MORNING)

    @pytest.mark.asyncio
    async def test_unknown_user(self) -> None:
        service = service_with()
        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("nobody", DEFAULT_PASSWORD)

    @pytest.mark.asyncio
    async def test_deleted_user_looks_unknown(self) -> None:
        account = make_account(Role.VENDEDOR, username="gone", bypass=True, is_deleted=True)
        service = service_with(account)
        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("gone", DEFAULT_PASSWORD)

    @pytest.mark.asyncio
    async def test_inactive_user(self) -> None:
        account = make_account(Role.VENDEDOR, username="paused", bypass=True, is_active=False)
        service = service_with(account)
        with pytest.raises(AccountDisabledError):
            await service.authenticate("paused", DEFAULT_PASSWORD)

    @pytest.mark.asyncio
    async def test_locked_outside_hours(self, vendedor) -> None:
        service = service_with(vendedor)

        with pytest.raises(AccountLockedError) as exc_info:
            await service.authenticate("vendedor", DEFAULT_PASSWORD, now=MONDAY_EARLY)

        assert exc_info.value.reason == "Outside of allowed working hours"
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_locked_without_schedule(self) -> None:
        account = make_account(Role.AGENT, username="new-agent")
        service = service_with(account)

        with pytest.raises(AccountLockedError) as exc_info:
            await service.authenticate("new-agent", DEFAULT_PASSWORD, now=MONDAY_MORNING)

        assert exc_info.value.reason == "No work schedule assigned"

    @pytest.mark.asyncio
    async def test_wrong_password_never_reveals_lock(self, vendedor) -> None:
        service = service_with(vendedor)
        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("vendedor", "Wrong12345", now=MONDAY_EARLY)


class TestGetMe:
    """Tests for the own-account view."""

    def test_rules_listed_monday_first(self) -> None:
        account = make_account(
            Role.DRIVER,
            rules=[make_rule(DayOfWeek.FRIDAY), make_rule(DayOfWeek.MONDAY)],
        )
        account.first_name, account.last_name = "Luis", None

        info = AuthService(AsyncMock()).get_me(as_actor(account))

        assert [r.day_of_week for r in info.access_rules] == [DayOfWeek.MONDAY, DayOfWeek.FRIDAY]
        assert info.full_name == "Luis"
