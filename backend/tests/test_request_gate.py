"""Per-request gate tests: token, freshness and access window checks over HTTP."""

from datetime import datetime, time, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from fakes import bearer, make_account, make_rule
from muebleria_api.models.domain.account import DayOfWeek
from muebleria_api.models.domain.role import Role

FRIDAY_NOON = datetime(2025, 3, 7, 12, 0, tzinfo=timezone.utc)
FRIDAY_EVENING = datetime(2025, 3, 7, 20, 0, tzinfo=timezone.utc)
# 09:00 and 07:00 in Mexico City
MONDAY_MORNING = datetime(2025, 3, 3, 15, 0, tzinfo=timezone.utc)
MONDAY_EARLY = datetime(2025, 3, 3, 13, 0, tzinfo=timezone.utc)

ME = "/api/v1/auth/me"


class TestTokenChecks:
    """Requests without a usable token are anonymous."""

    def test_missing_token(self, client: TestClient) -> None:
        response = client.get(ME)
        assert response.status_code == 401
        assert response.json() == {
            "error": "Authentication required",
            "message": "Authentication required",
        }

    def test_malformed_token(self, client: TestClient) -> None:
        response = client.get(ME, headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_unknown_account(self, client: TestClient) -> None:
        ghost = make_account(Role.ADMIN, bypass=True)
        response = client.get(ME, headers=bearer(ghost))
        assert response.status_code == 401

    @pytest.mark.parametrize("state", [{"is_active": False}, {"is_deleted": True}])
    def test_inactive_or_deleted_account(self, client: TestClient, repo, state) -> None:
        account = make_account(Role.ADMIN, bypass=True, **state)
        repo._store(account)
        response = client.get(ME, headers=bearer(account))
        assert response.status_code == 401


class TestAccessWindowGate:
    """Access windows are enforced on every request."""

    def test_bypass_account_always_passes(self, client: TestClient, repo, clock) -> None:
        account = make_account(Role.ADMIN, bypass=True)
        repo._store(account)
        clock(MONDAY_EARLY)

        response = client.get(ME, headers=bearer(account))

        assert response.status_code == 200
        assert response.json()["username"] == account.username
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_inside_window(self, client: TestClient, repo, clock) -> None:
        account = make_account(Role.VENDEDOR, rules=[make_rule(DayOfWeek.MONDAY)])
        repo._store(account)
        clock(MONDAY_MORNING)

        response = client.get(ME, headers=bearer(account))

        assert response.status_code == 200
        body = response.json()
        assert body["access_rules"][0]["day_of_week"] == "MONDAY"
        assert body["bypass_access_rules"] is False

    def test_outside_window(self, client: TestClient, repo, clock) -> None:
        account = make_account(Role.VENDEDOR, rules=[make_rule(DayOfWeek.MONDAY)])
        repo._store(account)
        clock(MONDAY_EARLY)

        response = client.get(ME, headers=bearer(account))

        assert response.status_code == 403
        assert response.json() == {
            "error": "Access denied",
            "message": "Access outside of allowed hours",
        }

    def test_no_schedule_denied(self, client: TestClient, repo, clock) -> None:
        account = make_account(Role.AGENT)
        repo._store(account)
        clock(MONDAY_MORNING)

        response = client.get(ME, headers=bearer(account))

        assert response.status_code == 403

    def test_schedule_edit_applies_to_next_request(self, client: TestClient, repo, clock) -> None:
        account = make_account(Role.VENDEDOR, rules=[make_rule(DayOfWeek.MONDAY)])
        repo._store(account)
        clock(MONDAY_MORNING)
        headers = bearer(account)

        assert client.get(ME, headers=headers).status_code == 200
        account.access_rules[0].is_active = False
        assert client.get(ME, headers=headers).status_code == 403


class TestStaleCredential:
    """Tokens issued before a password change are rejected."""

    @pytest.fixture
    def friday_worker(self, repo):
        account = make_account(
            Role.VENDEDOR,
            rules=[make_rule(DayOfWeek.FRIDAY, time(9, 0), time(18, 0), tz="UTC")],
            password_changed_at=datetime.now(timezone.utc) - timedelta(days=30),
        )
        repo._store(account)
        return account

    def test_friday_noon_allowed(self, client: TestClient, friday_worker, clock) -> None:
        clock(FRIDAY_NOON)
        assert client.get(ME, headers=bearer(friday_worker)).status_code == 200

    def test_token_before_password_change_rejected(self, client: TestClient, friday_worker, clock) -> None:
        clock(FRIDAY_NOON)
        issued_at = datetime.now(timezone.utc) - timedelta(minutes=10)
        headers = bearer(friday_worker, issued_at=issued_at)
        assert client.get(ME, headers=headers).status_code == 200

        friday_worker.password_changed_at = datetime.now(timezone.utc) - timedelta(minutes=1)

        response = client.get(ME, headers=headers)
        assert response.status_code == 401
        assert response.json() == {
            "error": "Authentication required",
            "message": "Session is no longer valid, please log in again",
        }

    def test_stale_rejected_before_schedule_is_checked(self, client: TestClient, friday_worker, clock) -> None:
        clock(FRIDAY_EVENING)
        friday_worker.password_changed_at = datetime.now(timezone.utc)
        issued_at = datetime.now(timezone.utc) - timedelta(minutes=10)

        response = client.get(ME, headers=bearer(friday_worker, issued_at=issued_at))

        assert response.status_code == 401

    def test_new_token_after_change_accepted(self, client: TestClient, friday_worker, clock) -> None:
        clock(FRIDAY_NOON)
        friday_worker.password_changed_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        assert client.get(ME, headers=bearer(friday_worker)).status_code == 200


class TestManagerGate:
    """Account management requires a DEVELOPER or ADMIN role."""

    def test_vendedor_cannot_list_accounts(self, client: TestClient, repo, clock) -> None:
        account = make_account(Role.VENDEDOR, rules=[make_rule(DayOfWeek.MONDAY)])
        repo._store(account)
        clock(MONDAY_MORNING)

        response = client.get("/api/v1/accounts", headers=bearer(account))

        assert response.status_code == 403
        assert response.json() == {"error": "Access denied", "message": "Insufficient permissions"}

    def test_health_is_public(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
