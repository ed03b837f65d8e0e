"""HTTP tests for the auth, account and access rule routers."""

from fastapi.testclient import TestClient

from fakes import DEFAULT_PASSWORD, bearer, make_account, make_rule
from muebleria_api.models.domain.account import DayOfWeek
from muebleria_api.models.domain.role import Role
from muebleria_api.security.tokens import decode_token

LOGIN = "/api/v1/auth/login"
ACCOUNTS = "/api/v1/accounts"


class TestLogin:
    """Tests for POST /auth/login."""

    def test_success(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)

        response = client.post(LOGIN, json={"username": "admin", "password": DEFAULT_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] > 0
        assert body["user"]["role"] == "ADMIN"
        assert decode_token(body["access_token"]).subject == admin.id

    def test_bad_password(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)

        response = client.post(LOGIN, json={"username": "admin", "password": "Wrong12345"})

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required", "message": "Invalid credentials"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_unknown_user_same_answer(self, client: TestClient) -> None:
        response = client.post(LOGIN, json={"username": "nadie", "password": DEFAULT_PASSWORD})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_locked_without_schedule(self, client: TestClient, repo) -> None:
        repo._store(make_account(Role.AGENT, username="agente"))

        response = client.post(LOGIN, json={"username": "agente", "password": DEFAULT_PASSWORD})

        assert response.status_code == 403
        assert response.json() == {"error": "Access denied", "message": "No work schedule assigned"}

    def test_disabled_account(self, client: TestClient, repo) -> None:
        repo._store(make_account(Role.DRIVER, username="chofer", bypass=True, is_active=False))

        response = client.post(LOGIN, json={"username": "chofer", "password": DEFAULT_PASSWORD})

        assert response.status_code == 403
        assert response.json()["message"] == "Account is disabled"

    def test_missing_fields(self, client: TestClient) -> None:
        response = client.post(LOGIN, json={"username": "admin"})
        assert response.status_code == 422
        assert response.json()["error"] == "Invalid input data"


class TestOwnAccount:
    """Tests for the /auth/me endpoints."""

    def test_password_change_ends_old_session(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)
        headers = bearer(admin)

        response = client.put(
            "/api/v1/auth/me/password",
            headers=headers,
            json={"current_password": DEFAULT_PASSWORD, "new_password": "Changed2025"},
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.get("/api/v1/auth/me", headers=headers).status_code == 401

    def test_wrong_current_password(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)
        response = client.put(
            "/api/v1/auth/me/password",
            headers=bearer(admin),
            json={"current_password": "Nope12345", "new_password": "Changed2025"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request", "message": "Current password is incorrect"}

    def test_update_own_phone(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)
        response = client.patch("/api/v1/auth/me/profile", headers=bearer(admin), json={"phone": "5512345678"})
        assert response.status_code == 200
        assert response.json()["phone"] == "5512345678"


class TestAccountRoutes:
    """Tests for /accounts."""

    def test_create_with_schedule(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)

        response = client.post(
            ACCOUNTS,
            headers=bearer(admin),
            json={
                "username": "chofer.norte",
                "password": "Camion2025",
                "role": "DRIVER",
                "first_name": "Pedro",
                "last_name": "Soto",
                "driver_details": {"license_number": "PUE-0042", "license_expiration_date": "2028-05-31"},
                "access_rules": [
                    {"day_of_week": "SATURDAY", "start_time": "07:00", "end_time": "15:00"},
                    {"day_of_week": "MONDAY", "start_time": "07:00", "end_time": "15:00"},
                ],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert [r["day_of_week"] for r in body["access_rules"]] == ["MONDAY", "SATURDAY"]
        assert body["driver_details"] == {"license_number": "PUE-0042", "license_expiration_date": "2028-05-31"}
        assert "password_hash" not in body

    def test_create_bypass_with_rules_rejected(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)

        response = client.post(
            ACCOUNTS,
            headers=bearer(admin),
            json={
                "username": "gestor",
                "password": "Gestor2025",
                "role": "GESTOR_SUCURSAL",
                "first_name": "Ines",
                "last_name": "Mora",
                "bypass_access_rules": True,
                "access_rules": [{"day_of_week": "MONDAY", "start_time": "08:00", "end_time": "17:00"}],
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_create_developer_forbidden(self, client: TestClient, repo, developer) -> None:
        repo._store(developer)

        response = client.post(
            ACCOUNTS,
            headers=bearer(developer),
            json={
                "username": "otro.dev",
                "password": "Develop2025",
                "role": "DEVELOPER",
                "first_name": "Raul",
                "last_name": "Diaz",
                "bypass_access_rules": True,
            },
        )

        assert response.status_code == 403

    def test_invalid_timezone_rejected(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)

        response = client.post(
            ACCOUNTS,
            headers=bearer(admin),
            json={
                "username": "vendedora",
                "password": "Ventas2025",
                "role": "VENDEDOR",
                "first_name": "Eva",
                "last_name": "Rios",
                "access_rules": [
                    {"day_of_week": "MONDAY", "start_time": "08:00", "end_time": "17:00", "timezone": "Mars/Base"}
                ],
            },
        )

        assert response.status_code == 422

    def test_list_and_lookup(self, client: TestClient, repo, admin, vendedor) -> None:
        repo._store(admin)
        repo._store(vendedor)
        headers = bearer(admin)

        listing = client.get(ACCOUNTS, headers=headers).json()
        assert listing["total"] == 1
        assert listing["items"][0]["username"] == "vendedor"

        check = client.get(f"{ACCOUNTS}/check-username", headers=headers, params={"username": "vendedor"})
        assert check.json() == {"username": "vendedor", "available": False}

        by_name = client.get(f"{ACCOUNTS}/by-username/vendedor", headers=headers)
        assert by_name.status_code == 200
        assert by_name.json()["id"] == str(vendedor.id)

    def test_enable_bypass_clears_schedule(self, client: TestClient, repo, admin, vendedor) -> None:
        repo._store(admin)
        repo._store(vendedor)

        response = client.patch(
            f"{ACCOUNTS}/{vendedor.id}", headers=bearer(admin), json={"bypass_access_rules": True}
        )

        assert response.status_code == 200
        assert response.json()["bypass_access_rules"] is True
        assert response.json()["access_rules"] == []

    def test_disable_bypass_without_rules(self, client: TestClient, repo, admin) -> None:
        target = make_account(Role.VENDEDOR, bypass=True)
        repo._store(admin)
        repo._store(target)

        response = client.patch(
            f"{ACCOUNTS}/{target.id}", headers=bearer(admin), json={"bypass_access_rules": False}
        )

        assert response.status_code == 400

    def test_delete_and_restore(self, client: TestClient, repo, developer, vendedor) -> None:
        repo._store(developer)
        repo._store(vendedor)
        headers = bearer(developer)

        assert client.delete(f"{ACCOUNTS}/{vendedor.id}", headers=headers).status_code == 204
        assert client.get(f"{ACCOUNTS}", headers=headers, params={"status": "DELETED"}).json()["total"] == 1

        restored = client.post(f"{ACCOUNTS}/{vendedor.id}/restore", headers=headers)
        assert restored.status_code == 200
        assert restored.json()["is_deleted"] is False

    def test_unknown_account(self, client: TestClient, repo, admin) -> None:
        repo._store(admin)
        response = client.get(f"{ACCOUNTS}/00000000-0000-0000-0000-000000000000", headers=bearer(admin))
        assert response.status_code == 404
        assert response.json() == {"error": "Resource not found", "message": "Account not found"}


class TestAccessRuleRoutes:
    """Tests for /accounts/{id}/access-rules."""

    def test_duplicate_day_conflict(self, client: TestClient, repo, admin, vendedor) -> None:
        repo._store(admin)
        repo._store(vendedor)

        response = client.post(
            f"{ACCOUNTS}/{vendedor.id}/access-rules",
            headers=bearer(admin),
            json={"day_of_week": "MONDAY", "start_time": "18:00", "end_time": "21:00"},
        )

        assert response.status_code == 409
        assert response.json() == {
            "error": "Conflict",
            "message": "Account already has an access rule for this day",
        }

    def test_add_update_delete(self, client: TestClient, repo, admin, vendedor) -> None:
        repo._store(admin)
        repo._store(vendedor)
        headers = bearer(admin)
        base = f"{ACCOUNTS}/{vendedor.id}/access-rules"

        created = client.post(
            base,
            headers=headers,
            json={"day_of_week": "FRIDAY", "start_time": "09:00", "end_time": "18:00", "timezone": "UTC"},
        )
        assert created.status_code == 201
        rule_id = created.json()["id"]

        updated = client.put(f"{base}/{rule_id}", headers=headers, json={"end_time": "14:00"})
        assert updated.status_code == 200
        assert updated.json()["end_time"] == "14:00:00"

        assert client.delete(f"{base}/{rule_id}", headers=headers).status_code == 204
        listing = client.get(base, headers=headers).json()
        assert [r["day_of_week"] for r in listing["items"]] == ["MONDAY"]

    def test_time_with_offset_rejected(self, client: TestClient, repo, admin, vendedor) -> None:
        repo._store(admin)
        repo._store(vendedor)

        response = client.post(
            f"{ACCOUNTS}/{vendedor.id}/access-rules",
            headers=bearer(admin),
            json={"day_of_week": "FRIDAY", "start_time": "08:00:00+02:00", "end_time": "17:00:00", "timezone": "UTC"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "Invalid input data"

    def test_rule_of_other_account_not_found(self, client: TestClient, repo, admin, vendedor) -> None:
        other = make_account(Role.DRIVER, rules=[make_rule(DayOfWeek.TUESDAY)])
        for account in (admin, vendedor, other):
            repo._store(account)

        response = client.delete(
            f"{ACCOUNTS}/{vendedor.id}/access-rules/{other.access_rules[0].id}",
            headers=bearer(admin),
        )

        assert response.status_code == 404
