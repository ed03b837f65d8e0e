"""Role hierarchy permission tests."""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from muebleria_api.models.domain.role import Role
from muebleria_api.security import hierarchy


def principal(role: Role) -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), role=role)


EQUAL_LEVEL_PAIRS = [
    (Role.GESTOR_SUCURSAL, Role.GESTOR_INVENTARIO),
    (Role.GESTOR_INVENTARIO, Role.GESTOR_SUCURSAL),
    (Role.VENDEDOR, Role.DRIVER),
    (Role.DRIVER, Role.VENDEDOR),
    (Role.ADMIN, Role.ADMIN),
]


class TestRoleModel:
    """Tests for role levels and parsing."""

    def test_levels(self) -> None:
        assert Role.DEVELOPER.level == 100
        assert Role.ADMIN.level == 90
        assert Role.GESTOR_SUCURSAL.level == 50
        assert Role.GESTOR_INVENTARIO.level == 50
        assert Role.VENDEDOR.level == 20
        assert Role.DRIVER.level == 20
        assert Role.AGENT.level == 10

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("admin", Role.ADMIN),
            ("ROLE_VENDEDOR", Role.VENDEDOR),
            ("role_driver", Role.DRIVER),
            (" Gestor_Sucursal ", Role.GESTOR_SUCURSAL),
            ("cashier", None),
            ("", None),
            (None, None),
        ],
    )
    def test_from_string(self, name, expected) -> None:
        assert Role.from_string(name) == expected


class TestCanCreate:
    """Tests for account creation permissions."""

    @pytest.mark.parametrize("actor_role", list(Role))
    def test_developer_role_never_creatable(self, actor_role: Role) -> None:
        assert hierarchy.can_create(actor_role, Role.DEVELOPER) is False

    @pytest.mark.parametrize("role", [r for r in Role if r != Role.DEVELOPER])
    def test_developer_creates_every_other_role(self, role: Role) -> None:
        assert hierarchy.can_create(Role.DEVELOPER, role) is True

    def test_admin_creates_only_lower_levels(self) -> None:
        assert hierarchy.can_create(Role.ADMIN, Role.ADMIN) is False
        assert hierarchy.can_create(Role.ADMIN, Role.GESTOR_SUCURSAL) is True
        assert hierarchy.can_create(Role.ADMIN, Role.AGENT) is True

    @pytest.mark.parametrize(
        "actor_role",
        [Role.GESTOR_SUCURSAL, Role.GESTOR_INVENTARIO, Role.VENDEDOR, Role.DRIVER, Role.AGENT],
    )
    def test_lower_roles_create_nothing(self, actor_role: Role) -> None:
        assert not any(hierarchy.can_create(actor_role, role) for role in Role)


class TestCanReadAndUpdate:
    """Tests for read, update, delete and schedule permissions."""

    def test_self_read_allowed_self_update_denied(self) -> None:
        for role in Role:
            me = principal(role)
            assert hierarchy.can_read(me, me) is True
            assert hierarchy.can_update(me, me) is False
            assert hierarchy.can_manage_schedule(me, me) is False

    @pytest.mark.parametrize("actor_role", list(Role))
    def test_other_developer_is_untouchable(self, actor_role: Role) -> None:
        actor, subject = principal(actor_role), principal(Role.DEVELOPER)
        assert hierarchy.can_read(actor, subject) is False
        assert hierarchy.can_update(actor, subject) is False
        assert hierarchy.can_delete(actor, subject) is False

    def test_admin_manages_lower_levels_only(self) -> None:
        admin = principal(Role.ADMIN)
        assert hierarchy.can_update(admin, principal(Role.VENDEDOR)) is True
        assert hierarchy.can_read(admin, principal(Role.GESTOR_INVENTARIO)) is True
        assert hierarchy.can_update(admin, principal(Role.ADMIN)) is False

    @pytest.mark.parametrize("actor_role,subject_role", EQUAL_LEVEL_PAIRS)
    def test_equal_levels_never_manage_each_other(self, actor_role: Role, subject_role: Role) -> None:
        actor, subject = principal(actor_role), principal(subject_role)
        assert hierarchy.can_update(actor, subject) is False
        assert hierarchy.can_delete(actor, subject) is False
        assert hierarchy.can_manage_schedule(actor, subject) is False

    def test_mid_level_roles_manage_nobody(self) -> None:
        gestor = principal(Role.GESTOR_SUCURSAL)
        assert hierarchy.can_update(gestor, principal(Role.VENDEDOR)) is False
        assert hierarchy.can_read(gestor, principal(Role.AGENT)) is False

    def test_delete_restore_and_schedule_follow_update(self) -> None:
        for actor_role in Role:
            for subject_role in Role:
                actor, subject = principal(actor_role), principal(subject_role)
                expected = hierarchy.can_update(actor, subject)
                assert hierarchy.can_delete(actor, subject) is expected
                assert hierarchy.can_restore(actor, subject) is expected
                assert hierarchy.can_manage_schedule(actor, subject) is expected


class TestDeveloperOnlyPermissions:
    """Tests for DEVELOPER-only capabilities and list visibility."""

    def test_only_developer_sees_deleted_and_changes_roles(self) -> None:
        for role in Role:
            assert hierarchy.can_view_deleted(role) is (role == Role.DEVELOPER)
            assert hierarchy.can_change_role(role) is (role == Role.DEVELOPER)

    def test_visible_roles(self) -> None:
        assert Role.DEVELOPER not in hierarchy.visible_roles(Role.DEVELOPER)
        assert Role.ADMIN in hierarchy.visible_roles(Role.DEVELOPER)
        assert set(hierarchy.visible_roles(Role.ADMIN)) == {
            Role.GESTOR_SUCURSAL,
            Role.GESTOR_INVENTARIO,
            Role.VENDEDOR,
            Role.DRIVER,
            Role.AGENT,
        }
        assert hierarchy.visible_roles(Role.VENDEDOR) == []
