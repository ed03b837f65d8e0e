"""Role hierarchy permission predicates.

Every decision is a comparison of role levels plus an identity check. The
functions never raise; callers turn ``False`` into an authorization error.
Anything exposing ``id`` and ``role`` attributes can act as actor or subject
(domain models and ORM rows alike).
"""

from typing import Any, Protocol

from muebleria_api.models.domain.role import TOP_ROLE, Role


class Principal(Protocol):
    """Something with an identity and a role."""

    id: Any
    role: Role


def _outranks(actor_role: Role, subject_role: Role) -> bool:
    """Shared level rule: the top role manages all, ADMIN manages strictly lower levels."""
    if actor_role == TOP_ROLE:
        return True
    if actor_role == Role.ADMIN:
        return subject_role.level < actor_role.level
    return False


def can_create(actor_role: Role, role_to_assign: Role) -> bool:
    """Check whether an actor with ``actor_role`` may create an account with ``role_to_assign``.

    The top role can never be assigned through account creation.
    """
    if role_to_assign == TOP_ROLE:
        return False
    return _outranks(actor_role, role_to_assign)


def can_read(actor: Principal, subject: Principal) -> bool:
    """Check whether ``actor`` may view ``subject``.

    Self-read is always allowed. Top-role accounts are hidden from everyone else.
    """
    if actor.id == subject.id:
        return True
    if subject.role == TOP_ROLE:
        return False
    return _outranks(actor.role, subject.role)


def can_update(actor: Principal, subject: Principal) -> bool:
    """Check whether ``actor`` may modify ``subject`` through the management path.

    Self-updates go through the own-profile and own-password operations instead.
    """
    if actor.id == subject.id:
        return False
    if subject.role == TOP_ROLE:
        return False
    return _outranks(actor.role, subject.role)


def can_delete(actor: Principal, subject: Principal) -> bool:
    """Check whether ``actor`` may logically delete ``subject``."""
    return can_update(actor, subject)


def can_restore(actor: Principal, subject: Principal) -> bool:
    """Check whether ``actor`` may restore a deleted ``subject``."""
    return can_update(actor, subject)


def can_manage_schedule(actor: Principal, subject: Principal) -> bool:
    """Check whether ``actor`` may view or edit the access rules of ``subject``."""
    return can_update(actor, subject)


def can_view_deleted(actor_role: Role) -> bool:
    """Only the top role may see logically deleted accounts and branches."""
    return actor_role == TOP_ROLE


def can_change_role(actor_role: Role) -> bool:
    """Only the top role may reassign roles of existing accounts."""
    return actor_role == TOP_ROLE


def visible_roles(actor_role: Role) -> list[Role]:
    """Roles whose accounts show up when ``actor_role`` lists accounts."""
    return [role for role in Role if role != TOP_ROLE and _outranks(actor_role, role)]
