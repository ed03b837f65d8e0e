"""Role domain model."""

from enum import StrEnum


class Role(StrEnum):
    """Staff roles, ordered by privilege level.

    Permission decisions compare ``level`` values; roles sharing a level
    cannot manage each other.
    """

    DEVELOPER = "DEVELOPER"
    ADMIN = "ADMIN"
    GESTOR_SUCURSAL = "GESTOR_SUCURSAL"
    GESTOR_INVENTARIO = "GESTOR_INVENTARIO"
    VENDEDOR = "VENDEDOR"
    DRIVER = "DRIVER"
    AGENT = "AGENT"

    @property
    def level(self) -> int:
        """Privilege level of the role. Higher means more privilege."""
        return ROLE_LEVELS[self]

    @classmethod
    def from_string(cls, name: str | None) -> "Role | None":
        """Resolve a role from a case-insensitive name.

        Accepts an optional ``ROLE_`` prefix. Returns None for unknown names.
        """
        if name is None:
            return None
        normalized = name.strip().upper()
        if normalized.startswith("ROLE_"):
            normalized = normalized[len("ROLE_"):]
        try:
            return cls(normalized)
        except ValueError:
            return None


ROLE_LEVELS: dict[Role, int] = {
    Role.DEVELOPER: 100,
    Role.ADMIN: 90,
    Role.GESTOR_SUCURSAL: 50,
    Role.GESTOR_INVENTARIO: 50,
    Role.VENDEDOR: 20,
    Role.DRIVER: 20,
    Role.AGENT: 10,
}

# The top role: never creatable, invisible to everyone but itself
TOP_ROLE = Role.DEVELOPER
