"""RBAC domain types."""

from enum import Enum


class Role(str, Enum):
    """Role tags carried on an identity record."""

    SUPERADMIN = "superadmin"
    DEVELOPER = "developer"
    ADMIN = "admin"
    USER = "user"

    @property
    def is_system(self) -> bool:
        """Platform operator roles, outside org permission and plan gating."""
        return self in SYSTEM_ROLES

    @property
    def is_org_admin(self) -> bool:
        """Highest role inside a single organization."""
        return self is Role.ADMIN


SYSTEM_ROLES = frozenset({Role.SUPERADMIN, Role.DEVELOPER})


class Action(str, Enum):
    """Concrete actions stored in a role's permission matrix."""

    ADD = "add"
    UPDATE = "update"
    VIEW = "view"
    DELETE = "delete"


class LegacyAction(str, Enum):
    """Action vocabulary accepted by the deprecated ``can`` check."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
