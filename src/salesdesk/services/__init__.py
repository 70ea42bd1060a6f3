"""Application services."""

from salesdesk.services.roles import RoleService

__all__ = ["RoleService"]
