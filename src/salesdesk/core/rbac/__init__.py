"""RBAC core domain.

Resolver functions live in ``salesdesk.core.rbac.resolver`` and guards in
``salesdesk.core.rbac.guards``.
"""

from salesdesk.core.rbac.types import SYSTEM_ROLES, Action, LegacyAction, Role

__all__ = [
    "Action",
    "LegacyAction",
    "Role",
    "SYSTEM_ROLES",
]
