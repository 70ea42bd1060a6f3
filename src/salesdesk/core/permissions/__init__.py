"""Role permission matrices."""

from salesdesk.core.permissions.matrix import (
    ModulePermissions,
    PermissionMatrixEditor,
    from_storage_shape,
    to_storage_shape,
)
from salesdesk.core.permissions.types import RoleRecord

__all__ = [
    "ModulePermissions",
    "PermissionMatrixEditor",
    "RoleRecord",
    "from_storage_shape",
    "to_storage_shape",
]
