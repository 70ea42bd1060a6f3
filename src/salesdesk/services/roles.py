"""Role administration service."""

from typing import Any

import structlog

from salesdesk.adapters.http import endpoints
from salesdesk.adapters.http.client import ApiClient
from salesdesk.core.auth.types import Identity
from salesdesk.core.entitlements.modules import ALWAYS_EDITABLE_KEYS, DEFAULT_CATALOG, ModuleCatalog
from salesdesk.core.exceptions import RoleError
from salesdesk.core.permissions.matrix import PermissionMatrixEditor
from salesdesk.core.permissions.types import RoleRecord

logger = structlog.get_logger()


class RoleService:
    """Service for creating, editing and deleting organization roles.

    Permission matrices are always sent in storage shape. Backend failures
    propagate as ApiError so the caller can show the server's message.
    """

    def __init__(self, client: ApiClient, catalog: ModuleCatalog = DEFAULT_CATALOG) -> None:
        self._client = client
        self._catalog = catalog

    async def list_roles(self) -> list[RoleRecord]:
        """List the organization's roles."""
        response = await self._client.get(endpoints.ROLES)
        return [RoleRecord.model_validate(item) for item in response.get("data") or []]

    async def create_role(
        self,
        name: str,
        description: str | None = None,
        web_portal_access: bool = False,
        mobile_app_access: bool = False,
    ) -> RoleRecord:
        """Create a role with no permissions on any module.

        Raises:
            RoleError: If the name is blank.
            ApiError: If the backend rejects the role.
        """
        name = name.strip()
        if not name:
            raise RoleError("Role name is required")

        body: dict[str, Any] = {
            "name": name,
            "permissions": PermissionMatrixEditor.seeded(self._catalog).to_storage(),
            "webPortalAccess": web_portal_access,
            "mobileAppAccess": mobile_app_access,
        }
        if description and description.strip():
            body["description"] = description.strip()

        response = await self._client.post(endpoints.ROLES, json=body)
        role = RoleRecord.model_validate(response["data"])
        logger.info("role_created", role_id=role.id, name=role.name)
        return role

    def open_editor(self, role: RoleRecord) -> PermissionMatrixEditor:
        """Editor seeded from a role's stored matrix."""
        return PermissionMatrixEditor.from_storage(role.permissions, self._catalog)

    async def save_role(
        self,
        role_id: str,
        editor: PermissionMatrixEditor,
        web_portal_access: bool,
        mobile_app_access: bool,
    ) -> RoleRecord:
        """Persist an edited matrix and access flags.

        Raises:
            ApiError: If the update fails.
        """
        response = await self._client.put(
            endpoints.role_detail(role_id),
            json={
                "permissions": editor.to_storage(),
                "webPortalAccess": web_portal_access,
                "mobileAppAccess": mobile_app_access,
            },
        )
        role = RoleRecord.model_validate(response["data"])
        logger.info("role_saved", role_id=role_id)
        return role

    async def delete_role(self, role: RoleRecord) -> None:
        """Delete a role.

        Raises:
            RoleError: Default roles cannot be deleted.
            ApiError: If the backend refuses.
        """
        if role.is_default:
            raise RoleError("Default roles cannot be deleted")
        await self._client.delete(endpoints.role_detail(role.id))
        logger.info("role_deleted", role_id=role.id)

    def editable_modules(self, identity: Identity | None) -> list[str]:
        """Catalog labels an administrator may grant, given their plan.

        Only modules the organization's plan enables can be granted, plus
        modules that are always available.
        """
        if identity is None:
            return []
        enabled = identity.subscription.enabled_modules if identity.subscription else frozenset()
        allowed = enabled | ALWAYS_EDITABLE_KEYS
        return [label for label in self._catalog if self._catalog.storage_key(label) in allowed]
