"""Tests for the role administration service."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from salesdesk.adapters.http import endpoints
from salesdesk.core.auth.types import Subscription
from salesdesk.core.exceptions import ApiError, RoleError
from salesdesk.core.permissions.matrix import ALL
from salesdesk.core.permissions.types import RoleRecord
from salesdesk.services.roles import RoleService
from tests.fixtures.identities import build_identity


@pytest.fixture
def role_payload() -> dict[str, Any]:
    """Role as the backend returns it."""
    return {
        "_id": "r1",
        "name": "Field Sales",
        "description": "Reps on the road",
        "permissions": {
            "orders": {"add": True, "update": True, "view": True, "delete": True},
            "attendance": {"view": True},
            "legacyReports": {"view": True},
        },
        "webPortalAccess": True,
        "mobileAppAccess": True,
        "isDefault": False,
    }


@pytest.fixture
def roles(mock_client: MagicMock) -> RoleService:
    """Role service over a mocked client."""
    return RoleService(mock_client)


class TestListRoles:
    """Tests for list_roles."""

    async def test_parses_roles(
        self, roles: RoleService, mock_client: MagicMock, role_payload: dict[str, Any]
    ) -> None:
        """Should return typed role records."""
        mock_client.get = AsyncMock(return_value={"data": [role_payload]})

        result = await roles.list_roles()

        assert [r.id for r in result] == ["r1"]
        assert result[0].web_portal_access is True
        mock_client.get.assert_awaited_once_with(endpoints.ROLES)

    async def test_empty(self, roles: RoleService, mock_client: MagicMock) -> None:
        """Should handle a body without data."""
        assert await roles.list_roles() == []


class TestCreateRole:
    """Tests for create_role."""

    async def test_posts_seeded_matrix(
        self, roles: RoleService, mock_client: MagicMock, role_payload: dict[str, Any]
    ) -> None:
        """Should create the role with every module denied."""
        mock_client.post = AsyncMock(return_value={"data": role_payload})

        role = await roles.create_role("  Field Sales ", "  Reps  ", web_portal_access=True)

        assert role.id == "r1"
        path, = mock_client.post.await_args.args
        body = mock_client.post.await_args.kwargs["json"]
        assert path == endpoints.ROLES
        assert body["name"] == "Field Sales"
        assert body["description"] == "Reps"
        assert body["webPortalAccess"] is True
        assert body["mobileAppAccess"] is False
        assert len(body["permissions"]) == 18
        assert all(not any(actions.values()) for actions in body["permissions"].values())
        assert all(ALL not in actions for actions in body["permissions"].values())

    async def test_blank_description_omitted(
        self, roles: RoleService, mock_client: MagicMock, role_payload: dict[str, Any]
    ) -> None:
        """Should not send an empty description."""
        mock_client.post = AsyncMock(return_value={"data": role_payload})

        await roles.create_role("Sales", "   ")

        assert "description" not in mock_client.post.await_args.kwargs["json"]

    async def test_blank_name(self, roles: RoleService, mock_client: MagicMock) -> None:
        """Should reject a blank name without calling the backend."""
        with pytest.raises(RoleError, match="Role name is required"):
            await roles.create_role("   ")

        mock_client.post.assert_not_awaited()

    async def test_backend_rejection(self, roles: RoleService, mock_client: MagicMock) -> None:
        """Should surface the backend's message."""
        mock_client.post = AsyncMock(side_effect=ApiError("Role already exists", status=409))

        with pytest.raises(ApiError, match="Role already exists"):
            await roles.create_role("Sales")


class TestEditRole:
    """Tests for open_editor and save_role."""

    def test_open_editor_rehydrates(
        self, roles: RoleService, role_payload: dict[str, Any]
    ) -> None:
        """Should load the stored matrix by display label."""
        editor = roles.open_editor(RoleRecord.model_validate(role_payload))

        assert editor.row("Order Lists").all is True
        assert editor.row("Attendance").view is True
        assert editor.row("Attendance").all is False
        assert "legacyReports" not in editor.permissions

    async def test_save_role(
        self, roles: RoleService, mock_client: MagicMock, role_payload: dict[str, Any]
    ) -> None:
        """Should put the storage shape and access flags."""
        mock_client.put = AsyncMock(return_value={"data": role_payload})
        editor = roles.open_editor(RoleRecord.model_validate(role_payload))
        editor.toggle("Order Lists", "delete")

        await roles.save_role("r1", editor, web_portal_access=True, mobile_app_access=False)

        mock_client.put.assert_awaited_once()
        path, = mock_client.put.await_args.args
        body = mock_client.put.await_args.kwargs["json"]
        assert path == "/roles/r1"
        assert body["permissions"]["orders"] == {
            "add": True, "update": True, "view": True, "delete": False
        }
        assert "legacyReports" not in body["permissions"]
        assert body["webPortalAccess"] is True
        assert body["mobileAppAccess"] is False


class TestDeleteRole:
    """Tests for delete_role."""

    async def test_deletes(
        self, roles: RoleService, mock_client: MagicMock, role_payload: dict[str, Any]
    ) -> None:
        """Should delete a custom role."""
        await roles.delete_role(RoleRecord.model_validate(role_payload))
        mock_client.delete.assert_awaited_once_with("/roles/r1")

    async def test_default_role_protected(
        self, roles: RoleService, mock_client: MagicMock, role_payload: dict[str, Any]
    ) -> None:
        """Should refuse to delete a default role."""
        role_payload["isDefault"] = True

        with pytest.raises(RoleError, match="Default roles cannot be deleted"):
            await roles.delete_role(RoleRecord.model_validate(role_payload))

        mock_client.delete.assert_not_awaited()


class TestEditableModules:
    """Tests for editable_modules."""

    def test_plan_modules_and_dashboard(self, roles: RoleService) -> None:
        """Should list enabled modules plus the dashboard, in catalog order."""
        identity = build_identity(
            subscription=Subscription(
                enabled_modules=frozenset({"tourPlan", "orders"}), is_active=True
            )
        )

        assert roles.editable_modules(identity) == ["Dashboard", "Order Lists", "Tour Plan"]

    def test_without_subscription(self, roles: RoleService) -> None:
        """Should still offer the dashboard."""
        assert roles.editable_modules(build_identity()) == ["Dashboard"]

    def test_signed_out(self, roles: RoleService) -> None:
        """Should offer nothing to a signed-out caller."""
        assert roles.editable_modules(None) == []
