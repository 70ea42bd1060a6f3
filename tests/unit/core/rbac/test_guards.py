"""Tests for access guard decorators."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from salesdesk.core.auth.service import SessionService
from salesdesk.core.auth.types import Identity, Subscription
from salesdesk.core.exceptions import AccessDeniedError
from salesdesk.core.rbac.guards import require_access, require_module
from tests.fixtures.identities import build_identity


def _session_for(identity: Identity | None) -> MagicMock:
    service = MagicMock(spec=SessionService)
    service.resolve_identity = AsyncMock(return_value=identity)
    return service


@pytest.fixture
def orders_viewer() -> Identity:
    """Member allowed to view orders on a plan that includes them."""
    return build_identity(
        permissions={"orders": {"view": True}},
        subscription=Subscription(enabled_modules=frozenset({"orders"}), is_active=True),
    )


class TestRequireAccess:
    """Tests for require_access."""

    async def test_allows_permitted_call(self, orders_viewer: Identity) -> None:
        """Should run the handler and return its result."""
        session = _session_for(orders_viewer)

        @require_access("orders", "view", session=lambda: session)
        async def list_orders(page: int) -> str:
            return f"page {page}"

        assert await list_orders(2) == "page 2"
        session.resolve_identity.assert_awaited_once()

    async def test_denies_missing_permission(self, orders_viewer: Identity) -> None:
        """Should raise before the handler runs."""
        handler = AsyncMock()
        guarded = require_access("orders", "delete", session=lambda: _session_for(orders_viewer))(
            handler
        )

        with pytest.raises(AccessDeniedError) as exc_info:
            await guarded("o-1")

        assert exc_info.value.module == "orders"
        assert exc_info.value.feature == "delete"
        handler.assert_not_awaited()

    async def test_denies_signed_out(self) -> None:
        """Should deny when no identity resolves."""

        @require_access("orders", "view", session=lambda: _session_for(None))
        async def list_orders() -> None:
            return None

        with pytest.raises(AccessDeniedError, match="'view' on 'orders'"):
            await list_orders()

    def test_preserves_metadata(self) -> None:
        """Should keep the wrapped function's name and docstring."""

        @require_access("orders", "view", session=lambda: _session_for(None))
        async def list_orders() -> None:
            """List orders."""

        assert list_orders.__name__ == "list_orders"
        assert list_orders.__doc__ == "List orders."


class TestRequireModule:
    """Tests for require_module."""

    async def test_allows_enabled_module(self, orders_viewer: Identity) -> None:
        """Should run when the plan includes the module."""

        @require_module("orders", session=lambda: _session_for(orders_viewer))
        async def dashboard() -> str:
            return "ok"

        assert await dashboard() == "ok"

    async def test_denies_disabled_module(self, orders_viewer: Identity) -> None:
        """Should raise with a wildcard feature."""

        @require_module("expenses", session=lambda: _session_for(orders_viewer))
        async def expenses() -> str:
            return "ok"

        with pytest.raises(AccessDeniedError) as exc_info:
            await expenses()

        assert exc_info.value.feature == "*"
