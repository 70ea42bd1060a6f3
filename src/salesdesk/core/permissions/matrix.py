"""Role permission matrix editing and storage-shape translation.

The editor works on display labels ("Order Lists") and a derived ``all``
column. Storage uses canonical module keys ("orders") and only the four
concrete actions; ``all`` is recomputed on load and never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from salesdesk.core.entitlements.modules import DEFAULT_CATALOG, ModuleCatalog
from salesdesk.core.rbac.types import Action

logger = structlog.get_logger()

ALL = "all"
ACTIONS: tuple[str, ...] = tuple(a.value for a in Action)

StorageMatrix = dict[str, dict[str, bool]]


@dataclass
class ModulePermissions:
    """One module row. ``all`` always equals the AND of the four actions."""

    all: bool = False
    add: bool = False
    update: bool = False
    view: bool = False
    delete: bool = False

    @classmethod
    def from_actions(cls, actions: Mapping[str, Any] | None) -> ModulePermissions:
        """Build a row from concrete action flags, deriving ``all``."""
        actions = actions or {}
        row = cls(**{action: bool(actions.get(action, False)) for action in ACTIONS})
        row.recompute_all()
        return row

    def recompute_all(self) -> None:
        """Set ``all`` from the four concrete actions."""
        self.all = self.add and self.update and self.view and self.delete

    def set_every(self, value: bool) -> None:
        """Set ``all`` and every concrete action to value."""
        self.all = self.add = self.update = self.view = self.delete = value

    def actions(self) -> dict[str, bool]:
        """Concrete actions only, the stored form of this row."""
        return {action: getattr(self, action) for action in ACTIONS}

    def to_dict(self) -> dict[str, bool]:
        """Row including the derived ``all`` column."""
        return {ALL: self.all, **self.actions()}


EditorMatrix = dict[str, ModulePermissions]


def to_storage_shape(
    matrix: Mapping[str, ModulePermissions],
    catalog: ModuleCatalog = DEFAULT_CATALOG,
) -> StorageMatrix:
    """Translate an editor matrix to the canonical storage shape.

    Labels without a storage key are kept as-is so newer modules survive.

    Args:
        matrix: Display label -> row.
        catalog: Catalog providing label -> storage key.

    Returns:
        Storage key -> {add, update, view, delete}.
    """
    return {catalog.storage_key(label): row.actions() for label, row in matrix.items()}


def from_storage_shape(
    record: Mapping[str, Mapping[str, Any]] | None,
    catalog: ModuleCatalog = DEFAULT_CATALOG,
) -> EditorMatrix:
    """Translate a stored matrix to the editor shape.

    Every catalog module gets a row; modules missing from the record get
    an all-false row. Stored modules outside the catalog are dropped.

    Args:
        record: Storage key -> action flags, as persisted on a role.
        catalog: Catalog of editable modules.

    Returns:
        Display label -> row, in catalog order.
    """
    record = record or {}
    matrix = {
        label: ModulePermissions.from_actions(record.get(catalog.storage_key(label)))
        for label in catalog
    }

    known = {catalog.storage_key(label) for label in catalog}
    dropped = sorted(set(record) - known)
    if dropped:
        logger.debug("permission_modules_dropped", modules=dropped)

    return matrix


class PermissionMatrixEditor:
    """Mutable permission matrix for one role.

    Every mutation keeps ``all == add and update and view and delete``
    for every row.
    """

    def __init__(
        self,
        catalog: ModuleCatalog = DEFAULT_CATALOG,
        permissions: EditorMatrix | None = None,
    ) -> None:
        """Initialize the editor.

        Args:
            catalog: Modules the editor shows.
            permissions: Initial rows; all-false for every module if omitted.
        """
        self._catalog = catalog
        if permissions is None:
            permissions = {label: ModulePermissions() for label in catalog}
        self._permissions = permissions

    @classmethod
    def seeded(cls, catalog: ModuleCatalog = DEFAULT_CATALOG) -> PermissionMatrixEditor:
        """Editor for a new role, every cell false."""
        return cls(catalog=catalog)

    @classmethod
    def from_storage(
        cls,
        record: Mapping[str, Mapping[str, Any]] | None,
        catalog: ModuleCatalog = DEFAULT_CATALOG,
    ) -> PermissionMatrixEditor:
        """Rehydrate an editor from a role's stored matrix."""
        return cls(catalog=catalog, permissions=from_storage_shape(record, catalog))

    @property
    def catalog(self) -> ModuleCatalog:
        return self._catalog

    @property
    def permissions(self) -> EditorMatrix:
        """Current rows keyed by display label."""
        return self._permissions

    def row(self, label: str) -> ModulePermissions:
        """Row for a module label.

        Raises:
            KeyError: If the label is not in the editor.
        """
        return self._permissions[label]

    def toggle(self, label: str, action: str) -> ModulePermissions:
        """Flip one cell.

        Toggling ``all`` sets every action in the row to the new value.
        Toggling an action flips it and re-derives ``all``.

        Args:
            label: Module display label.
            action: "all", "add", "update", "view" or "delete".

        Returns:
            The updated row.

        Raises:
            KeyError: Unknown module label.
            ValueError: Unknown action.
        """
        row = self.row(label)
        if action == ALL:
            row.set_every(not row.all)
        elif action in ACTIONS:
            setattr(row, action, not getattr(row, action))
            row.recompute_all()
        else:
            raise ValueError(f"Unknown permission action: {action!r}")
        return row

    def grant_all(self) -> None:
        """Grant every action on every module."""
        for row in self._permissions.values():
            row.set_every(True)

    def revoke_all(self) -> None:
        """Revoke every action on every module."""
        for row in self._permissions.values():
            row.set_every(False)

    def to_storage(self) -> StorageMatrix:
        """Current matrix in storage shape."""
        return to_storage_shape(self._permissions, self._catalog)

    def to_dict(self) -> dict[str, dict[str, bool]]:
        """Current matrix in display shape, including ``all``."""
        return {label: row.to_dict() for label, row in self._permissions.items()}
