"""Entitlements module: module catalog and plan-gating constants."""

from salesdesk.core.entitlements.modules import (
    ALWAYS_EDITABLE_KEYS,
    DEFAULT_CATALOG,
    MODULE_KEY_MAP,
    MODULES_LIST,
    RESERVED_MODULES,
    ModuleCatalog,
)

__all__ = [
    "ALWAYS_EDITABLE_KEYS",
    "DEFAULT_CATALOG",
    "MODULE_KEY_MAP",
    "MODULES_LIST",
    "RESERVED_MODULES",
    "ModuleCatalog",
]
