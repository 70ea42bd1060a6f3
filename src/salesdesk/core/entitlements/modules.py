"""Module catalog: display labels, storage keys and reserved modules."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Display labels in the order the role editor lists them.
MODULES_LIST: tuple[str, ...] = (
    "Dashboard",
    "Live Tracking",
    "Products",
    "Order Lists",
    "Employees",
    "Attendance",
    "Leaves",
    "Parties",
    "Prospects",
    "Sites",
    "Analytics",
    "Beat Plan",
    "Tour Plan",
    "Collections",
    "Expenses",
    "Odometer",
    "Notes",
    "Miscellaneous Work",
)

MODULE_KEY_MAP: Mapping[str, str] = MappingProxyType(
    {
        "Dashboard": "dashboard",
        "Live Tracking": "liveTracking",
        "Products": "products",
        "Order Lists": "orders",
        "Employees": "employees",
        "Attendance": "attendance",
        "Leaves": "leaves",
        "Parties": "parties",
        "Prospects": "prospects",
        "Sites": "sites",
        "Analytics": "analytics",
        "Beat Plan": "beatPlan",
        "Tour Plan": "tourPlan",
        "Collections": "collections",
        "Expenses": "expenses",
        "Odometer": "odometer",
        "Notes": "notes",
        "Miscellaneous Work": "miscellaneousWork",
    }
)

# Infrastructure modules, never plan-gated for org admins.
RESERVED_MODULES: frozenset[str] = frozenset(
    {"organizations", "systemUsers", "subscriptions", "settings"}
)

# Always editable regardless of the plan's enabled modules.
ALWAYS_EDITABLE_KEYS: frozenset[str] = frozenset({"dashboard"})


@dataclass(frozen=True)
class ModuleCatalog:
    """Ordered set of editable modules and their storage keys.

    The catalog is the single source of truth for what the permission
    editor can show. Storage records for modules outside it are ignored.
    """

    labels: tuple[str, ...] = MODULES_LIST
    key_map: Mapping[str, str] = field(default_factory=lambda: MODULE_KEY_MAP)

    def storage_key(self, label: str) -> str:
        """Storage key for a label, falling back to the label itself."""
        return self.key_map.get(label, label)

    def __contains__(self, label: object) -> bool:
        return label in self.labels

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)


DEFAULT_CATALOG = ModuleCatalog()
