"""Auth domain types."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from salesdesk.core.rbac.types import Role

PermissionMap = dict[str, dict[str, bool]]


class _Record(BaseModel):
    """Immutable record accepting both wire (camelCase) and field names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Subscription(_Record):
    """Plan metadata attached to an organization."""

    plan_name: str | None = Field(default=None, alias="planName")
    tier: str | None = None
    max_employees: int | None = Field(default=None, alias="maxEmployees")
    enabled_modules: frozenset[str] = Field(default_factory=frozenset, alias="enabledModules")
    module_features: PermissionMap | None = Field(default=None, alias="moduleFeatures")
    subscription_end_date: datetime | None = Field(default=None, alias="subscriptionEndDate")
    is_active: bool = Field(default=False, alias="isActive")

    @field_validator("enabled_modules", mode="before")
    @classmethod
    def null_modules_are_empty(cls, value: Any) -> Any:
        return frozenset() if value is None else value


class Organization(_Record):
    """Organization the actor belongs to."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str | None = None
    is_active: bool = Field(default=False, alias="isActive")
    is_subscription_active: bool = Field(default=False, alias="isSubscriptionActive")
    subscription: Subscription | None = None


class Identity(_Record):
    """The resolved actor.

    ``permissions`` is always a mapping, never None, so lookups need no
    null guards. Instances are frozen: a refresh replaces the whole
    record, which lets observers compare by reference.
    """

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    email: str
    role: Role
    is_active: bool = Field(default=True, alias="isActive")
    organization: Organization | None = Field(
        default=None, validation_alias=AliasChoices("organization", "organizationId")
    )
    permissions: PermissionMap = Field(default_factory=dict)
    subscription: Subscription | None = None
    avatar_url: str | None = Field(default=None, alias="avatarUrl")

    # Legacy display aliases, filled in by normalize_profile.
    full_name: str | None = Field(default=None, alias="fullName")
    avatar: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def lowercase_role(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("permissions", mode="before")
    @classmethod
    def null_permissions_are_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("organization", mode="before")
    @classmethod
    def expand_org_reference(cls, value: Any) -> Any:
        # An unpopulated reference arrives as a bare id string.
        if isinstance(value, str):
            return {"_id": value}
        return value

    @property
    def org_id(self) -> str | None:
        """Organization id, if the actor belongs to one."""
        return self.organization.id if self.organization else None


def normalize_profile(
    user: Mapping[str, Any],
    permissions: Mapping[str, Any] | None = None,
    subscription: Mapping[str, Any] | None = None,
) -> Identity:
    """Build an Identity from a server profile payload.

    Permissions and subscription may arrive beside the user object (login)
    or inside it ("who am I"). When no subscription is given anywhere, the
    organization's embedded subscription is used.

    Args:
        user: User object from the server.
        permissions: Permission map sent alongside the user, if any.
        subscription: Subscription sent alongside the user, if any.

    Returns:
        Frozen identity record.
    """
    payload = dict(user)

    if permissions is not None:
        payload["permissions"] = permissions

    if subscription is None:
        subscription = payload.get("subscription")
    if subscription is None:
        org = payload.get("organizationId") or payload.get("organization")
        if isinstance(org, Mapping):
            subscription = org.get("subscription")
    payload["subscription"] = subscription

    payload["fullName"] = payload.get("name")
    payload["avatar"] = payload.get("avatarUrl") or payload.get("profileImage")

    return Identity.model_validate(payload)
