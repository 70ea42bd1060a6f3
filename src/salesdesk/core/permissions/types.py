"""Role administration types."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from salesdesk.core.auth.types import PermissionMap


class RoleRecord(BaseModel):
    """An organization role as stored by the backend."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    description: str | None = None
    permissions: PermissionMap = Field(default_factory=dict)
    web_portal_access: bool = Field(default=False, alias="webPortalAccess")
    mobile_app_access: bool = Field(default=False, alias="mobileAppAccess")
    is_default: bool = Field(default=False, alias="isDefault")
