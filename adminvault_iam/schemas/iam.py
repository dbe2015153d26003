"""
IAM Schemas
Pydantic models for the administration service's RBAC catalog and response envelopes
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from adminvault_iam.core.rbac import PermissionAction


class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class Permission(BaseSchema):
    id: int
    name: str
    code: str
    description: Optional[str] = None
    resource: str
    action: PermissionAction
    is_active: bool = Field(True, alias="isActive")


class Role(BaseSchema):
    id: int
    name: str
    code: str
    description: Optional[str] = None
    permissions: list[Permission] = Field(default_factory=list)
    is_system_role: bool = Field(False, alias="isSystemRole")
    is_active: bool = Field(True, alias="isActive")


class Principal(BaseSchema):
    # findAll labels the principal id ``userId``; validate-token uses ``id``
    id: int = Field(..., validation_alias=AliasChoices("id", "userId"))
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    company_id: Optional[int] = Field(None, alias="companyId")
    role: Optional[str] = None
    roles: Optional[list[Role]] = None


class PermissionListResponse(BaseSchema):
    status: bool = False
    data: list[Permission] = Field(default_factory=list)


class PermissionCheckData(BaseSchema):
    has_permission: bool = Field(False, alias="hasPermission")


class PermissionCheckResponse(BaseSchema):
    data: Optional[PermissionCheckData] = None

    @property
    def allowed(self) -> bool:
        return bool(self.data and self.data.has_permission)


class PrincipalListResponse(BaseSchema):
    success: bool = False
    data: list[Principal] = Field(default_factory=list)


class TokenValidationResponse(BaseSchema):
    status: bool = False
    user: Optional[Principal] = None
