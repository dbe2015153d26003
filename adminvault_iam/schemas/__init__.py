"""Pydantic models for the AdminVault RBAC catalog"""

from adminvault_iam.schemas.iam import (
    Permission,
    PermissionCheckResponse,
    PermissionListResponse,
    Principal,
    PrincipalListResponse,
    Role,
    TokenValidationResponse,
)

__all__ = [
    "Permission",
    "PermissionCheckResponse",
    "PermissionListResponse",
    "Principal",
    "PrincipalListResponse",
    "Role",
    "TokenValidationResponse",
]
