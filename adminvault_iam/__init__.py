"""
AdminVault IAM Client
Permission resolution and caching for services integrating with AdminVault's RBAC catalog
"""

from adminvault_iam.client import AdminVaultClient
from adminvault_iam.core.cache import CacheEntry, PermissionCache
from adminvault_iam.core.config import ClientConfig, Settings
from adminvault_iam.core.exceptions import (
    ConfigurationError,
    IAMClientError,
    ResponseShapeError,
    TransportError,
)
from adminvault_iam.core.logging import configure_logging
from adminvault_iam.core.rbac import PermissionAction, PermissionPair
from adminvault_iam.hooks.permission_hook import PermissionHook, create_use_permission
from adminvault_iam.middleware.permissions import create_permission_middleware
from adminvault_iam.schemas.iam import Permission, Principal, Role

__version__ = "1.0.0"

__all__ = [
    "AdminVaultClient",
    "CacheEntry",
    "PermissionCache",
    "ClientConfig",
    "Settings",
    "ConfigurationError",
    "IAMClientError",
    "ResponseShapeError",
    "TransportError",
    "configure_logging",
    "PermissionAction",
    "PermissionPair",
    "PermissionHook",
    "create_use_permission",
    "create_permission_middleware",
    "Permission",
    "Principal",
    "Role",
]
