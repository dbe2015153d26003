"""Resolvers backed by the AdminVault administration service"""

from .permission_resolver import PermissionResolver, RemotePermissionResolver
from .role_resolver import RoleResolver, find_principal
from .token_validator import TokenValidator

__all__ = [
    "PermissionResolver",
    "RemotePermissionResolver",
    "RoleResolver",
    "find_principal",
    "TokenValidator",
]
