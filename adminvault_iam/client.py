"""
AdminVault IAM Client
Authorize user actions against the AdminVault RBAC catalog from external services

Example:
    client = AdminVaultClient(base_url="http://localhost:3001/api", api_key="av_live_...")
    can_create = await client.has_permission(user_id, "Product", "CREATE")
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

import httpx

from adminvault_iam.core.cache import PermissionCache
from adminvault_iam.core.config import DEFAULT_TIMEOUT_MS, ClientConfig, Settings, get_settings
from adminvault_iam.core.logging import get_logger
from adminvault_iam.core.rbac import PairLike
from adminvault_iam.core.transport import IAMTransport
from adminvault_iam.schemas.iam import Permission, Principal, Role
from adminvault_iam.services.permission_resolver import RemotePermissionResolver
from adminvault_iam.services.role_resolver import RoleResolver
from adminvault_iam.services.token_validator import TokenValidator

logger = get_logger(__name__)


class AdminVaultClient:
    """
    Permission resolution and caching client

    Single checks (``has_permission`` and the composites) fail closed and
    never raise. Bulk lookups (``get_user_permissions``, ``get_user_roles``)
    raise ``TransportError`` when data could not be retrieved.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT_MS,
        cache: Optional[PermissionCache] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        if config is None:
            config = ClientConfig(base_url=base_url or "", api_key=api_key or "", timeout=timeout)
        self.config = config
        self.transport = IAMTransport(config, http_transport=http_transport)
        self.cache = cache or PermissionCache(clock=clock)
        self.permissions = RemotePermissionResolver(self.transport, self.cache)
        self.roles = RoleResolver(self.transport)
        self.tokens = TokenValidator(self.transport)
        logger.debug("AdminVault client created", base_url=config.base_url, timeout_ms=config.timeout)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> AdminVaultClient:
        """Build a client from ``ADMINVAULT_*`` environment settings"""
        settings = settings or get_settings()
        client = cls(ClientConfig.from_settings(settings), **kwargs)
        client.set_cache_ttl(settings.PERMISSION_CACHE_TTL_MS)
        return client

    async def get_user_permissions(self, user_id) -> list[Permission]:
        return await self.permissions.get_user_permissions(user_id)

    async def has_permission(self, user_id, resource: str, action: str) -> bool:
        return await self.permissions.has_permission(user_id, resource, action)

    async def has_any_permission(self, user_id, permissions: Iterable[PairLike]) -> bool:
        return await self.permissions.has_any_permission(user_id, permissions)

    async def has_all_permissions(self, user_id, permissions: Iterable[PairLike]) -> bool:
        return await self.permissions.has_all_permissions(user_id, permissions)

    async def get_user_roles(self, user_id) -> list[Role]:
        return await self.roles.get_user_roles(user_id)

    async def validate_token(self, token: str) -> Optional[Principal]:
        return await self.tokens.validate_token(token)

    def clear_user_cache(self, user_id) -> None:
        self.cache.invalidate_user(user_id)

    def clear_all_cache(self) -> None:
        self.cache.invalidate_all()

    def set_cache_ttl(self, ttl_ms: int) -> None:
        self.cache.set_ttl(ttl_ms)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> AdminVaultClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
