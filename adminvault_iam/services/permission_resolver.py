"""
Permission resolver.

Bulk listings are cache-first and fail hard; single checks always go to
the administration service and fail closed. The composite checks only
ever call ``has_permission``.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Iterable

from pydantic import ValidationError

from adminvault_iam.core.cache import PermissionCache
from adminvault_iam.core.exceptions import ResponseShapeError
from adminvault_iam.core.logging import get_logger
from adminvault_iam.core.rbac import PairLike, action_value, split_pair
from adminvault_iam.core.transport import IAMTransport
from adminvault_iam.schemas.iam import Permission, PermissionCheckResponse, PermissionListResponse

logger = get_logger(__name__)

CHECK_PERMISSION_PATH = "/administration/iam/users/check-permission"


def user_permissions_path(user_id) -> str:
    return f"/administration/iam/users/{user_id}/permissions"


class PermissionResolver(ABC):
    @abstractmethod
    async def get_user_permissions(self, user_id) -> list[Permission]:
        raise NotImplementedError

    @abstractmethod
    async def has_permission(self, user_id, resource: str, action: str) -> bool:
        raise NotImplementedError

    async def _check_pair(self, user_id, pair: PairLike) -> bool:
        try:
            resource, action = split_pair(pair)
        except (TypeError, ValueError) as e:
            logger.warning("Unusable permission pair", user_id=user_id, pair=repr(pair), error=str(e))
            return False
        return await self.has_permission(user_id, resource, action)

    async def _check_all(self, user_id, permissions: Iterable[PairLike]) -> list[bool]:
        # Start every check, wait for all of them, then reduce
        return list(await asyncio.gather(*(self._check_pair(user_id, pair) for pair in permissions)))

    async def has_any_permission(self, user_id, permissions: Iterable[PairLike]) -> bool:
        results = await self._check_all(user_id, permissions)
        return any(result is True for result in results)

    async def has_all_permissions(self, user_id, permissions: Iterable[PairLike]) -> bool:
        results = await self._check_all(user_id, permissions)
        return all(result is True for result in results)


class RemotePermissionResolver(PermissionResolver):
    """Resolves permissions against the administration service"""

    def __init__(self, transport: IAMTransport, cache: PermissionCache):
        self.transport = transport
        self.cache = cache

    async def get_user_permissions(self, user_id) -> list[Permission]:
        """
        Get all permissions for a user

        Args:
            user_id: Principal id

        Returns:
            Permission list, from cache when a fresh entry exists

        Raises:
            TransportError: If the administration service could not be reached
                or answered with an unexpected body
        """
        cached = self.cache.get(user_id)
        if cached is not None:
            logger.debug("Permission cache hit", user_id=user_id)
            return cached

        path = user_permissions_path(user_id)
        try:
            body = await self.transport.post(path)
            if not body.get("status"):
                logger.info("Administration service declined permission listing", user_id=user_id)
                return []
            try:
                permissions = PermissionListResponse.model_validate(body).data
            except ValidationError as e:
                raise ResponseShapeError(f"Unexpected permission list from {path}", path=path) from e
        except Exception as e:
            logger.error("Failed to get user permissions", user_id=user_id, error=str(e))
            raise

        self.cache.set(user_id, permissions)
        logger.debug("Permission cache refreshed", user_id=user_id, count=len(permissions))
        return permissions

    async def has_permission(self, user_id, resource: str, action: str) -> bool:
        """
        Check a single (resource, action) permission

        Always a live check; the server may apply company-scoped rules the
        cached flat list cannot represent. Any failure denies.
        """
        try:
            body = await self.transport.post(
                CHECK_PERMISSION_PATH,
                json={"userId": user_id, "resource": resource, "action": action_value(action)},
            )
            allowed = PermissionCheckResponse.model_validate(body).allowed
        except Exception as e:
            logger.warning(
                "Failed to check permission",
                user_id=user_id,
                resource=resource,
                action=action_value(action),
                error=str(e),
            )
            return False

        logger.debug("Permission checked", user_id=user_id, resource=resource, action=action_value(action), allowed=allowed)
        return allowed
