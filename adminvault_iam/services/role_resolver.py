"""
Role resolver.

The administration service has no per-user roles endpoint, so roles are
resolved by listing every principal and scanning for the requested id.
If a per-user endpoint appears, expose it under a new method name rather
than changing ``get_user_roles``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from pydantic import ValidationError

from adminvault_iam.core.exceptions import ResponseShapeError
from adminvault_iam.core.logging import get_logger
from adminvault_iam.core.transport import IAMTransport
from adminvault_iam.schemas.iam import Principal, PrincipalListResponse, Role

logger = get_logger(__name__)

FIND_ALL_PRINCIPALS_PATH = "/administration/iam/principals/findAll"


def find_principal(principals: Iterable[Principal], user_id) -> Optional[Principal]:
    """Linear O(n) scan over every principal; ids are compared by string form."""
    target = str(user_id)
    for principal in principals:
        if str(principal.id) == target:
            return principal
    return None


class RoleResolver:
    def __init__(self, transport: IAMTransport):
        self.transport = transport

    async def fetch_principals(self, user_id) -> Optional[list[Principal]]:
        """
        List principals from the administration service

        Returns None when the service reports ``success: false``.

        Raises:
            TransportError: On transport failure or an unexpected body
        """
        body = await self.transport.post(FIND_ALL_PRINCIPALS_PATH, json={"id": user_id})
        if not body.get("success"):
            return None
        try:
            return PrincipalListResponse.model_validate(body).data
        except ValidationError as e:
            raise ResponseShapeError(
                f"Unexpected principal list from {FIND_ALL_PRINCIPALS_PATH}",
                path=FIND_ALL_PRINCIPALS_PATH,
            ) from e

    async def get_user_roles(self, user_id) -> list[Role]:
        try:
            principals = await self.fetch_principals(user_id)
        except Exception as e:
            logger.error("Failed to get user roles", user_id=user_id, error=str(e))
            raise

        if principals is None:
            logger.info("Administration service declined principal listing", user_id=user_id)
            return []

        principal = find_principal(principals, user_id)
        if principal is None:
            logger.debug("Principal not found in listing", user_id=user_id, scanned=len(principals))
            return []
        return list(principal.roles or [])
