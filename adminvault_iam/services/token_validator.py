"""
Token validation against the AdminVault auth service.

Runs on every request in most integrations, so it never raises: any
failure is reported as ``None``.
"""

from __future__ import annotations

from typing import Optional

from adminvault_iam.core.logging import get_logger
from adminvault_iam.core.transport import IAMTransport
from adminvault_iam.schemas.iam import Principal, TokenValidationResponse

logger = get_logger(__name__)

VALIDATE_TOKEN_PATH = "/auth-users/validate-token"


class TokenValidator:
    def __init__(self, transport: IAMTransport):
        self.transport = transport

    async def validate_token(self, token: str) -> Optional[Principal]:
        if not token:
            logger.debug("Empty token rejected")
            return None

        try:
            body = await self.transport.post(VALIDATE_TOKEN_PATH, json={"token": token})
            result = TokenValidationResponse.model_validate(body)
        except Exception as e:
            logger.warning("Failed to validate token", error=str(e))
            return None

        if not result.status or result.user is None:
            logger.debug("Token rejected by auth service")
            return None

        logger.debug("Token validated", user_id=result.user.id)
        return result.user
