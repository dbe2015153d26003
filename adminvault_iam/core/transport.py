"""
Transport Adapter
Single point of outbound HTTP to the AdminVault administration service
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from adminvault_iam.core.config import ClientConfig
from adminvault_iam.core.exceptions import ResponseShapeError, TransportError
from adminvault_iam.core.logging import get_logger

logger = get_logger(__name__)


class IAMTransport:
    """
    Thin async HTTP client with fixed base URL, bearer auth and timeout

    All resolvers route through ``post``; every failure surfaces as a
    ``TransportError`` chained to the underlying httpx error.
    """

    def __init__(self, config: ClientConfig, http_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            timeout=httpx.Timeout(config.timeout_seconds),
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
            transport=http_transport,
        )

    async def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        POST a JSON body and return the decoded JSON object

        Args:
            path: Path relative to the configured base URL
            json: Optional JSON body

        Returns:
            Decoded response body

        Raises:
            TransportError: On network failure, timeout or non-2xx status
            ResponseShapeError: When the body is not a JSON object
        """
        try:
            response = await self._client.post(path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning("Administration service returned error status", path=path, status_code=status_code)
            raise TransportError(
                f"POST {path} failed with status {status_code}",
                path=path,
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Administration service request failed", path=path, error=str(e))
            raise TransportError(f"POST {path} failed: {e}", path=path) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseShapeError(
                f"POST {path} returned a non-JSON body",
                path=path,
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise ResponseShapeError(
                f"POST {path} returned {type(body).__name__}, expected an object",
                path=path,
                status_code=response.status_code,
            )
        return body

    async def aclose(self) -> None:
        """Close the underlying HTTP client"""
        await self._client.aclose()

    async def __aenter__(self) -> IAMTransport:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
