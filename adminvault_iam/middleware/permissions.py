"""
Permission Middleware
Starlette/FastAPI request handlers that gate routes on an AdminVault permission check
"""

from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional

from fastapi import Request, Response, status
from starlette.responses import JSONResponse

from adminvault_iam.core.logging import get_logger
from adminvault_iam.core.rbac import action_value

logger = get_logger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]
UserIdGetter = Callable[[Request], Any]


def get_request_user_id(request: Request) -> Optional[Any]:
    """
    Read the authenticated principal id from ``request.state.user``

    The user may be a mapping or an object; ``id`` is preferred and
    ``userId`` is accepted as the JWT payload form.
    """
    user = getattr(request.state, "user", None)
    if user is None:
        return None
    if isinstance(user, Mapping):
        user_id = user.get("id")
        return user_id if user_id is not None else user.get("userId")
    user_id = getattr(user, "id", None)
    return user_id if user_id is not None else getattr(user, "userId", None)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def create_permission_middleware(client, get_user_id: Optional[UserIdGetter] = None):
    """
    Middleware factory for permission checking

    Args:
        client: AdminVaultClient (anything with an async ``has_permission``)
        get_user_id: Optional callback returning the principal id for a request

    Returns:
        ``require_permission(resource, action)`` handler factory
    """
    resolve_user_id = get_user_id or get_request_user_id

    def require_permission(resource: str, action: str):
        action = action_value(action)

        async def permission_handler(request: Request, call_next: CallNext) -> Response:
            try:
                user_id = resolve_user_id(request)
                if not user_id:
                    logger.warning("Unauthenticated request to protected route", path=request.url.path)
                    return _error(status.HTTP_401_UNAUTHORIZED, "Unauthorized", "User not authenticated")

                allowed = await client.has_permission(user_id, resource, action)
                if not allowed:
                    logger.warning(
                        "User lacks required permission",
                        user_id=user_id,
                        resource=resource,
                        action=action,
                    )
                    return _error(
                        status.HTTP_403_FORBIDDEN,
                        "Forbidden",
                        f"You don't have permission to {action} {resource}",
                    )
            except Exception as e:
                logger.error("Permission check failed", resource=resource, action=action, error=str(e))
                return _error(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "Internal Server Error",
                    "Permission check failed",
                )

            logger.debug("Permission check passed", user_id=user_id, resource=resource, action=action)
            return await call_next(request)

        return permission_handler

    return require_permission
