"""
Permission hook for UI-side integrations.

``use_permission(resource, action)`` mounts a stateful accessor that
starts in the Idle state (``loading=True, has_permission=False``) and
moves to Resolved exactly once per (resource, action) when the check
settles. Failures resolve to ``has_permission=False``; there is no
separate error state.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, Union

from adminvault_iam.core.logging import get_logger
from adminvault_iam.core.rbac import action_value

logger = get_logger(__name__)

CurrentUser = Callable[[], Union[Any, Awaitable[Any]]]
Listener = Callable[["PermissionHook"], None]


def principal_id(user: Any) -> Optional[Any]:
    """Accept a principal object, a mapping or a bare id."""
    if user is None:
        return None
    if isinstance(user, Mapping):
        return user.get("id", user.get("userId"))
    if isinstance(user, (int, str)):
        return user
    return getattr(user, "id", None)


class PermissionHook:
    def __init__(self, client, current_user: CurrentUser, resource: str, action: str):
        self._client = client
        self._current_user = current_user
        self._listeners: list[Listener] = []
        self._task: Optional[asyncio.Task] = None
        self._mounted = True
        self.resource = resource
        self.action = action_value(action)
        self.has_permission = False
        self.loading = True
        self._schedule()

    def _schedule(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Mounted outside an event loop; the check starts on first wait()
            self._task = None
            return
        self._task = loop.create_task(self._check(self.resource, self.action))

    async def _resolve_user_id(self) -> Optional[Any]:
        user = self._current_user()
        if inspect.isawaitable(user):
            user = await user
        return principal_id(user)

    async def _check(self, resource: str, action: str) -> None:
        allowed = False
        try:
            user_id = await self._resolve_user_id()
            if user_id is None:
                logger.debug("No current user for permission hook", resource=resource, action=action)
            else:
                allowed = (await self._client.has_permission(user_id, resource, action)) is True
        except Exception as e:
            logger.warning("Permission check failed", resource=resource, action=action, error=str(e))
            allowed = False

        if (resource, action) != (self.resource, self.action):
            return
        self.has_permission = allowed
        self.loading = False
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.warning("Permission hook listener failed", resource=self.resource, action=self.action, error=str(e))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state-change callback. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def rerender(self, resource: str, action: str) -> PermissionHook:
        """Re-run the check if, and only if, the (resource, action) pair changed."""
        action = action_value(action)
        if (resource, action) == (self.resource, self.action):
            return self

        self._cancel()
        self.resource = resource
        self.action = action
        self.has_permission = False
        self.loading = True
        self._notify()
        self._schedule()
        return self

    async def wait(self) -> PermissionHook:
        """Wait for the current check to settle, following any rerender."""
        while self.loading and self._mounted:
            if self._task is None:
                self._task = asyncio.get_running_loop().create_task(self._check(self.resource, self.action))
            task = self._task
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                # Superseded checks are cancelled; cancellation of the waiter propagates
                if not task.cancelled():
                    raise
        return self

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def unmount(self) -> None:
        self._mounted = False
        self._cancel()
        self._listeners.clear()

    def snapshot(self) -> dict:
        return {"has_permission": self.has_permission, "loading": self.loading}


def create_use_permission(client, current_user: CurrentUser):
    """
    Hook factory for permission checking

    Args:
        client: AdminVaultClient (anything with an async ``has_permission``)
        current_user: Callable returning the current principal, its id, or an
            awaitable of either

    Returns:
        ``use_permission(resource, action, on_change=None)``
    """

    def use_permission(resource: str, action: str, on_change: Optional[Listener] = None) -> PermissionHook:
        hook = PermissionHook(client, current_user, resource, action)
        if on_change is not None:
            hook.subscribe(on_change)
        return hook

    return use_permission
