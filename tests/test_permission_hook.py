"""
Tests for the permission hook factory
Covers: Idle -> Resolved transition, failure collapse, re-checks on pair change.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from adminvault_iam.hooks.permission_hook import PermissionHook, create_use_permission, principal_id
from adminvault_iam.schemas.iam import Principal


@pytest.fixture
def iam_client():
    client = AsyncMock()
    client.has_permission.return_value = True
    return client


def recorder(hook_states):
    def on_change(hook):
        hook_states.append(hook.snapshot())
    return on_change


@pytest.mark.asyncio
async def test_loading_synchronously_then_resolved_once(iam_client):
    states = []
    use_permission = create_use_permission(iam_client, lambda: {"id": 42})

    hook = use_permission("Product", "CREATE", on_change=recorder(states))

    assert hook.snapshot() == {"has_permission": False, "loading": True}

    await hook.wait()

    assert hook.snapshot() == {"has_permission": True, "loading": False}
    assert states == [{"has_permission": True, "loading": False}]
    iam_client.has_permission.assert_awaited_once_with(42, "Product", "CREATE")


@pytest.mark.asyncio
async def test_failure_collapses_to_denied(iam_client):
    iam_client.has_permission.side_effect = RuntimeError("network down")
    states = []
    use_permission = create_use_permission(iam_client, lambda: 42)

    hook = await use_permission("Product", "CREATE", on_change=recorder(states)).wait()

    assert hook.snapshot() == {"has_permission": False, "loading": False}
    assert len(states) == 1


@pytest.mark.asyncio
async def test_raising_listener_does_not_break_resolution(iam_client):
    states = []

    def broken(hook):
        raise RuntimeError("render failed")

    use_permission = create_use_permission(iam_client, lambda: 42)
    hook = use_permission("Product", "CREATE", on_change=broken)
    hook.subscribe(recorder(states))

    await hook.wait()

    assert hook.snapshot() == {"has_permission": True, "loading": False}
    assert states == [{"has_permission": True, "loading": False}]


@pytest.mark.asyncio
async def test_current_user_failure_collapses_to_denied(iam_client):
    def no_session():
        raise LookupError("no session")

    hook = await create_use_permission(iam_client, no_session)("Product", "READ").wait()

    assert hook.snapshot() == {"has_permission": False, "loading": False}
    iam_client.has_permission.assert_not_awaited()


@pytest.mark.asyncio
async def test_async_current_user_resolver(iam_client):
    async def current_user():
        return Principal(id=7, full_name="Async User")

    hook = await create_use_permission(iam_client, current_user)("Order", "READ").wait()

    assert hook.has_permission is True
    iam_client.has_permission.assert_awaited_once_with(7, "Order", "READ")


@pytest.mark.asyncio
async def test_missing_user_is_denied_without_check(iam_client):
    hook = await create_use_permission(iam_client, lambda: None)("Order", "READ").wait()

    assert hook.snapshot() == {"has_permission": False, "loading": False}
    iam_client.has_permission.assert_not_awaited()


@pytest.mark.asyncio
async def test_rerender_with_same_pair_does_not_recheck(iam_client):
    use_permission = create_use_permission(iam_client, lambda: 42)
    hook = await use_permission("Product", "CREATE").wait()

    hook.rerender("Product", "CREATE")
    await hook.wait()

    assert iam_client.has_permission.await_count == 1
    assert hook.loading is False


@pytest.mark.asyncio
async def test_rerender_with_new_pair_rechecks(iam_client):
    iam_client.has_permission.side_effect = lambda user_id, resource, action: resource == "Product"
    states = []
    use_permission = create_use_permission(iam_client, lambda: 42)
    hook = await use_permission("Product", "CREATE", on_change=recorder(states)).wait()

    hook.rerender("Order", "DELETE")
    assert hook.snapshot() == {"has_permission": False, "loading": True}
    await hook.wait()

    assert hook.snapshot() == {"has_permission": False, "loading": False}
    assert iam_client.has_permission.await_count == 2
    assert states == [
        {"has_permission": True, "loading": False},
        {"has_permission": False, "loading": True},
        {"has_permission": False, "loading": False},
    ]


@pytest.mark.asyncio
async def test_superseded_check_does_not_resolve(iam_client):
    release = asyncio.Event()

    async def slow_then_fast(user_id, resource, action):
        if resource == "Product":
            await release.wait()
        return True

    iam_client.has_permission.side_effect = slow_then_fast
    states = []
    hook = create_use_permission(iam_client, lambda: 42)("Product", "CREATE", on_change=recorder(states))
    await asyncio.sleep(0)

    hook.rerender("Order", "READ")
    release.set()
    await hook.wait()

    assert hook.resource == "Order"
    assert states == [
        {"has_permission": False, "loading": True},
        {"has_permission": True, "loading": False},
    ]


@pytest.mark.asyncio
async def test_user_change_does_not_trigger_recheck(iam_client):
    current = {"id": 1}
    hook = await create_use_permission(iam_client, lambda: current)("Product", "READ").wait()

    current["id"] = 2
    hook.rerender("Product", "READ")
    await hook.wait()

    iam_client.has_permission.assert_awaited_once_with(1, "Product", "READ")


@pytest.mark.asyncio
async def test_unmount_cancels_pending_check(iam_client):
    release = asyncio.Event()

    async def never(user_id, resource, action):
        await release.wait()
        return True

    iam_client.has_permission.side_effect = never
    hook = create_use_permission(iam_client, lambda: 42)("Product", "READ")
    await asyncio.sleep(0)

    hook.unmount()
    await hook.wait()

    assert hook.loading is True


def test_hook_created_outside_event_loop_starts_on_wait(iam_client):
    hook = PermissionHook(iam_client, lambda: 42, "Product", "READ")
    assert hook.loading is True

    asyncio.run(hook.wait())

    assert hook.snapshot() == {"has_permission": True, "loading": False}


def test_principal_id_shapes():
    assert principal_id(None) is None
    assert principal_id(5) == 5
    assert principal_id({"id": 6}) == 6
    assert principal_id({"userId": 7}) == 7
    assert principal_id(Principal(id=8)) == 8
