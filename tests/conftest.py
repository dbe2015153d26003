"""
Shared fixtures for the IAM client test suite.
"""

import json
from collections import Counter

import httpx
import pytest
import pytest_asyncio

from adminvault_iam.client import AdminVaultClient

BASE_URL = "http://adminvault.test/api"
API_KEY = "av_live_test_key"


def permission(id=1, resource="Product", action="CREATE", **extra):
    return {
        "id": id,
        "name": f"{action.title()} {resource}",
        "code": f"{resource.lower()}.{action.lower()}",
        "description": f"{action} {resource}",
        "resource": resource,
        "action": action,
        "isActive": True,
        **extra,
    }


def role(id=1, code="ADMIN", permissions=None):
    return {
        "id": id,
        "name": code.title(),
        "code": code,
        "description": f"{code} role",
        "permissions": permissions or [],
        "isSystemRole": False,
        "isActive": True,
    }


class ManualClock:
    """Millisecond clock advanced by hand"""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeAdminVault:
    """
    In-memory stand-in for the administration service, served through
    httpx.MockTransport
    """

    def __init__(self):
        self.permissions: dict[int, list[dict]] = {}
        self.grants: set[tuple[int, str, str]] = set()
        self.principals: list[dict] = []
        self.tokens: dict[str, dict] = {}
        self.calls: Counter = Counter()
        self.requests: list[httpx.Request] = []
        self.fail_paths: dict[str, int] = {}

    def grant(self, user_id: int, resource: str, action: str) -> None:
        self.grants.add((user_id, resource, action))
        self.permissions.setdefault(user_id, []).append(
            permission(id=len(self.grants), resource=resource, action=action)
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        self.calls[path] += 1
        self.requests.append(request)

        if path in self.fail_paths:
            return httpx.Response(self.fail_paths[path], json={"message": "boom"})

        body = json.loads(request.content) if request.content else {}

        if path == "/administration/iam/users/check-permission":
            allowed = (body["userId"], body["resource"], body["action"]) in self.grants
            return httpx.Response(200, json={"status": True, "data": {"hasPermission": allowed}})

        if path.startswith("/administration/iam/users/") and path.endswith("/permissions"):
            user_id = int(path.split("/")[4])
            return httpx.Response(200, json={"status": True, "data": self.permissions.get(user_id, [])})

        if path == "/administration/iam/principals/findAll":
            return httpx.Response(200, json={"success": True, "data": self.principals})

        if path == "/auth-users/validate-token":
            user = self.tokens.get(body.get("token"))
            if user is None:
                return httpx.Response(200, json={"status": False, "user": None})
            return httpx.Response(200, json={"status": True, "user": user})

        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def server():
    return FakeAdminVault()


@pytest_asyncio.fixture
async def client(server, clock):
    client = AdminVaultClient(
        base_url=BASE_URL,
        api_key=API_KEY,
        http_transport=httpx.MockTransport(server.handler),
        clock=clock,
    )
    yield client
    await client.aclose()
