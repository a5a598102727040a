from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Set

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

API_URL = "https://users.example.com/users"


class FakeUserService:
    """In-memory stand-in for the remote user REST resource.

    Like the public demo API, writes are echoed back but never stored.
    """

    def __init__(self, users: Optional[List[Dict[str, object]]] = None) -> None:
        self.users: List[Dict[str, object]] = list(users or [])
        self.failing: Set[str] = set()
        self.create_id = 11
        self.requests: List[httpx.Request] = []

    def fail(self, *operations: str) -> None:
        self.failing.update(operations)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.rstrip("/")
        method = request.method

        if method == "GET" and path == "/users":
            if "fetch" in self.failing:
                return httpx.Response(500, json={"error": "fetch exploded"})
            return httpx.Response(200, json=self.users)

        if method == "POST" and path == "/users":
            if "create" in self.failing:
                return httpx.Response(500, json={"error": "create exploded"})
            body = json.loads(request.content)
            return httpx.Response(201, json={**body, "id": self.create_id})

        if path.startswith("/users/"):
            operation = {"PUT": "update", "DELETE": "delete"}.get(method)
            if operation is None:
                return httpx.Response(405)
            if operation in self.failing:
                return httpx.Response(500, json={"error": f"{operation} exploded"})
            if method == "PUT":
                return httpx.Response(200, json=json.loads(request.content))
            return httpx.Response(200, json={})

        return httpx.Response(404)


def sample_users() -> List[Dict[str, object]]:
    return [
        {"id": 3, "name": "Clementine Bauch", "email": "nathan@yesenia.net", "username": "Samantha"},
        {"id": 5, "name": "Chelsey Dietrich", "email": "lucio_hettinger@annie.ca", "username": "Kamren"},
        {"id": 7, "name": "Kurtis Weissnat", "email": "telly.hoeger@billy.biz", "username": "Elwyn.Skiles"},
    ]


@pytest.fixture
def fake_service() -> FakeUserService:
    return FakeUserService(sample_users())


@pytest.fixture
def api_url() -> str:
    return API_URL


@pytest.fixture
def make_controller(fake_service: FakeUserService):
    """Return a factory building controllers wired to ``fake_service``."""

    from usermanager.controller import UserListController
    from usermanager.remote import RemoteUserAPI

    def _factory(*, lifetime: float = 30.0) -> UserListController:
        api = RemoteUserAPI(API_URL, transport=fake_service.transport())
        return UserListController(api, notification_lifetime=lifetime)

    return _factory
