from datetime import datetime, timedelta, timezone
from http.cookies import SimpleCookie
from types import SimpleNamespace
from typing import Dict, List, Optional
from uuid import uuid4

import pytest
from starlette.requests import Request

from app.core.cookies import CookieSessionStorage, auth_session_storage
from app.modules.auth.providers import AuthenticationError, ProviderName
from app.modules.auth.schemas import ProviderUser
from app.modules.auth.service import AuthService
from app.modules.connections.schemas import ConnectionResponse
from app.modules.sessions.schemas import SessionResponse
from app.modules.sessions.service import SessionService
from app.modules.users.schemas import UserResponse


def make_request(path: str = "/", query: str = "", cookies: Optional[Dict[str, str]] = None) -> Request:
    headers = []
    if cookies:
        cookie_header = "; ".join(f"{k}={v}" for k, v in cookies.items())
        headers.append((b"cookie", cookie_header.encode()))
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "scheme": "http",
        "method": "GET",
        "path": path,
        "raw_path": path.encode(),
        "query_string": query.encode(),
        "headers": headers,
        "client": ("127.0.0.1", 12345),
        "server": ("testserver", 80),
    }
    return Request(scope)


def response_cookies(response) -> Dict[str, str]:
    """name -> raw Set-Cookie value for every cookie the response sets"""
    cookies = {}
    for header in response.headers.getlist("set-cookie"):
        name = header.split("=", 1)[0]
        cookies[name] = header
    return cookies


def cookie_value(set_cookie: str) -> str:
    parsed = SimpleCookie()
    parsed.load(set_cookie)
    return next(iter(parsed.values())).value


class FakeAuthenticator:
    def __init__(self, profile: Optional[ProviderUser] = None, error: Optional[Exception] = None):
        self.profile = profile
        self.error = error
        self.calls: List[ProviderName] = []

    async def authenticate(self, provider_name, request):
        self.calls.append(provider_name)
        if self.error is not None:
            raise self.error
        return self.profile


class FakeConnectionService:
    def __init__(self, connections: Optional[List[ConnectionResponse]] = None):
        self.connections = list(connections or [])
        self.created: List[ConnectionResponse] = []
        self.lookups = 0

    def get_by_provider(self, provider_name, provider_id):
        self.lookups += 1
        for connection in self.connections:
            if connection.provider_name == provider_name and connection.provider_id == provider_id:
                return connection
        return None

    def create(self, provider_name, provider_id, user_id):
        connection = ConnectionResponse(
            id=uuid4().hex, provider_name=provider_name, provider_id=provider_id, user_id=user_id
        )
        self.connections.append(connection)
        self.created.append(connection)
        return connection

    def list_for_user(self, user_id):
        return [c for c in self.connections if c.user_id == user_id]

    def delete_for_user(self, connection_id, user_id):
        before = len(self.connections)
        self.connections = [
            c for c in self.connections if not (c.id == connection_id and c.user_id == user_id)
        ]
        return len(self.connections) < before


class FakeUserService:
    def __init__(self, users: Optional[List[UserResponse]] = None):
        self.users = list(users or [])
        self.lookups = 0

    def get_user_by_email(self, email):
        self.lookups += 1
        for user in self.users:
            if user.email == email.lower():
                return user
        return None


class FakeSessionService(SessionService):
    """Real cookie handling, in-memory session rows."""

    def __init__(self, current_user_id: Optional[str] = None):
        super().__init__(supabase=None, storage=auth_session_storage)
        self.current_user_id = current_user_id
        self.created: List[SessionResponse] = []

    def create_session(self, user_id):
        session = SessionResponse(
            id=uuid4().hex,
            user_id=user_id,
            expiration_date=datetime.now(timezone.utc) + timedelta(days=30),
        )
        self.created.append(session)
        return session

    def get_user_id(self, request):
        return self.current_user_id


class FakeTable:
    """Records a supabase query chain and answers execute() with canned rows."""

    def __init__(self, data=None):
        self.data = data if data is not None else []
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        self.calls.append(("execute", (), {}))
        return SimpleNamespace(data=self.data)


class FakeSupabase:
    def __init__(self, **tables):
        self.tables = {name: FakeTable(rows) for name, rows in tables.items()}

    def table(self, name):
        return self.tables.setdefault(name, FakeTable())


@pytest.fixture
def profile() -> ProviderUser:
    return ProviderUser(
        id="583231",
        email="Octocat@GitHub.com",
        username="The-Octocat!",
        name="The Octocat",
        image_url="https://avatars.githubusercontent.com/u/583231",
    )


@pytest.fixture
def verification_storage() -> CookieSessionStorage:
    return CookieSessionStorage("en_verification", "test-secret-for-verification-cookies-0001", max_age=600)


@pytest.fixture
def build_service(verification_storage):
    def build(
        authenticator=None,
        connections=None,
        users=None,
        sessions=None,
    ):
        return AuthService(
            authenticator=authenticator or FakeAuthenticator(error=AuthenticationError("not configured")),
            connections=connections or FakeConnectionService(),
            users=users or FakeUserService(),
            sessions=sessions or FakeSessionService(),
            verification_storage=verification_storage,
        )
    return build
