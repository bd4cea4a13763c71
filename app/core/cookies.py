"""
Signed cookie-backed sessions.

Each storage keeps its whole session in one cookie. The cookie value is an
HS256 JWT so the browser can carry it but not change it; anything that fails
to verify (tampered, signed with another secret, expired) reads back as an
empty session.
"""

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from http.cookies import SimpleCookie
from typing import Any, Dict, Optional

import jwt
import logging
from fastapi import Request

from app.config.settings import settings

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _flash_key(key: str) -> str:
    return f"__flash_{key}__"


class CookieSession:
    """Session data read from (and committed back to) a single cookie."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})

    @property
    def data(self) -> Dict[str, Any]:
        return dict(self._data)

    def has(self, key: str) -> bool:
        return key in self._data or _flash_key(key) in self._data

    def get(self, key: str, default: Any = None) -> Any:
        # Flashed values are handed out once
        flash = _flash_key(key)
        if flash in self._data:
            return self._data.pop(flash)
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def flash(self, key: str, value: Any) -> None:
        self._data[_flash_key(key)] = value

    def unset(self, key: str) -> None:
        self._data.pop(key, None)
        self._data.pop(_flash_key(key), None)


class CookieSessionStorage:
    def __init__(
        self,
        name: str,
        secret: str,
        max_age: Optional[int] = None,
        secure: bool = False,
        same_site: str = "lax",
        path: str = "/",
    ):
        self.name = name
        self.secret = secret
        self.max_age = max_age
        self.secure = secure
        self.same_site = same_site
        self.path = path

    def get_session(self, request: Request) -> CookieSession:
        return self.parse(request.cookies.get(self.name))

    def parse(self, cookie_value: Optional[str]) -> CookieSession:
        if not cookie_value:
            return CookieSession()
        try:
            payload = jwt.decode(cookie_value, self.secret, algorithms=[_ALGORITHM])
        except jwt.PyJWTError as e:
            logger.debug("Ignoring invalid %s cookie: %s", self.name, e)
            return CookieSession()
        return CookieSession(payload.get("data"))

    def commit_session(self, session: CookieSession, expires: Optional[datetime] = None) -> str:
        """Return the Set-Cookie value for the session.

        An explicit ``expires`` wins over the storage ``max_age``; with neither
        the cookie lives for the browser session.
        """
        claims: Dict[str, Any] = {"data": session.data}
        if expires is not None:
            claims["exp"] = expires
        elif self.max_age is not None:
            claims["exp"] = datetime.now(timezone.utc) + timedelta(seconds=self.max_age)
        value = jwt.encode(claims, self.secret, algorithm=_ALGORITHM)
        return self._serialize(value, max_age=None if expires else self.max_age, expires=expires)

    def destroy_session(self) -> str:
        return self._serialize("", max_age=0, expires=_EPOCH)

    def _serialize(self, value: str, max_age: Optional[int], expires: Optional[datetime]) -> str:
        # Same attributes Starlette's Response.set_cookie writes, returned as a header value
        cookie: SimpleCookie = SimpleCookie()
        cookie[self.name] = value
        morsel = cookie[self.name]
        morsel["path"] = self.path
        morsel["httponly"] = True
        morsel["samesite"] = self.same_site
        if self.secure:
            morsel["secure"] = True
        if max_age is not None:
            morsel["max-age"] = max_age
        if expires is not None:
            morsel["expires"] = format_datetime(expires.astimezone(timezone.utc), usegmt=True)
        return morsel.OutputString()


auth_session_storage = CookieSessionStorage(
    "en_session", settings.session_secret, secure=settings.is_production
)
verify_session_storage = CookieSessionStorage(
    "en_verification",
    settings.session_secret,
    max_age=settings.verification_max_age_seconds,
    secure=settings.is_production,
)
toast_session_storage = CookieSessionStorage(
    "en_toast", settings.session_secret, secure=settings.is_production
)
connection_session_storage = CookieSessionStorage(
    "en_connection",
    settings.session_secret,
    max_age=settings.oauth_state_max_age_seconds,
    secure=settings.is_production,
)
