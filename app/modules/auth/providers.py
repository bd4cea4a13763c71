"""
OAuth identity providers and the authenticator that drives them.

The authenticator owns the provider round trip: it sends the browser to the
provider with a random ``state`` remembered in the connection cookie, and on
the way back checks that state and exchanges the ``code`` for the provider's
user profile. Any failure raises :class:`AuthenticationError`; a profile is
only returned when the whole exchange succeeded.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode
import logging
import secrets

import httpx
from fastapi import Request
from fastapi.responses import RedirectResponse

from app.config.settings import settings
from app.core.cookies import CookieSessionStorage, connection_session_storage
from app.core.responses import redirect
from app.modules.auth.schemas import ProviderUser

logger = logging.getLogger(__name__)

OAUTH_STATE_KEY = "oauth2:state"


class ProviderName(str, Enum):
    GITHUB = "github"


PROVIDER_LABELS: Dict[ProviderName, str] = {
    ProviderName.GITHUB: "GitHub",
}


class AuthenticationError(Exception):
    pass


class GitHubProvider:
    name = ProviderName.GITHUB
    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    api_url = "https://api.github.com"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        scope: str = "user:email",
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=10.0))

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": self.scope,
            "state": state,
        })
        return f"{self.authorize_url}?{query}"

    async def get_profile(self, code: str, redirect_uri: str) -> ProviderUser:
        try:
            async with self._client_factory() as client:
                access_token = await self._exchange_code(client, code, redirect_uri)
                headers = {
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/vnd.github+json",
                }
                user_response = await client.get(f"{self.api_url}/user", headers=headers)
                user_response.raise_for_status()
                user = user_response.json()
                email = user.get("email")
                if not email:
                    emails_response = await client.get(f"{self.api_url}/user/emails", headers=headers)
                    emails_response.raise_for_status()
                    email = _primary_email(emails_response.json())

                if not email:
                    raise AuthenticationError("GitHub account has no verified email address")

                return ProviderUser(
                    id=str(user["id"]),
                    email=email,
                    username=user.get("login"),
                    name=user.get("name"),
                    image_url=user.get("avatar_url"),
                )
        # ValueError covers bad JSON and pydantic ValidationError
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise AuthenticationError(f"GitHub returned an unusable response: {e}") from e

    async def _exchange_code(self, client: httpx.AsyncClient, code: str, redirect_uri: str) -> str:
        response = await client.post(
            self.token_url,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": redirect_uri,
            },
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        payload = response.json()
        # GitHub reports token errors with a 200 and an "error" field
        if payload.get("error") or not payload.get("access_token"):
            raise AuthenticationError(
                f"GitHub token exchange failed: {payload.get('error_description') or payload.get('error')}"
            )
        return payload["access_token"]


def _primary_email(emails: List[Dict[str, Any]]) -> Optional[str]:
    verified = [e for e in emails if e.get("verified")]
    for entry in verified:
        if entry.get("primary"):
            return entry.get("email")
    return verified[0].get("email") if verified else None


class Authenticator:
    def __init__(self, providers: Dict[ProviderName, GitHubProvider], state_storage: CookieSessionStorage):
        self.providers = providers
        self.state_storage = state_storage

    def _provider(self, provider_name: ProviderName) -> GitHubProvider:
        provider = self.providers.get(provider_name)
        if provider is None:
            raise AuthenticationError(f"Provider {provider_name.value} is not configured")
        return provider

    def callback_url(self, provider_name: ProviderName, request: Request) -> str:
        path = f"/auth/{provider_name.value}/callback"
        if settings.public_base_url:
            return settings.public_base_url.rstrip("/") + path
        return str(request.base_url).rstrip("/") + path

    async def start(self, provider_name: ProviderName, request: Request) -> RedirectResponse:
        provider = self._provider(provider_name)
        state = secrets.token_urlsafe(32)
        session = self.state_storage.get_session(request)
        session.set(OAUTH_STATE_KEY, state)
        url = provider.authorization_url(self.callback_url(provider_name, request), state)
        logger.debug("Starting %s login", provider_name.value)
        return redirect(url, headers=[("set-cookie", self.state_storage.commit_session(session))])

    async def authenticate(self, provider_name: ProviderName, request: Request) -> ProviderUser:
        provider = self._provider(provider_name)
        params = request.query_params

        error = params.get("error")
        if error:
            raise AuthenticationError(f"{provider_name.value} returned {error}: {params.get('error_description', '')}")

        state = params.get("state")
        expected_state = self.state_storage.get_session(request).get(OAUTH_STATE_KEY)
        if (
            not state
            or not isinstance(expected_state, str)
            or not secrets.compare_digest(state.encode(), expected_state.encode())
        ):
            raise AuthenticationError("State does not match the one stored for this browser")

        code = params.get("code")
        if not code:
            raise AuthenticationError("Missing authorization code")

        return await provider.get_profile(code, self.callback_url(provider_name, request))


authenticator = Authenticator(
    providers={
        ProviderName.GITHUB: GitHubProvider(
            settings.github_client_id,
            settings.github_client_secret,
            scope=settings.github_scope,
        ),
    },
    state_storage=connection_session_storage,
)


def get_authenticator() -> Authenticator:
    return authenticator
