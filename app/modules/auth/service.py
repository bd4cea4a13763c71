from enum import Enum
from fastapi import Request
from fastapi.responses import RedirectResponse
from typing import Optional
import logging

from app.core.cookies import CookieSessionStorage
from app.core.responses import Headers, redirect
from app.core.toast import Toast, create_toast_headers, redirect_with_toast
from app.modules.auth.providers import PROVIDER_LABELS, AuthenticationError, Authenticator, ProviderName
from app.modules.auth.schemas import AuthFailure, AuthResult, AuthSuccess
from app.modules.connections.service import ConnectionService
from app.modules.onboarding.service import (
    build_prefilled_profile, onboarding_email_session_key, prefilled_profile_key, provider_id_key
)
from app.modules.sessions.service import SessionService
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)

CONNECTIONS_PATH = "/settings/profile/connections"
LOGIN_PATH = "/login"


class CallbackOutcome(str, Enum):
    AUTH_FAILED = "auth_failed"
    ALREADY_CONNECTED = "already_connected"
    CONNECTED_ELSEWHERE = "connected_elsewhere"
    LOGGED_IN = "logged_in"
    CONNECTED = "connected"
    ONBOARDING = "onboarding"


class AuthService:
    """Completes a provider login: sign in, link, or hand over to onboarding."""

    def __init__(
        self,
        authenticator: Authenticator,
        connections: ConnectionService,
        users: UserService,
        sessions: SessionService,
        verification_storage: CookieSessionStorage,
    ):
        self.authenticator = authenticator
        self.connections = connections
        self.users = users
        self.sessions = sessions
        self.verification_storage = verification_storage

    async def authenticate_or_redirect(self, provider_name: ProviderName, request: Request) -> AuthResult:
        label = PROVIDER_LABELS[provider_name]
        try:
            profile = await self.authenticator.authenticate(provider_name, request)
        except AuthenticationError as e:
            logger.error("Authentication with %s failed: %s", label, e)
            return AuthFailure(redirect_with_toast(LOGIN_PATH, Toast(
                type="error",
                title="Auth Failed",
                description=f"There was an error authenticating with {label}.",
            )))
        return AuthSuccess(profile)

    async def handle_callback(self, provider_name: ProviderName, request: Request) -> RedirectResponse:
        label = PROVIDER_LABELS[provider_name]

        result = await self.authenticate_or_redirect(provider_name, request)
        if isinstance(result, AuthFailure):
            self._log_outcome(CallbackOutcome.AUTH_FAILED, provider_name)
            return result.response
        profile = result.profile

        existing_connection = self.connections.get_by_provider(provider_name.value, profile.id)
        user_id = self.sessions.get_user_id(request)

        if existing_connection and user_id:
            # Never re-link an identity here, whoever owns it
            if existing_connection.user_id == user_id:
                outcome = CallbackOutcome.ALREADY_CONNECTED
                description = f'Your "{profile.display_name}" {label} account is already connected.'
            else:
                outcome = CallbackOutcome.CONNECTED_ELSEWHERE
                description = f'The "{profile.display_name}" {label} account is already connected to another account.'
            self._log_outcome(outcome, provider_name, user_id)
            return redirect_with_toast(CONNECTIONS_PATH, Toast(title="Already Connected", description=description))

        # TODO: a logged-in user with no connection for this identity falls through to the
        # email match below; linking to the current user instead needs a product decision.

        if existing_connection:
            self._log_outcome(CallbackOutcome.LOGGED_IN, provider_name, existing_connection.user_id)
            return self.make_session(request, existing_connection.user_id)

        user = self.users.get_user_by_email(profile.email)
        if user:
            self.connections.create(provider_name.value, profile.id, user.id)
            self._log_outcome(CallbackOutcome.CONNECTED, provider_name, user.id)
            return self.make_session(
                request,
                user.id,
                redirect_to=CONNECTIONS_PATH,
                headers=create_toast_headers(Toast(
                    type="success",
                    title="Connected",
                    description=f'Your "{profile.display_name}" {label} account has been connected.',
                )),
            )

        verify_session = self.verification_storage.get_session(request)
        verify_session.set(onboarding_email_session_key, profile.email)
        verify_session.set(prefilled_profile_key, build_prefilled_profile(profile))
        verify_session.set(provider_id_key, profile.id)
        self._log_outcome(CallbackOutcome.ONBOARDING, provider_name)
        return redirect(
            f"/onboarding/{provider_name.value}",
            headers=[("set-cookie", self.verification_storage.commit_session(verify_session))],
        )

    def make_session(
        self,
        request: Request,
        user_id: str,
        redirect_to: Optional[str] = None,
        headers: Optional[Headers] = None,
    ) -> RedirectResponse:
        session = self.sessions.create_session(user_id)
        return self.sessions.handle_new_session(
            request,
            session,
            redirect_to=redirect_to or "/",
            remember=True,
            headers=headers,
        )

    def _log_outcome(self, outcome: CallbackOutcome, provider_name: ProviderName, user_id: Optional[str] = None):
        logger.info("%s callback: %s (user=%s)", provider_name.value, outcome.value, user_id)
