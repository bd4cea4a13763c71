from fastapi import APIRouter, Depends, Request
from app.core.cookies import verify_session_storage
from app.core.dependencies import get_connection_service, get_session_service, get_user_service
from app.modules.auth.providers import Authenticator, ProviderName, get_authenticator
from app.modules.auth.service import AuthService
from app.modules.connections.service import ConnectionService
from app.modules.sessions.service import SessionService
from app.modules.users.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    authenticator: Authenticator = Depends(get_authenticator),
    connections: ConnectionService = Depends(get_connection_service),
    users: UserService = Depends(get_user_service),
    sessions: SessionService = Depends(get_session_service),
) -> AuthService:
    return AuthService(
        authenticator=authenticator,
        connections=connections,
        users=users,
        sessions=sessions,
        verification_storage=verify_session_storage,
    )


@router.post("/{provider}")
async def start_provider_login(
    provider: ProviderName,
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
):
    """Send the browser to the provider's authorization page"""
    return await authenticator.start(provider, request)


@router.get("/{provider}/callback", name="auth_callback")
async def provider_callback(
    provider: ProviderName,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    """Finish the provider login: sign in, connect, or start onboarding"""
    return await service.handle_callback(provider, request)
