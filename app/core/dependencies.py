"""
Core dependencies: store services and the current user
"""

from fastapi import Depends, HTTPException, Request, status
from app.core.cookies import auth_session_storage
from app.database.supabase_client import get_supabase
from app.modules.connections.service import ConnectionService
from app.modules.sessions.service import SessionService
from app.modules.users.service import UserService
from supabase import Client
from typing import Optional


def get_connection_service(supabase: Client = Depends(get_supabase)) -> ConnectionService:
    return ConnectionService(supabase)


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


def get_session_service(supabase: Client = Depends(get_supabase)) -> SessionService:
    return SessionService(supabase, auth_session_storage)


def get_optional_user_id(
    request: Request,
    sessions: SessionService = Depends(get_session_service),
) -> Optional[str]:
    return sessions.get_user_id(request)


def get_current_user_id(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    """Require a logged-in user"""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return user_id
