from datetime import datetime, timezone
from fastapi import HTTPException, Request
from fastapi.responses import RedirectResponse
from supabase import Client
from typing import Optional
import logging

from app.config.settings import settings
from app.core.cookies import CookieSessionStorage
from app.core.responses import Headers, redirect, safe_redirect
from app.modules.sessions.schemas import SessionResponse

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "sessionId"


class SessionService:
    def __init__(self, supabase: Client, storage: CookieSessionStorage):
        self.supabase = supabase
        self.storage = storage

    def create_session(self, user_id: str) -> SessionResponse:
        """Create a login session for the user"""
        result = self.supabase.table("sessions").insert({
            "user_id": user_id,
            "expiration_date": settings.get_session_expiration_date().isoformat(),
        }).execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create session")

        return SessionResponse(**result.data[0])

    def get_user_id(self, request: Request) -> Optional[str]:
        """User id of the unexpired session referenced by the request's auth cookie"""
        session_id = self.storage.get_session(request).get(SESSION_ID_KEY)
        if not session_id:
            return None

        result = self.supabase.table("sessions")\
            .select("user_id")\
            .eq("id", session_id)\
            .gt("expiration_date", datetime.now(timezone.utc).isoformat())\
            .limit(1)\
            .execute()

        if not result.data:
            logger.info("Auth cookie references missing or expired session %s", session_id)
            return None

        return result.data[0]["user_id"]

    def handle_new_session(
        self,
        request: Request,
        session: SessionResponse,
        redirect_to: Optional[str] = None,
        remember: bool = False,
        headers: Optional[Headers] = None,
    ) -> RedirectResponse:
        """Put the new session in the auth cookie and send the user on"""
        auth_session = self.storage.get_session(request)
        auth_session.set(SESSION_ID_KEY, session.id)
        cookie = self.storage.commit_session(
            auth_session,
            expires=session.expiration_date if remember else None,
        )
        return redirect(
            safe_redirect(redirect_to),
            headers=[("set-cookie", cookie)] + list(headers or []),
        )
