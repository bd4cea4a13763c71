"""
One-shot user notifications carried across redirects in the toast cookie.
"""

from fastapi import Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field, ValidationError
from typing import Literal, Optional, Tuple
from uuid import uuid4
import logging

from app.core.cookies import toast_session_storage
from app.core.responses import Headers, redirect

logger = logging.getLogger(__name__)

TOAST_SESSION_KEY = "toast"

ToastType = Literal["message", "success", "error", "info"]


class Toast(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    type: ToastType = "message"
    title: Optional[str] = None
    description: str


def create_toast_headers(toast: Toast) -> Headers:
    session = toast_session_storage.parse(None)
    session.flash(TOAST_SESSION_KEY, toast.model_dump())
    return [("set-cookie", toast_session_storage.commit_session(session))]


def redirect_with_toast(url: str, toast: Toast, headers: Optional[Headers] = None) -> RedirectResponse:
    return redirect(url, headers=list(headers or []) + create_toast_headers(toast))


def get_toast(request: Request) -> Tuple[Optional[Toast], Headers]:
    """Read the pending toast and return the header that clears it."""
    session = toast_session_storage.get_session(request)
    raw = session.get(TOAST_SESSION_KEY)
    toast = None
    if raw is not None:
        try:
            toast = Toast.model_validate(raw)
        except ValidationError as e:
            logger.warning("Dropping malformed toast: %s", e)
    headers: Headers = []
    if raw is not None:
        headers.append(("set-cookie", toast_session_storage.commit_session(session)))
    return toast, headers
