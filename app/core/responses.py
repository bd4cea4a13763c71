from fastapi.responses import RedirectResponse
from typing import List, Optional, Tuple

Headers = List[Tuple[str, str]]


def redirect(url: str, headers: Optional[Headers] = None, status_code: int = 302) -> RedirectResponse:
    """Redirect carrying extra headers; repeated names (set-cookie) are all kept."""
    response = RedirectResponse(url=url, status_code=status_code)
    for name, value in headers or []:
        response.headers.append(name, value)
    return response


def safe_redirect(to: Optional[str], default: str = "/") -> str:
    """Only allow same-site paths as redirect targets."""
    if not to or not isinstance(to, str):
        return default
    if not to.startswith("/") or to.startswith("//") or to.startswith("/\\"):
        return default
    return to
