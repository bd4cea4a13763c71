from dataclasses import dataclass
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from typing import Optional, Union


class ProviderUser(BaseModel):
    """Profile returned by an identity provider for one login."""
    id: str
    email: str
    username: Optional[str] = None
    name: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.username or self.email


@dataclass
class AuthSuccess:
    profile: ProviderUser


@dataclass
class AuthFailure:
    response: RedirectResponse


AuthResult = Union[AuthSuccess, AuthFailure]
