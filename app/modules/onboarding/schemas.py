from pydantic import BaseModel
from typing import Optional


class PrefilledProfile(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    image_url: Optional[str] = None


class OnboardingPrefillResponse(BaseModel):
    provider_name: str
    email: str
    provider_id: Optional[str] = None
    prefilled_profile: PrefilledProfile
