from fastapi import APIRouter, Request
from typing import Union
from fastapi.responses import RedirectResponse

from app.core.cookies import verify_session_storage
from app.core.responses import redirect
from app.modules.auth.providers import ProviderName
from app.modules.onboarding.schemas import OnboardingPrefillResponse, PrefilledProfile
from app.modules.onboarding.service import (
    onboarding_email_session_key, prefilled_profile_key, provider_id_key
)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.get("/{provider}", response_model=None)
async def get_onboarding_prefill(
    provider: ProviderName,
    request: Request,
) -> Union[OnboardingPrefillResponse, RedirectResponse]:
    """Prefill data for the onboarding form, carried over from the provider login"""
    verify_session = verify_session_storage.get_session(request)
    email = verify_session.get(onboarding_email_session_key)
    if not email:
        return redirect("/login")

    return OnboardingPrefillResponse(
        provider_name=provider.value,
        email=email,
        provider_id=verify_session.get(provider_id_key),
        prefilled_profile=PrefilledProfile(**(verify_session.get(prefilled_profile_key) or {})),
    )
