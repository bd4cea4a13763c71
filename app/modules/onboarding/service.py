"""
State carried from the login callback into onboarding.

When a provider identity matches no account, the callback stores the
provider's email, a prefilled profile and the provider id in the verification
cookie under the keys below; onboarding reads them back.
"""

import re
from typing import Any, Dict, Optional

from app.modules.auth.schemas import ProviderUser

onboarding_email_session_key = "onboardingEmail"
prefilled_profile_key = "prefilledProfile"
provider_id_key = "providerId"

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20

_DISALLOWED_USERNAME_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_username(raw: Optional[str]) -> Optional[str]:
    """Turn a provider username into one our username rules accept.

    Disallowed characters become ``_``, the result is lower-cased, cut to
    USERNAME_MAX_LENGTH and then right-padded with ``_`` to
    USERNAME_MIN_LENGTH. Padding happens after truncation.
    """
    if raw is None:
        return None
    username = _DISALLOWED_USERNAME_CHARS.sub("_", raw).lower()
    return username[:USERNAME_MAX_LENGTH].ljust(USERNAME_MIN_LENGTH, "_")


def build_prefilled_profile(profile: ProviderUser) -> Dict[str, Any]:
    prefilled = profile.model_dump(mode="json")
    prefilled["username"] = sanitize_username(profile.username)
    return prefilled
