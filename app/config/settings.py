from datetime import datetime, timedelta, timezone
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; used for session/connection writes when set

    # Cookie sessions (auth, verification, toast, oauth state)
    session_secret: str = "development-session-secret-change-me-please"
    session_expiration_days: int = 30
    verification_max_age_seconds: int = 600
    oauth_state_max_age_seconds: int = 600

    # GitHub OAuth app
    github_client_id: str = ""
    github_client_secret: str = ""
    github_scope: str = "user:email"

    # App
    app_name: str = "connections-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    public_base_url: Optional[str] = None  # e.g. "https://example.com"; derived from the request when unset
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_session_expiration_date(self) -> datetime:
        return datetime.now(timezone.utc) + timedelta(days=self.session_expiration_days)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
