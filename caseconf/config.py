"""Application configuration using Pydantic Settings."""
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "Case Conference System"
    debug: bool = False
    log_level: str = "INFO"

    # CORS (comma-separated origins)
    cors_origins: str = "http://localhost:5500,http://127.0.0.1:5500"

    # Sessions
    session_cookie_name: str = "caseconf_session"
    session_cookie_secure: bool = False
    session_ttl_minutes: int = 30
    session_sliding: bool = True  # refresh expiry on every authenticated request

    # Unknown email on login creates a demo account instead of failing
    allow_demo_provisioning: bool = False

    # Bootstrap accounts
    admin_email: str = "admin@schools.org"
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    admin_name: str = "System Administrator"
    seed_demo_data: bool = False

    # Activity log
    activity_log_limit: int = 10

    @model_validator(mode="after")
    def _validate_production_secrets(self):
        if not self.debug:
            if self.admin_password in (DEFAULT_ADMIN_PASSWORD, ""):
                raise ValueError(
                    "ADMIN_PASSWORD must be set to a strong password when DEBUG is not enabled."
                )
        if self.session_ttl_minutes <= 0:
            raise ValueError("SESSION_TTL_MINUTES must be positive")
        return self


settings = Settings()
