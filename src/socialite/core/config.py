from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SOCIALITE_", case_sensitive=True, extra="ignore"
    )

    # Application
    APP_NAME: str = "Socialite"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "OAuth1/OAuth2 social login drivers"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # HTTP
    HTTP_TIMEOUT: float = Field(10.0, gt=0, description="Timeout for provider HTTP calls")
    AUTH_PREFIX: str = "/auth"

    # Session cookie for the bundled FastAPI app
    SESSION_SECRET_KEY: str = "change-me-socialite-session-secret"
    SESSION_COOKIE: str = "socialite_session"

    # Base URL used to build default callback URLs: {base}/auth/{driver}/callback
    CALLBACK_BASE_URL: str = "http://localhost:8000"

    # Per-driver configuration, e.g. {"github": {"client_id": "...", "client_secret": "..."}}
    PROVIDERS: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("PROVIDERS", mode="before")
    @classmethod
    def normalize_provider_names(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(name).lower(): conf for name, conf in v.items()}
        return v

    def callback_url(self, driver: str) -> str:
        return f"{self.CALLBACK_BASE_URL.rstrip('/')}{self.AUTH_PREFIX}/{driver}/callback"

    def provider_config(self, driver: str) -> dict[str, Any]:
        """
        Return the configuration for a single driver.

        ``redirect`` defaults to the bundled callback route when the driver's
        configuration does not set one. Missing credentials are left missing so
        the manager can reject them.
        """
        config = dict(self.PROVIDERS.get(driver.lower(), {}))
        config.setdefault("redirect", self.callback_url(driver))
        return config


# Global settings instance
settings = Settings()
