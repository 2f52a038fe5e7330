"""
Application settings loaded from the environment (and .env when present).
Built once by the application factory and shared through app.state.
"""
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from constants import (
    BREVO_API_URL,
    BREVO_TIMEOUT_SECONDS,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_SWEEP_INTERVAL_SECONDS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from utils.exceptions import ConfigurationError

load_dotenv()

ENVIRONMENTS = {"development", "test", "production"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Brevo
    brevo_api_key: Optional[str] = Field(default=None, alias="BREVO_API_KEY")
    brevo_sender_email: Optional[str] = Field(default=None, alias="BREVO_SENDER_EMAIL")
    brevo_sender_name: str = Field(default="Website Contact", alias="BREVO_SENDER_NAME")
    brevo_receiver_email: Optional[str] = Field(default=None, alias="BREVO_RECEIVER_EMAIL")
    brevo_receiver_name: str = Field(default="Site Owner", alias="BREVO_RECEIVER_NAME")
    brevo_api_url: str = Field(default=BREVO_API_URL, alias="BREVO_API_URL")
    brevo_timeout_seconds: float = Field(default=BREVO_TIMEOUT_SECONDS, gt=0, alias="BREVO_TIMEOUT_SECONDS")

    # Rate limiting
    rate_limit_max_requests: int = Field(default=RATE_LIMIT_MAX_REQUESTS, ge=1, alias="RATE_LIMIT_MAX_REQUESTS")
    rate_limit_window_seconds: float = Field(default=RATE_LIMIT_WINDOW_SECONDS, gt=0, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_sweep_interval_seconds: float = Field(
        default=RATE_LIMIT_SWEEP_INTERVAL_SECONDS, gt=0, alias="RATE_LIMIT_SWEEP_INTERVAL_SECONDS"
    )

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        env = v.strip().lower()
        if env not in ENVIRONMENTS:
            raise ValueError(f"APP_ENV must be one of {sorted(ENVIRONMENTS)}, got {v!r}")
        return env

    @field_validator("brevo_api_key", "brevo_sender_email", "brevo_receiver_email")
    @classmethod
    def blank_as_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def receiver_email(self) -> Optional[str]:
        """Receiver address, falling back to the sender when unset."""
        return self.brevo_receiver_email or self.brevo_sender_email

    def ensure_delivery_configured(self) -> None:
        """
        Raise ConfigurationError if the values needed to deliver email are missing.
        """
        missing = []
        if not self.brevo_api_key:
            missing.append("BREVO_API_KEY")
        if not self.brevo_sender_email:
            missing.append("BREVO_SENDER_EMAIL")
        if missing:
            raise ConfigurationError(
                f"Email delivery is not configured: set {', '.join(missing)} in the environment"
            )


def get_settings() -> Settings:
    return Settings()
