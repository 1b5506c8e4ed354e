"""Application settings with Pydantic validation."""

from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cita_checker.constants import (
    DEFAULT_AREA_CODE,
    DEFAULT_OFFICE_CODE,
    PORTAL_URL,
    Delays,
    Timeouts,
)


class CheckerSettings(BaseSettings):
    """Checker settings with validation and environment variable support."""

    # Telegram credentials - absence is only an error once a message is sent
    telegram_bot_token: Optional[SecretStr] = Field(
        default=None, description="Telegram bot token used for notifications"
    )
    telegram_chat_id: Optional[str] = Field(
        default=None, description="Telegram chat/channel id that receives notifications"
    )

    # Portal
    portal_url: str = Field(default=PORTAL_URL, description="Appointment portal start page")
    office_code: str = Field(default=DEFAULT_OFFICE_CODE, description="Office option value")
    area_code: str = Field(default=DEFAULT_AREA_CODE, description="Area option value")
    selectors_file: Optional[str] = Field(
        default=None, description="Optional YAML file overriding form selectors"
    )

    # Browser
    headless: bool = Field(default=True, description="Run the browser without a window")

    # Timeouts (milliseconds)
    navigation_timeout_ms: int = Field(default=Timeouts.NAVIGATION, gt=0)
    element_timeout_ms: int = Field(default=Timeouts.ELEMENT, gt=0)
    queue_drain_timeout_ms: int = Field(default=Timeouts.QUEUE_DRAIN, gt=0)
    procedure_hidden_timeout_ms: int = Field(default=Timeouts.PROCEDURE_HIDDEN, gt=0)
    appointment_section_timeout_ms: int = Field(default=Timeouts.APPOINTMENT_SECTION, gt=0)

    # Delays (seconds)
    procedure_fallback_delay: float = Field(default=Delays.PROCEDURE_FALLBACK, ge=0)
    settle_delay: float = Field(default=Delays.AFTER_CONFIRM_SETTLE, ge=0)

    # Notifications
    notify_when_unavailable: bool = Field(
        default=False, description="Also send a message when no appointments are found"
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_json: bool = Field(default=False, description="Write the log file as JSON lines")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f'LOG_LEVEL must be one of: {", ".join(allowed)}')
        return v_upper

    @field_validator("telegram_chat_id")
    @classmethod
    def blank_chat_id_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat whitespace-only chat ids as unset."""
        if v is not None and not v.strip():
            return None
        return v

    def get_bot_token(self) -> Optional[str]:
        """Return the plain bot token, or None when unset or blank."""
        if self.telegram_bot_token is None:
            return None
        token = self.telegram_bot_token.get_secret_value().strip()
        return token or None


_settings: Optional[CheckerSettings] = None


def get_settings() -> CheckerSettings:
    """
    Get application settings singleton.

    Returns:
        CheckerSettings instance

    Raises:
        ValidationError: If settings are invalid
    """
    global _settings
    if _settings is None:
        _settings = CheckerSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
