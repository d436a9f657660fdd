"""Configuration settings for the transaction confirmation core."""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfirmationSettings(BaseSettings):
    """Confirmation core configuration.

    All settings can be configured via environment variables with the
    TX_CONFIRMATION_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="TX_CONFIRMATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    wrong_password_attempts_limit: int = Field(
        default=3,
        ge=1,
        description="Consecutive wrong passwords before the confirmation form is reset",
    )
    open_surface_on_queue: bool = Field(
        default=True,
        description="Open the confirmation surface when a transaction is queued",
    )
    close_surface_on_remove: bool = Field(
        default=True,
        description="Dismiss an open confirmation surface when a transaction is removed",
    )
    delivered_history_limit: int = Field(
        default=1024,
        ge=1,
        description="Delivered message IDs remembered to ignore late duplicate subscriptions",
    )
    event_queue_maxsize: int = Field(
        default=0,
        ge=0,
        description="Inbound event channel bound (0 = unbounded)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level used by configure_logging",
    )


@lru_cache()
def get_settings() -> ConfirmationSettings:
    """Get cached settings instance."""
    logger = logging.getLogger(__name__)

    settings = ConfirmationSettings()
    logger.info(
        f"Settings loaded - attempts limit: {settings.wrong_password_attempts_limit}, "
        f"open on queue: {settings.open_surface_on_queue}"
    )
    return settings


def configure_logging(settings: ConfirmationSettings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
