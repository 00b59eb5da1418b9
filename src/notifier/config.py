"""Notifier configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class NotifierConfig(BaseSettings):
    """Notifier configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Sheet source (export URL, published CSV URL or proxy endpoint)
    sheet_url: str = Field(
        default="",
        description="Default Google Sheet / proxy URL used when --url is omitted",
    )

    # HTTP settings
    request_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for the CSV download request",
    )
    fetch_attempts: int = Field(
        default=3,
        description="Attempts before a transient download failure is reported",
    )
    fetch_retry_wait_seconds: float = Field(
        default=2.0,
        description="Fixed wait between download attempts",
    )

    # Slot policy (inclusive bounds, None = unbounded)
    slot_min: int | None = Field(
        default=3,
        description="Lowest slot number that produces a message",
    )
    slot_max: int | None = Field(
        default=7,
        description="Highest slot number that produces a message",
    )
    accept_all_slots: bool = Field(
        default=False,
        description="Ignore slot_min/slot_max and keep every decoded slot",
    )

    # Date format
    mark_range_start: bool = Field(
        default=False,
        description="Cross-month ranges render as 1月26日-2月1日 instead of 1月26-2月1日",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "NOTIFIER_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: NotifierConfig | None = None


def get_config() -> NotifierConfig:
    """Get the notifier configuration singleton.

    Returns:
        NotifierConfig: Notifier configuration instance
    """
    global _config
    if _config is None:
        _config = NotifierConfig()
    return _config
