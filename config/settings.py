"""
Configuration settings for the Mindful Insights pipeline.
Uses Pydantic Settings for type-safe configuration with validation.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic validates types and provides clear error messages for misconfigurations.
    Every field has a default so importing this module never fails; the API key
    is checked when the insight client is constructed.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra env vars
    )

    # OpenAI-compatible API
    OPENAI_API_KEY: str = Field(
        default="",
        description="API key for the chat completions endpoint (required by the insight client)",
    )
    INSIGHT_BASE_URL: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the OpenAI-compatible API; requests go to {base}/chat/completions",
    )
    INSIGHT_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Model used for evening summaries and morning focus",
    )
    INSIGHT_MAX_TOKENS: int = Field(
        default=500,
        description="Maximum completion tokens per insight",
        ge=1,
    )
    INSIGHT_TEMPERATURE: float = Field(
        default=0.7,
        description="Sampling temperature",
        ge=0.0,
        le=2.0,
    )
    INSIGHT_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Per-attempt request timeout; the call is cancelled afterwards",
        gt=0,
    )
    INSIGHT_MAX_RETRIES: int = Field(
        default=3,
        description="Retries for server errors (3 retries = 4 attempts in total)",
        ge=0,
        le=10,
    )
    INSIGHT_RETRY_BACKOFF_SECONDS: float = Field(
        default=1.0,
        description="Multiplier for jittered exponential backoff between retries. 0 reissues immediately.",
        ge=0,
    )

    # ==================== Per-user budget ====================
    # Advisory limits, eventually consistent under concurrent requests

    MAX_CALLS_PER_DAY: int = Field(
        default=4,
        description="Maximum successful insight calls per user per day",
        ge=0,
    )
    MAX_TOKENS_PER_DAY: int = Field(
        default=2000,
        description="Maximum tokens (prompt + completion) per user per day",
        ge=0,
    )
    MAX_CALLS_PER_MINUTE: int = Field(
        default=10,
        description="Sliding-window limit on insight requests per user per minute. 0 disables it.",
        ge=0,
    )

    # ==================== Prompt composition ====================

    DEFAULT_LANGUAGE: Literal["de", "en"] = Field(
        default="de",
        description="Language used when the caller does not choose one",
    )
    REDACT_PII: bool = Field(
        default=True,
        description="Scrub names, emails, phones and locations before text leaves the device",
    )
    PROMPT_MAX_TOKENS: int = Field(
        default=2000,
        description="Upper bound used by validate_prompt_size",
        ge=1,
    )
    PROMPT_TARGET_TOKENS: int = Field(
        default=1500,
        description="Default target used by optimize_for_token_budget",
        ge=1,
    )

    # ==================== Reminders ====================

    TIMEZONE: str = Field(
        default="Europe/Berlin",
        description="Timezone used to evaluate reminder times",
    )
    DEFAULT_EVENING_REMINDER_TIME: str = Field(
        default="19:00",
        description="Default evening insight time (HH:MM)",
    )
    DEFAULT_MORNING_REMINDER_TIME: str = Field(
        default="06:00",
        description="Default morning insight time (HH:MM)",
    )

    # Application
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of the console format",
    )

    @field_validator("INSIGHT_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL is an http(s) URL without a trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("INSIGHT_BASE_URL must start with http:// or https://")
        return v.rstrip("/")


# Create singleton instance with validation
# This will automatically load from .env and validate all fields
settings = Settings()
