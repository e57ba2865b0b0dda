"""Settings via pydantic-settings with DRAFT_ env prefix.

The bot token reads the unprefixed TELEGRAM_BOT_TOKEN so the same .env file
works for other Telegram tooling.
"""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DRAFT_", env_file=".env")

    # Telegram
    telegram_bot_token: str = Field("", validation_alias="TELEGRAM_BOT_TOKEN")
    telegram_api_base: str = "https://api.telegram.org"
    api_timeout_connect: int = 10  # seconds
    api_timeout_read: int = 30  # seconds

    # Draft streaming
    edit_interval: float = 2.0  # seconds between edits of one draft
    cursor: str = "▌"
    initial_text: str = ""  # empty = cursor glyph alone
    parse_mode: Literal["HTML", "MarkdownV2"] = "HTML"
    max_message_length: int = 4096

    log_level: str = "info"

    # Demo
    demo_delay: float = 0.2  # seconds between simulated sentences

    @model_validator(mode="after")
    def _validate_limits(self) -> "Settings":
        if self.edit_interval <= 0:
            raise ValueError("edit_interval must be > 0")
        if not 16 <= self.max_message_length <= 4096:
            raise ValueError(
                f"max_message_length ({self.max_message_length}) must be "
                "between 16 and 4096"
            )
        return self

    @property
    def draft_placeholder(self) -> str:
        return self.initial_text or self.cursor
