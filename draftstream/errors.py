"""Exception types raised by draftstream."""

from __future__ import annotations


class DraftStreamError(Exception):
    """Base class for draftstream errors."""


class TelegramAPIError(DraftStreamError):
    """Telegram Bot API answered with ``ok: false``."""

    def __init__(self, method: str, error_code: int | None, description: str):
        self.method = method
        self.error_code = error_code
        self.description = description
        super().__init__(f"{method} failed ({error_code}): {description}")
