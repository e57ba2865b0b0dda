"""Tests for Settings."""

import pytest
from pydantic import ValidationError

from draftstream.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        settings = Settings()
        assert settings.telegram_bot_token == ""
        assert settings.edit_interval == 2.0
        assert settings.cursor == "▌"
        assert settings.parse_mode == "HTML"
        assert settings.max_message_length == 4096
        assert settings.draft_placeholder == "▌"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("DRAFT_EDIT_INTERVAL", "1.5")
        monkeypatch.setenv("DRAFT_PARSE_MODE", "MarkdownV2")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        settings = Settings()
        assert settings.edit_interval == 1.5
        assert settings.parse_mode == "MarkdownV2"
        assert settings.telegram_bot_token == "123:abc"

    def test_placeholder_override(self):
        assert Settings(initial_text="Thinking...").draft_placeholder == "Thinking..."

    def test_invalid_parse_mode(self):
        with pytest.raises(ValidationError):
            Settings(parse_mode="Markdown")

    def test_non_positive_interval(self):
        with pytest.raises(ValidationError, match="edit_interval"):
            Settings(edit_interval=0)

    def test_message_length_bounds(self):
        with pytest.raises(ValidationError, match="max_message_length"):
            Settings(max_message_length=5000)
        with pytest.raises(ValidationError, match="max_message_length"):
            Settings(max_message_length=8)
