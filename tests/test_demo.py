"""Tests for the demo entry point."""

import pytest

from draftstream.config import Settings
from draftstream.demo import run, stream_text


class TestStreamText:
    @pytest.mark.asyncio
    async def test_streams_and_finalizes(self, transport):
        settings = Settings(edit_interval=0.01, demo_delay=0, max_message_length=20)
        text = "First part here. Second part here."

        messages = await stream_text(settings, transport, 123, text)

        assert [m.message_id for m in messages] == [100, 101]
        assert messages[0].text == "First part here."


class TestRun:
    @pytest.mark.asyncio
    async def test_usage_without_args(self, capsys):
        assert await run([]) == 2
        assert "usage" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_missing_token(self, monkeypatch, capsys):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        assert await run(["123"]) == 1
        assert "TELEGRAM_BOT_TOKEN" in capsys.readouterr().err
