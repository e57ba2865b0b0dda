"""Stream a text file into a Telegram chat as a live draft message.

Usage:
    TELEGRAM_BOT_TOKEN=... python -m draftstream.demo CHAT_ID [FILE]

Reads FILE (or stdin), replays it sentence by sentence through a
DraftStreamer and finalizes it. Every DRAFT_* setting applies.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from draftstream.config import Settings
from draftstream.simulate import simulate_sentence_stream
from draftstream.streamer import DraftStreamer
from draftstream.transport import MessageHandle, TelegramTransport

logger = logging.getLogger(__name__)

USAGE = "usage: python -m draftstream.demo CHAT_ID [FILE]"


async def stream_text(
    settings: Settings,
    transport: TelegramTransport,
    chat_id: int | str,
    text: str,
) -> list[MessageHandle]:
    """Replay text into chat_id and return the final messages."""
    streamer = DraftStreamer.from_settings(settings, transport, chat_id)
    try:
        await simulate_sentence_stream(text, streamer.update, delay=settings.demo_delay)
        return await streamer.finalize(text)
    finally:
        streamer.stop()


async def run(argv: list[str]) -> int:
    settings = Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not argv or len(argv) > 2:
        print(USAGE, file=sys.stderr)
        return 2
    if not settings.telegram_bot_token:
        print("Error: TELEGRAM_BOT_TOKEN not set", file=sys.stderr)
        return 1

    chat_id = int(argv[0]) if argv[0].lstrip("-").isdigit() else argv[0]
    text = Path(argv[1]).read_text() if len(argv) == 2 else sys.stdin.read()

    async with TelegramTransport.from_settings(settings) as transport:
        messages = await stream_text(settings, transport, chat_id, text)

    logger.info(
        "Sent %d message(s): %s",
        len(messages), ", ".join(str(m.message_id) for m in messages),
    )
    return 0


def main() -> None:
    """Entry point."""
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
