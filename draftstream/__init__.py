"""draftstream: live-updating chat draft messages for streamed text."""

from draftstream.chunking import Chunk, chunk_telegram_text, make_chunker
from draftstream.errors import DraftStreamError, TelegramAPIError
from draftstream.simulate import simulate_sentence_stream, split_into_sentence_chunks
from draftstream.streamer import DraftState, DraftStreamer
from draftstream.transport import ChatTransport, MessageHandle, TelegramTransport

__all__ = [
    "ChatTransport",
    "Chunk",
    "DraftState",
    "DraftStreamError",
    "DraftStreamer",
    "MessageHandle",
    "TelegramAPIError",
    "TelegramTransport",
    "chunk_telegram_text",
    "make_chunker",
    "simulate_sentence_stream",
    "split_into_sentence_chunks",
]
