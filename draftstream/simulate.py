"""Drive a DraftStreamer from a complete text, sentence by sentence.

Useful for demos and tests when no live producer (LLM stream) is at hand.
"""

from __future__ import annotations

import asyncio
import inspect
import re
from typing import Any, Awaitable, Callable, Iterator

SnapshotHandler = Callable[[str], Awaitable[Any] | Any]

# A sentence with its trailing punctuation and whitespace, or a run of newlines
_SENTENCE = re.compile(r"[^.!?\n]+[.!?]*\s*|\n+")


class SentenceChunks:
    """Sentences of a text, rescanned lazily on every iteration."""

    def __init__(self, text: str | None):
        self._text = (text or "").strip()

    def __iter__(self) -> Iterator[str]:
        if not self._text:
            return
        matched = False
        for match in _SENTENCE.finditer(self._text):
            matched = True
            yield match.group(0)
        if not matched:
            yield self._text

    def __bool__(self) -> bool:
        return bool(self._text)


def split_into_sentence_chunks(text: str | None) -> SentenceChunks:
    """Split text on sentence terminators (. ! ?) and newline runs."""
    return SentenceChunks(text)


async def simulate_sentence_stream(
    text: str,
    on_snapshot: SnapshotHandler,
    delay: float = 0.2,
) -> None:
    """Feed growing prefixes of text to on_snapshot, one sentence at a time.

    on_snapshot may be a plain function or a coroutine function.
    """
    current = ""
    for sentence in split_into_sentence_chunks(text):
        current += sentence
        result = on_snapshot(current)
        if inspect.isawaitable(result):
            await result
        if delay > 0:
            await asyncio.sleep(delay)
