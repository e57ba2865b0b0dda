"""Split a text snapshot into Telegram-sized, render-ready chunks.

Each chunk is escaped on its own for the target parse mode, so a chunk never
carries a half-open markup span. Cuts prefer paragraph breaks, then line
breaks, then sentence ends, then whitespace.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from functools import partial
from typing import Callable, Literal

ParseMode = Literal["HTML", "MarkdownV2"]

# Max Telegram message length
TG_MAX_LEN = 4096

MIN_CHUNK_LEN = 16

# Characters that must be backslash-escaped in MarkdownV2 text
_MDV2_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")

_SENTENCE_END = re.compile(r"[.!?][\"')\]]*\s")


@dataclass(frozen=True)
class Chunk:
    """One message-sized piece of a snapshot."""

    text: str
    markup: str

    @property
    def size(self) -> int:
        return len(self.markup)


Chunker = Callable[[str], list[Chunk]]


def escape_html(text: str) -> str:
    """Escape text for parse_mode=HTML (quotes are left alone)."""
    return html.escape(text, quote=False)


def escape_markdown_v2(text: str) -> str:
    """Escape every MarkdownV2 reserved character."""
    return _MDV2_SPECIAL.sub(r"\\\1", text)


_RENDERERS: dict[str, Callable[[str], str]] = {
    "HTML": escape_html,
    "MarkdownV2": escape_markdown_v2,
}


def chunk_telegram_text(
    text: str,
    max_len: int = TG_MAX_LEN,
    parse_mode: ParseMode = "HTML",
) -> list[Chunk]:
    """Split text into chunks whose markup fits in max_len characters.

    Returns an empty list for blank input.
    """
    if max_len < MIN_CHUNK_LEN:
        raise ValueError(f"max_len must be >= {MIN_CHUNK_LEN}, got {max_len}")
    render = _RENDERERS[parse_mode]

    rest = (text or "").strip()
    chunks: list[Chunk] = []
    while rest:
        markup = render(rest)
        if len(markup) <= max_len:
            chunks.append(Chunk(text=rest, markup=markup))
            break

        cut = _find_cut(rest, _fit(rest, max_len, render))
        piece = rest[:cut].rstrip()
        if piece:
            chunks.append(Chunk(text=piece, markup=render(piece)))
        rest = rest[cut:].lstrip()
    return chunks


def make_chunker(max_len: int = TG_MAX_LEN, parse_mode: ParseMode = "HTML") -> Chunker:
    """Bind limits into a one-argument chunker for DraftStreamer."""
    if max_len < MIN_CHUNK_LEN:
        raise ValueError(f"max_len must be >= {MIN_CHUNK_LEN}, got {max_len}")
    return partial(chunk_telegram_text, max_len=max_len, parse_mode=parse_mode)


def _fit(text: str, max_len: int, render: Callable[[str], str]) -> int:
    """Longest prefix length whose rendered markup fits in max_len.

    Escaping only ever grows text, so rendered length is monotonic in the
    prefix length and a binary search applies.
    """
    lo, hi = 1, min(len(text), max_len)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if len(render(text[:mid])) <= max_len:
            lo = mid
        else:
            hi = mid - 1
    return lo


def _find_cut(text: str, limit: int) -> int:
    """Pick a natural break inside text[:limit], else cut hard at limit."""
    window = text[:limit]
    floor = limit // 2

    para = window.rfind("\n\n")
    if para >= floor:
        return para + 2

    line = window.rfind("\n")
    if line >= floor:
        return line + 1

    sentence_end = -1
    for match in _SENTENCE_END.finditer(window):
        sentence_end = match.end()
    if sentence_end >= floor:
        return sentence_end

    space = max(window.rfind(" "), window.rfind("\t"))
    if space >= floor:
        return space + 1

    return limit
