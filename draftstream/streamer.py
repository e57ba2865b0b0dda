"""Live draft message that follows a growing text.

A DraftStreamer owns one chat message (the draft) and keeps it in step with
the latest snapshot of a streamed response:

- update() only records the snapshot and arms a single trailing-edge timer,
  so bursts of snapshots collapse into at most one edit per edit_interval.
- The timer renders whatever text is current when it fires (latest wins).
- Non-final renders append a cursor that blinks once per flush.
- finalize() writes the first chunk into the draft and sends the remaining
  chunks as new messages, in order.

Usage:
    streamer = DraftStreamer(transport, chat_id)
    async for snapshot in producer:
        streamer.update(snapshot)
    messages = await streamer.finalize(full_text)
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from enum import StrEnum
from typing import Any, Callable

from draftstream.chunking import Chunk, Chunker, ParseMode, make_chunker
from draftstream.config import Settings
from draftstream.transport import ChatTransport, MessageHandle, is_not_modified

logger = logging.getLogger(__name__)

# Telegram tolerates roughly one edit per message every couple of seconds
DEFAULT_EDIT_INTERVAL = 2.0
STREAMING_CURSOR = "▌"


class DraftState(StrEnum):
    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    STOPPED = "stopped"


class DraftStreamer:
    """Progressively edits one chat message while a response streams in."""

    def __init__(
        self,
        transport: ChatTransport,
        chat_id: int | str,
        *,
        reply_to_message_id: int | None = None,
        edit_interval: float = DEFAULT_EDIT_INTERVAL,
        cursor: str = STREAMING_CURSOR,
        initial_text: str | None = None,
        parse_mode: ParseMode = "HTML",
        chunker: Chunker | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._transport = transport
        self.chat_id = chat_id
        self.reply_to_message_id = reply_to_message_id
        self.edit_interval = edit_interval
        self.cursor = cursor
        self.initial_text = initial_text or cursor
        self.parse_mode = parse_mode
        self._chunker = chunker or make_chunker(parse_mode=parse_mode)
        self._clock = clock

        self._draft: MessageHandle | None = None
        self._latest_text = ""
        self._last_rendered = ""
        self._last_flush_at: float | None = None
        self._blink_on = True
        # Bumped per update(); a flush remembers which generation it rendered
        self._generation = 0
        self._rendered_generation = 0

        self._timer: asyncio.TimerHandle | None = None
        self._flush_task: asyncio.Task | None = None
        self._lock = asyncio.Lock()
        self._finalizing = False
        self._stopped = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: ChatTransport,
        chat_id: int | str,
        reply_to_message_id: int | None = None,
    ) -> DraftStreamer:
        """Build a streamer configured from Settings."""
        return cls(
            transport,
            chat_id,
            reply_to_message_id=reply_to_message_id,
            edit_interval=settings.edit_interval,
            cursor=settings.cursor,
            initial_text=settings.draft_placeholder,
            parse_mode=settings.parse_mode,
            chunker=make_chunker(settings.max_message_length, settings.parse_mode),
        )

    @property
    def state(self) -> DraftState:
        if self._stopped:
            return DraftState.STOPPED
        if self._finalizing:
            return DraftState.FINALIZING
        if self._draft is None:
            return DraftState.IDLE
        return DraftState.STREAMING

    @property
    def draft_message_id(self) -> int | None:
        return self._draft.message_id if self._draft else None

    @property
    def latest_text(self) -> str:
        return self._latest_text

    def update(self, text: str) -> None:
        """Record the newest snapshot and arm the flush timer if idle."""
        if self._stopped or self._finalizing:
            return
        self._latest_text = text
        self._generation += 1
        self._schedule_flush()

    async def flush(self) -> None:
        """Render and transmit the current snapshot now."""
        if self._stopped:
            return
        async with self._lock:
            await self._flush_locked(final=False)

    async def finalize(
        self,
        final_text: str,
        extra: dict[str, Any] | None = None,
    ) -> list[MessageHandle]:
        """Publish final_text, splitting it across messages when too long.

        The draft receives the first chunk without cursor; every further
        chunk is sent as a new message, one after another. Errors while
        sending those trailing messages propagate to the caller.

        Returns the resulting messages in chat order.
        """
        if self._stopped or self._finalizing:
            return []

        self._finalizing = True
        self._cancel_timer()
        self._latest_text = final_text
        self._generation += 1

        try:
            chunks = self._chunker(final_text)
            if not chunks:
                return []

            # Waits out any flush still talking to the transport
            async with self._lock:
                await self._ensure_draft_message()
                await self._flush_locked(final=True, chunk=chunks[0], extra=extra)

                sent: list[MessageHandle] = []
                if self._draft is not None:
                    self._draft = replace(self._draft, text=chunks[0].text)
                    sent.append(self._draft)

                for chunk in chunks[1:]:
                    continuation = await self._transport.create_message(
                        self.chat_id,
                        chunk.markup,
                        {"parse_mode": self.parse_mode},
                    )
                    sent.append(continuation)

                logger.debug(
                    "Finalized draft %s in chat %s as %d message(s)",
                    self.draft_message_id, self.chat_id, len(sent),
                )
                return sent
        finally:
            self.stop()

    def stop(self) -> None:
        """Abandon the stream. No transport calls are made afterwards."""
        self._stopped = True
        self._cancel_timer()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _schedule_flush(self) -> None:
        # A running flush re-arms the timer itself when it finishes
        if self._timer is not None or self._flush_task is not None or self._stopped:
            return

        wait = 0.0
        if self._last_flush_at is not None:
            elapsed = self._clock() - self._last_flush_at
            wait = max(self.edit_interval - elapsed, 0.0)

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(wait, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if self._stopped or self._finalizing:
            return
        self._flush_task = asyncio.create_task(
            self._scheduled_flush(), name=f"draft-flush-{self.chat_id}"
        )

    async def _scheduled_flush(self) -> None:
        try:
            async with self._lock:
                await self._flush_locked(final=False)
        finally:
            self._flush_task = None
        if not (self._stopped or self._finalizing) and self._generation != self._rendered_generation:
            self._schedule_flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # ------------------------------------------------------------------
    # Transmission
    # ------------------------------------------------------------------

    async def _ensure_draft_message(self) -> None:
        if self._draft is not None:
            return

        options: dict[str, Any] = {"parse_mode": self.parse_mode}
        if self.reply_to_message_id is not None:
            options["reply_parameters"] = {"message_id": self.reply_to_message_id}

        self._draft = await self._transport.create_message(
            self.chat_id, self.initial_text, options
        )
        logger.debug("Created draft %s in chat %s", self._draft.message_id, self.chat_id)

    async def _flush_locked(
        self,
        final: bool,
        chunk: Chunk | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """One render/transmit cycle. Caller holds self._lock."""
        if self._stopped or (self._finalizing and not final):
            return

        if chunk is None:
            # A failed draft create below still consumes this snapshot
            self._rendered_generation = self._generation

        if not final:
            try:
                await self._ensure_draft_message()
            except Exception as e:
                logger.warning("Draft message create failed in chat %s: %s", self.chat_id, e)
                return

        if chunk is None:
            chunks = self._chunker(self._latest_text)
            if not chunks:
                return
            chunk = chunks[0]

        cursor = ""
        if not final:
            cursor = self.cursor if self._blink_on else ""
            self._blink_on = not self._blink_on

        rendered = f"{chunk.markup}{cursor}"
        if rendered == self._last_rendered:
            return

        options: dict[str, Any] = {"parse_mode": self.parse_mode, **(extra or {})}
        try:
            self._draft = await self._transport.edit_message(
                self.chat_id, self._draft.message_id, rendered, options
            )
        except Exception as e:
            if is_not_modified(e):
                return
            logger.warning("Draft edit failed in chat %s: %s", self.chat_id, e)
            if self._stopped:
                return
            try:
                self._draft = await self._transport.create_message(
                    self.chat_id, rendered, {"parse_mode": self.parse_mode}
                )
            except Exception as fallback_error:
                logger.warning("Draft fallback send failed in chat %s: %s", self.chat_id, fallback_error)
                return
            logger.debug("Draft moved to message %s", self._draft.message_id)

        self._last_rendered = rendered
        self._last_flush_at = self._clock()
