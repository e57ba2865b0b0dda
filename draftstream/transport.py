"""Chat transport interface and the Telegram Bot API client behind it.

DraftStreamer only needs two calls: create a message and edit a message.
TelegramTransport implements both over httpx.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from draftstream.errors import TelegramAPIError

if TYPE_CHECKING:
    from draftstream.config import Settings

logger = logging.getLogger(__name__)

# Telegram Bot API base
TG_API = "{base}/bot{token}/{method}"

# Telegram's description for an edit whose content equals the current one
NOT_MODIFIED = "message is not modified"


@dataclass
class MessageHandle:
    """A message as the chat currently shows it."""

    message_id: int
    text: str = ""
    date: int | None = None

    @classmethod
    def from_result(
        cls,
        result: Any,
        method: str = "sendMessage",
        fallback: MessageHandle | None = None,
    ) -> MessageHandle:
        """Build a handle from a Telegram Message object.

        editMessageText answers ``true`` instead of a Message for some
        messages; the fallback handle is returned for those.
        """
        if isinstance(result, dict) and "message_id" in result:
            return cls(
                message_id=result["message_id"],
                text=result.get("text", ""),
                date=result.get("date"),
            )
        if fallback is not None:
            return fallback
        raise TelegramAPIError(method, None, f"unexpected result: {result!r}")


class ChatTransport(Protocol):
    """Create and edit messages in a chat."""

    async def create_message(
        self,
        chat_id: int | str,
        text: str,
        options: dict[str, Any] | None = None,
    ) -> MessageHandle: ...

    async def edit_message(
        self,
        chat_id: int | str,
        message_id: int,
        text: str,
        options: dict[str, Any] | None = None,
    ) -> MessageHandle: ...


def is_not_modified(error: BaseException) -> bool:
    """True for the benign 'message is not modified' edit rejection."""
    return NOT_MODIFIED in str(error)


class TelegramTransport:
    """ChatTransport over the Telegram Bot API."""

    def __init__(
        self,
        bot_token: str,
        api_base: str = "https://api.telegram.org",
        http: httpx.AsyncClient | None = None,
        timeout_connect: float = 10,
        timeout_read: float = 30,
    ):
        self.bot_token = bot_token
        self.api_base = api_base.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=httpx.Timeout(connect=timeout_connect, read=timeout_read, write=10, pool=10)
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> TelegramTransport:
        return cls(
            settings.telegram_bot_token,
            api_base=settings.telegram_api_base,
            timeout_connect=settings.api_timeout_connect,
            timeout_read=settings.api_timeout_read,
        )

    async def create_message(
        self,
        chat_id: int | str,
        text: str,
        options: dict[str, Any] | None = None,
    ) -> MessageHandle:
        """sendMessage; returns the handle of the new message."""
        params: dict[str, Any] = {"chat_id": chat_id, "text": text, **(options or {})}
        result = await self._tg("sendMessage", params)
        return MessageHandle.from_result(result, "sendMessage")

    async def edit_message(
        self,
        chat_id: int | str,
        message_id: int,
        text: str,
        options: dict[str, Any] | None = None,
    ) -> MessageHandle:
        """editMessageText; returns the handle of the edited message."""
        params: dict[str, Any] = {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
            **(options or {}),
        }
        result = await self._tg("editMessageText", params)
        return MessageHandle.from_result(
            result, "editMessageText", fallback=MessageHandle(message_id, text)
        )

    async def _tg(self, method: str, params: dict[str, Any]) -> Any:
        """Call Telegram Bot API, raising TelegramAPIError on ok=false."""
        url = TG_API.format(base=self.api_base, token=self.bot_token, method=method)
        payload = {k: v for k, v in params.items() if v is not None}
        response = await self._http.post(url, json=payload)
        try:
            data = response.json()
        except ValueError:
            logger.warning("Telegram %s returned non-JSON (HTTP %s)", method, response.status_code)
            raise TelegramAPIError(
                method, response.status_code, f"non-JSON response: {response.text[:200]}"
            ) from None
        if not data.get("ok"):
            description = data.get("description", "Unknown error")
            if NOT_MODIFIED in description:
                logger.debug("Telegram %s: %s", method, description)
            else:
                logger.warning("Telegram API error on %s: %s", method, data)
            raise TelegramAPIError(method, data.get("error_code"), description)
        return data.get("result")

    async def close(self) -> None:
        """Close the httpx client if this transport created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> TelegramTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
