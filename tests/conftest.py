"""Shared fixtures: an in-memory chat transport."""

from __future__ import annotations

import itertools
from unittest.mock import AsyncMock, MagicMock

import pytest

from draftstream.transport import MessageHandle


def make_transport(first_id: int = 100) -> MagicMock:
    """Mock ChatTransport handing out sequential message ids.

    create_message / edit_message are AsyncMocks, so tests can inspect
    calls or swap in side effects (failures, blocking edits).
    """
    ids = itertools.count(first_id)
    transport = MagicMock()

    async def create(chat_id, text, options=None):
        return MessageHandle(next(ids), text, 1700000000)

    async def edit(chat_id, message_id, text, options=None):
        return MessageHandle(message_id, text, 1700000000)

    transport.create_message = AsyncMock(side_effect=create)
    transport.edit_message = AsyncMock(side_effect=edit)
    return transport


@pytest.fixture
def transport() -> MagicMock:
    return make_transport()
