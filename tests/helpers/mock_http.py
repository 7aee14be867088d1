# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""aiohttp session mocks.

``make_session`` returns a MagicMock whose ``request``/``get`` calls behave
like aiohttp's async-context-manager responses. Each item of ``responses``
is consumed by one call: a MagicMock response, or an exception to raise.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from unittest.mock import AsyncMock, MagicMock


def make_response(status: int = 200, body: object = None) -> MagicMock:
    """Create a mock aiohttp response with a JSON, text or raw bytes body.

    Raw bytes are decoded like aiohttp does: ``json()`` decodes strictly and
    ``text(errors=...)`` honours the requested error handler.
    """
    response = MagicMock()
    response.status = status
    if isinstance(body, bytes):
        raw = body

        async def _json(**kwargs: object) -> object:
            return json.loads(raw.decode("utf-8"))

        async def _text(encoding: str | None = None, errors: str = "strict") -> str:
            return raw.decode(encoding or "utf-8", errors=errors)

        response.json = AsyncMock(side_effect=_json)
        response.text = AsyncMock(side_effect=_text)
    elif isinstance(body, str):
        response.json = AsyncMock(side_effect=json.JSONDecodeError("x", body, 0))
        response.text = AsyncMock(return_value=body)
    else:
        response.json = AsyncMock(return_value=body)
        response.text = AsyncMock(return_value=json.dumps(body))
    return response


def _context_for(item: object) -> MagicMock:
    context = MagicMock()
    if isinstance(item, BaseException):
        context.__aenter__ = AsyncMock(side_effect=item)
    else:
        context.__aenter__ = AsyncMock(return_value=item)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


def make_session(responses: Sequence[object]) -> MagicMock:
    """Create a mock ClientSession serving ``responses`` in order."""
    session = MagicMock()
    session.closed = False
    contexts = [_context_for(item) for item in responses]
    session.request = MagicMock(side_effect=contexts)
    session.get = MagicMock(side_effect=[_context_for(item) for item in responses])
    session.close = AsyncMock()
    return session
