"""transport.decoding

Caller-side helpers that turn a chunk stream into response frames.

The transport never interprets chunk contents. These helpers implement the
usual consumer policy instead: frames that fail to decode (empty chunks,
keep-alives, the ``[DONE]`` sentinel, events split across chunks) are
skipped, while a transport error is raised to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cordyceps.chat.response import Response
from cordyceps.core.exceptions import FrameDecodeError

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator

    from cordyceps.transport.stream import Chunk

logger = logging.getLogger(__name__)


async def iter_responses(chunks: AsyncIterable[Chunk]) -> AsyncIterator[Response]:
    """Yield a `Response` for every chunk that decodes as one.

    Raises
    ------
    TransportError
        When an error item is reached.

    """
    async for chunk in chunks:
        data = chunk.unwrap()
        try:
            response = Response.from_chunk(data)
        except FrameDecodeError as exc:
            logger.debug('Skipping chunk: %s', exc)
            continue
        yield response


async def collect_text(chunks: AsyncIterable[Chunk], index: int = 0) -> str:
    """Concatenate the *index*-th choice's deltas across the whole stream."""
    parts: list[str] = []
    async for response in iter_responses(chunks):
        if (text := response.text(index)) is not None:
            parts.append(text)
    return ''.join(parts)
