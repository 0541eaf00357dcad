"""transport.stream

Lazy, single-pass views over one streamed HTTP response.

Both stream types are async iterators of :class:`Chunk` and async context
managers. The underlying connection is released when the body is exhausted,
after the (single) terminal error item, or as soon as the caller calls
:meth:`ChunkStream.aclose` / leaves the ``async with`` block.
"""

from __future__ import annotations

import logging
import warnings
from contextlib import aclosing
from typing import TYPE_CHECKING, Self

import httpx
from pydantic import BaseModel, ConfigDict

from cordyceps.core.exceptions import TransportError
from cordyceps.transport.framing import DONE_SENTINEL, EventStreamDecoder, strip_prefix

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import TracebackType

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Stream items
# ---------------------------------------------------------------------------


class Chunk(BaseModel):
    """One item of a response stream: either frame bytes or a transport error."""

    data: bytes = b''
    error: TransportError | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> bytes:
        """Return the bytes, or raise the carried `TransportError`."""
        if self.error is not None:
            raise self.error
        return self.data


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------


class ChunkStream:
    """Physical body chunks with the fixed framing marker stripped."""

    def __init__(self, response: httpx.Response, *, owned_client: httpx.AsyncClient | None = None) -> None:
        self._response = response
        self._owned_client = owned_client
        self._iterator = self._iterate()
        self._count = 0
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def closed(self) -> bool:
        return self._closed

    # --------------------------- Iteration ----------------------------

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> Chunk:
        return await self._iterator.__anext__()

    async def _frames(self) -> AsyncIterator[bytes]:
        async with aclosing(self._response.aiter_bytes()) as body:
            async for raw in body:
                yield strip_prefix(raw)

    async def _iterate(self) -> AsyncIterator[Chunk]:
        try:
            async with aclosing(self._frames()) as frames:
                async for data in frames:
                    self._count += 1
                    yield Chunk(data=data)
        except httpx.RequestError as exc:
            logger.warning('Stream from %s broke after %d chunks: %s', self._response.url, self._count, exc)
            error = TransportError(f'{type(exc).__name__}: {exc}')
            error.__cause__ = exc
            yield Chunk(error=error)
        finally:
            await self._release()

    # --------------------------- Lifecycle ----------------------------

    async def aclose(self) -> None:
        """Stop the stream and release the connection. Safe to call twice."""
        await self._iterator.aclose()
        await self._release()

    async def _release(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        if self._owned_client is not None:
            await self._owned_client.aclose()
        logger.debug('Closed stream from %s after %d chunks', self._response.url, self._count)

    def __del__(self) -> None:
        if not getattr(self, '_closed', True):
            warnings.warn(
                f'Unclosed {type(self).__name__} from {self._response.url}; call aclose() or use async with',
                ResourceWarning,
                stacklevel=2,
            )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class EventStream(ChunkStream):
    """Complete ``data`` events, independent of physical chunk boundaries.

    Ends at the ``[DONE]`` sentinel or when the connection closes.
    """

    async def _frames(self) -> AsyncIterator[bytes]:
        decoder = EventStreamDecoder()
        async with aclosing(self._response.aiter_bytes()) as body:
            async for raw in body:
                for event in decoder.feed(raw):
                    if event == DONE_SENTINEL:
                        return
                    yield event
        for event in decoder.flush():
            if event == DONE_SENTINEL:
                return
            yield event
