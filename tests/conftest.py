from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Sequence


async def _body(parts: Sequence[bytes | Exception]) -> AsyncIterator[bytes]:
    """Streamed body; an exception instance is raised when it is reached."""
    for part in parts:
        if isinstance(part, Exception):
            raise part
        yield part


@pytest.fixture
def seen_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_handler(seen_requests: list[httpx.Request]) -> Callable[..., Callable[[httpx.Request], httpx.Response]]:
    """Build a MockTransport handler replying with *parts* as separate body chunks."""

    def factory(parts: Sequence[bytes | Exception] = (), *, status: int = 200, body: bytes = b'') -> Callable:
        def handler(request: httpx.Request) -> httpx.Response:
            seen_requests.append(request)
            if parts:
                return httpx.Response(status, content=_body(parts))
            return httpx.Response(status, content=body)

        return handler

    return factory


@pytest.fixture
def make_http_client(make_handler: Callable) -> Callable[..., httpx.AsyncClient]:
    """Return an ``httpx.AsyncClient`` backed by a MockTransport."""

    def factory(parts: Sequence[bytes | Exception] = (), *, status: int = 200, body: bytes = b'') -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(make_handler(parts, status=status, body=body)))

    return factory
