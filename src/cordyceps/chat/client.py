"""chat.client

Convenience facade binding the generic transport to chat `Payload` and the
chat completions endpoint.

Typical use::

    client = ChatClient(api_key)
    async with await client.send(payload) as chunks:
        async for response in iter_responses(chunks):
            print(response.text(0), end='')
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cordyceps.chat.payload import API_URL, Payload
from cordyceps.core.abc import AbstractStreamClient
from cordyceps.core.settings import DEFAULT_API_KEY_VAR, load_api_key
from cordyceps.transport.client import Client

if TYPE_CHECKING:
    import httpx

    from cordyceps.transport.stream import ChunkStream, EventStream


class ChatClient(AbstractStreamClient[Payload]):
    """A `Client` fixed to chat payloads; adds no behaviour of its own."""

    def __init__(self, api_key: str, *, http_client: httpx.AsyncClient | None = None) -> None:
        self._client: Client[Payload] = Client(api_key, API_URL, http_client=http_client)

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_API_KEY_VAR, *, http_client: httpx.AsyncClient | None = None) -> ChatClient:
        """Build a client from ``$OPENAI_API_KEY`` (or ``.env``)."""
        return cls(load_api_key(env_var), http_client=http_client)

    @property
    def api_url(self) -> str:
        return self._client.api_url

    async def send(self, payload: Payload) -> ChunkStream:
        return await self._client.send(payload)

    async def send_events(self, payload: Payload) -> EventStream:
        return await self._client.send_events(payload)
