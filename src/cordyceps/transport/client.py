"""transport.client

Generic HTTP client for POSTing JSON payloads to a streaming endpoint.

``Client[P]`` knows nothing about any particular payload schema: it
serialises whatever pydantic model it is given, attaches the bearer
credential, and exposes the response body as a lazy async stream.
"""

from __future__ import annotations

import logging

import httpx

from cordyceps.core.abc import AbstractStreamClient, P
from cordyceps.core.exceptions import RequestFailedError, TransportError
from cordyceps.registry.endpoint_registry import endpoint_registry
from cordyceps.transport.stream import ChunkStream, EventStream

logger = logging.getLogger(__name__)

#: Only this much of an error body is kept on `RequestFailedError`.
MAX_ERROR_BODY = 2048


class Client(AbstractStreamClient[P]):
    """Sends payloads of one type to one fixed endpoint.

    Parameters
    ----------
    api_key
        Bearer credential, sent as ``Authorization: Bearer <api_key>``.
    api_url
        Endpoint URL for this payload type.
    http_client
        Optional pre-configured ``httpx.AsyncClient`` (proxies, timeouts,
        test transports, ...). It is borrowed, never closed by this class.
        Without one, every call opens and closes its own client and no
        timeout is applied.

    """

    def __init__(self, api_key: str, api_url: str, *, http_client: httpx.AsyncClient | None = None) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._http_client = http_client

    @classmethod
    def for_payload(
        cls,
        payload_cls: type[P],
        api_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> Client[P]:
        """Build a client for *payload_cls* using its registered endpoint."""
        return cls(api_key, endpoint_registry.get_endpoint(payload_cls), http_client=http_client)

    @property
    def api_url(self) -> str:
        return self._api_url

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def send(self, payload: P) -> ChunkStream:
        """Send *payload* and return the response body as a chunk stream.

        Each successful item has the 6-byte framing marker removed. A
        connection error while streaming arrives as one error item, after
        which the stream ends.

        Raises
        ------
        RequestFailedError
            If the status code is not 2xx. No chunk is produced.
        TransportError
            If the connection fails before a response arrives.

        """
        response, owned_client = await self._open(payload)
        return ChunkStream(response, owned_client=owned_client)

    async def send_events(self, payload: P) -> EventStream:
        """Like :meth:`send` but yields whole ``data`` events regardless of chunking."""
        response, owned_client = await self._open(payload)
        return EventStream(response, owned_client=owned_client)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _open(self, payload: P) -> tuple[httpx.Response, httpx.AsyncClient | None]:
        if self._http_client is not None:
            return await self._request(self._http_client, payload), None

        owned_client = httpx.AsyncClient(timeout=None)
        try:
            response = await self._request(owned_client, payload)
        except BaseException:
            # Cancellation and unexpected errors must not leak the client.
            await owned_client.aclose()
            raise
        return response, owned_client

    async def _request(self, client: httpx.AsyncClient, payload: P) -> httpx.Response:
        request = client.build_request(
            'POST',
            self._api_url,
            json=payload.model_dump(mode='json'),
            headers={'Authorization': f'Bearer {self._api_key}'},
        )
        logger.debug('POST %s (%s)', self._api_url, type(payload).__name__)

        try:
            response = await client.send(request, stream=True)
        except httpx.RequestError as exc:
            logger.warning('Request to %s failed: %s', self._api_url, exc)
            raise TransportError(f'{type(exc).__name__}: {exc}') from exc

        logger.debug('Response from %s: %d', self._api_url, response.status_code)
        if not response.is_success:
            try:
                body = await self._read_error_body(response)
            finally:
                await response.aclose()
            logger.warning('Request to %s failed with status code %d', self._api_url, response.status_code)
            raise RequestFailedError(response.status_code, body)

        return response

    @staticmethod
    async def _read_error_body(response: httpx.Response) -> str:
        try:
            await response.aread()
        except httpx.RequestError as exc:
            logger.debug('Could not read error body: %s', exc)
            return ''
        return response.text[:MAX_ERROR_BODY]
