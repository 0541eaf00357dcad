"""core.abc

Interface shared by every streaming client.

Design goals
============
1. **Payload-typed** - a client is parameterised by the pydantic model it
   sends, and each payload type maps to exactly one fixed endpoint.
2. **One exchange per call** - `send()` performs a single POST and hands back
   a one-shot stream; nothing is retried, cached or shared between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from cordyceps.transport.stream import ChunkStream, EventStream

P = TypeVar('P', bound=BaseModel)


class AbstractStreamClient(ABC, Generic[P]):
    """Payload-typed streaming client interface."""

    @property
    @abstractmethod
    def api_url(self) -> str:
        """Endpoint every payload of this client is POSTed to."""

    @abstractmethod
    async def send(self, payload: P) -> ChunkStream:
        """POST *payload* and return the body as prefix-stripped chunks."""

    @abstractmethod
    async def send_events(self, payload: P) -> EventStream:
        """POST *payload* and return the body re-segmented into whole events."""

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__} url={self.api_url!r}>'
