"""registry.endpoint_registry

Global registry that maps payload classes (e.g. the chat ``Payload``) to the
one endpoint URL they are sent to.

Endpoint modules register themselves at import time, which lets
``Client.for_payload`` build a correctly-bound client from the payload type
alone. The registry only imports pydantic so any module can depend on it
without import cycles.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from pydantic import BaseModel

from cordyceps.core.exceptions import EndpointNotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping


class _ThreadSafeSingleton(type):
    """Metaclass ensuring a single registry instance across threads."""

    _instance: EndpointRegistry | None = None
    _lock = threading.Lock()

    def __call__(cls, *args: object, **kwargs: object) -> EndpointRegistry:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class EndpointRegistry(metaclass=_ThreadSafeSingleton):
    """Centralised payload type → endpoint URL mapping.

    Usage (typically at the bottom of an endpoint module):

    ```python
    from cordyceps.registry.endpoint_registry import endpoint_registry

    endpoint_registry.register(Payload, API_URL)
    ```
    """

    _registry: MutableMapping[type[BaseModel], str]

    def __init__(self) -> None:  # pragma: no cover - called once via singleton
        self._registry = {}

    def register(self, payload_cls: type[BaseModel], url: str) -> None:
        """Register *url* as the endpoint for *payload_cls*.

        Registering the same class again replaces its URL.
        """
        if not (isinstance(payload_cls, type) and issubclass(payload_cls, BaseModel)):
            raise TypeError('payload_cls must subclass pydantic.BaseModel')
        self._registry[payload_cls] = url

    def get_endpoint(self, payload_cls: type[BaseModel]) -> str:
        """Return the URL registered for *payload_cls*.

        Raises
        ------
        EndpointNotFoundError
            If *payload_cls* hasn't been registered.

        """
        try:
            return self._registry[payload_cls]
        except KeyError as exc:
            raise EndpointNotFoundError(f'No endpoint registered for {payload_cls.__name__}') from exc

    def available_payloads(self) -> list[type[BaseModel]]:
        return sorted(self._registry, key=lambda cls: cls.__qualname__)

    def mapping(self) -> Mapping[type[BaseModel], str]:
        """Return a read-only copy of the registry mapping."""
        return dict(self._registry)


# Re-export a module-level instance for ergonomic usage
endpoint_registry: EndpointRegistry = EndpointRegistry()
