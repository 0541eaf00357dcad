"""chat.payload

Request side of the chat completions endpoint.

`Payload` is the immutable description that goes over the wire; it is not
meant to be constructed by hand. `PayloadBuilder` stages configuration with
the documented defaults and validates exactly once, in :meth:`PayloadBuilder.build`.

Range checks on the sampling knobs (temperature, penalties, ...) are left to
the service, which rejects invalid payloads with a 4xx.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from cordyceps.core.exceptions import MissingFieldError
from cordyceps.core.types import Message, Model, Role
from cordyceps.registry.endpoint_registry import endpoint_registry

if TYPE_CHECKING:
    from collections.abc import Iterable

#: Fixed endpoint for every chat `Payload`.
API_URL = 'https://api.openai.com/v1/chat/completions'

DEFAULT_TEMPERATURE = 1.0
DEFAULT_TOP_P = 1.0
DEFAULT_N = 1
DEFAULT_MAX_TOKENS = 1024
DEFAULT_USER = 'Python Cordyceps Developer'


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


class Payload(BaseModel):
    """All of the data needed to complete a chat.

    Field meanings follow the chat completions API reference. Use
    :meth:`Payload.builder` rather than the constructor.
    """

    model: Model
    messages: tuple[Message, ...]
    temperature: float
    top_p: float
    n: int
    stream: bool
    stop: str | None
    max_tokens: int
    presence_penalty: float
    frequency_penalty: float
    logit_bias: Mapping[str, float]
    user: str

    model_config = ConfigDict(frozen=True)

    @field_validator('model', mode='before')
    @classmethod
    def _decode_model(cls, v: object) -> Model:
        return Model.decode(v)

    @field_validator('logit_bias', mode='after')
    @classmethod
    def _freeze_logit_bias(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        return MappingProxyType(dict(v))

    @field_serializer('logit_bias')
    def _dump_logit_bias(self, v: Mapping[str, float]) -> dict[str, float]:
        return dict(v)

    @classmethod
    def builder(cls) -> PayloadBuilder:
        return PayloadBuilder()

    def to_json(self) -> dict[str, Any]:
        """Wire representation: enums as strings, unset ``stop`` as null."""
        return self.model_dump(mode='json')


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class PayloadBuilder:
    """Mutable staging object for `Payload`.

    Every setter returns the builder so calls can be chained::

        payload = (
            Payload.builder()
            .system_message('Answer in haiku')
            .user_message('Tell me a joke')
            .temperature(0.2)
            .build()
        )

    The only required input is at least one message.
    """

    def __init__(self) -> None:
        self._model: Model = Model.baseline()
        self._messages: list[Message] = []
        self._temperature: float = DEFAULT_TEMPERATURE
        self._top_p: float = DEFAULT_TOP_P
        self._n: int = DEFAULT_N
        self._stream: bool = True
        self._stop: str | None = None
        self._max_tokens: int = DEFAULT_MAX_TOKENS
        self._presence_penalty: float = 0.0
        self._frequency_penalty: float = 0.0
        self._logit_bias: dict[str, float] = {}
        self._user: str = DEFAULT_USER

    # ------------------------------------------------------------------
    # Finalisation
    # ------------------------------------------------------------------

    def build(self) -> Payload:
        """Validate the staged state and return an immutable `Payload`.

        Raises
        ------
        MissingFieldError
            If no message has been added.

        """
        if not self._messages:
            raise MissingFieldError('messages')
        return Payload(
            model=self._model,
            messages=tuple(self._messages),
            temperature=self._temperature,
            top_p=self._top_p,
            n=self._n,
            stream=self._stream,
            stop=self._stop,
            max_tokens=self._max_tokens,
            presence_penalty=self._presence_penalty,
            frequency_penalty=self._frequency_penalty,
            logit_bias=dict(self._logit_bias),
            user=self._user,
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def messages(self, messages: Iterable[Message]) -> PayloadBuilder:
        """Append every message in *messages*, preserving order."""
        self._messages.extend(messages)
        return self

    def message(self, message: Message) -> PayloadBuilder:
        self._messages.append(message)
        return self

    def user_message(self, content: str) -> PayloadBuilder:
        return self.message(Message(role=Role.user, content=content))

    def system_message(self, content: str) -> PayloadBuilder:
        return self.message(Message(role=Role.system, content=content))

    def assistant_message(self, content: str) -> PayloadBuilder:
        return self.message(Message(role=Role.assistant, content=content))

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def model(self, model: Model) -> PayloadBuilder:
        self._model = model
        return self

    def temperature(self, temperature: float) -> PayloadBuilder:
        self._temperature = temperature
        return self

    def top_p(self, top_p: float) -> PayloadBuilder:
        self._top_p = top_p
        return self

    def n(self, n: int) -> PayloadBuilder:
        self._n = n
        return self

    def stream(self, stream: bool) -> PayloadBuilder:  # noqa: FBT001
        self._stream = stream
        return self

    def stop(self, stop: str) -> PayloadBuilder:
        self._stop = stop
        return self

    def max_tokens(self, max_tokens: int) -> PayloadBuilder:
        self._max_tokens = max_tokens
        return self

    def presence_penalty(self, presence_penalty: float) -> PayloadBuilder:
        self._presence_penalty = presence_penalty
        return self

    def frequency_penalty(self, frequency_penalty: float) -> PayloadBuilder:
        self._frequency_penalty = frequency_penalty
        return self

    def logit_bias(self, logit_bias: Mapping[str, float]) -> PayloadBuilder:
        self._logit_bias = dict(logit_bias)
        return self

    def user(self, user: str) -> PayloadBuilder:
        self._user = user
        return self

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__} model={self._model.value!r} messages={len(self._messages)}>'


# ---------------------------------------------------------------------------
# Automatic registration
# ---------------------------------------------------------------------------

endpoint_registry.register(Payload, API_URL)
