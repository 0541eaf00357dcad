"""chat.response

Decoding targets for one streamed chat completion frame.

Each frame carries only the *incremental* text for each choice; callers
concatenate ``text(0)`` across frames to rebuild the full answer (see
:func:`cordyceps.transport.decoding.collect_text`).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cordyceps.core.exceptions import FrameDecodeError
from cordyceps.core.types import FinishReason, Model, Role


class Delta(BaseModel):
    """Incremental fragment contributed by one frame.

    The first frame of a stream usually only announces the ``role`` and the
    last one is empty, so ``content`` defaults to an empty string.
    """

    content: str = ''
    role: Role | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator('role', mode='before')
    @classmethod
    def _decode_role(cls, v: object) -> Role | None:
        return None if v is None else Role.decode(v)


class Choice(BaseModel):
    delta: Delta
    index: int
    finish_reason: FinishReason | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator('finish_reason', mode='before')
    @classmethod
    def _decode_finish_reason(cls, v: object) -> FinishReason | None:
        return None if v is None else FinishReason.decode(v)


class Response(BaseModel):
    """One decoded unit of the stream."""

    id: str
    object: str
    created: int
    model: Model
    choices: tuple[Choice, ...]

    model_config = ConfigDict(frozen=True)

    @field_validator('model', mode='before')
    @classmethod
    def _decode_model(cls, v: object) -> Model:
        return Model.decode(v)

    @classmethod
    def from_chunk(cls, data: bytes | str) -> Response:
        """Decode a stripped chunk.

        Raises
        ------
        FrameDecodeError
            For empty chunks, keep-alives, the ``[DONE]`` sentinel, split
            frames and anything else that is not a well-formed frame.

        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise FrameDecodeError(f'Chunk is not a response frame: {data[:64]!r}') from exc

    def text(self, n: int) -> str | None:
        """Return the delta content of the *n*-th choice, or None if absent."""
        if 0 <= n < len(self.choices):
            return self.choices[n].delta.content
        return None
