"""core.types

Shared enums and value objects used by every endpoint module.

Each enum is a *closed* set of wire identifiers: serialising yields the fixed
lower-case string, and decoding anything outside the set fails loudly with
:class:`~cordyceps.core.exceptions.EnumDecodeError` instead of defaulting.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator

from cordyceps.core.exceptions import EnumDecodeError

# ---------------------------------------------------------------------------
# String codec shared by the closed enums
# ---------------------------------------------------------------------------


class WireEnum(StrEnum):
    """StrEnum with an explicit, reject-unknown string codec."""

    def wire(self) -> str:
        """Wire identifier. ``str.encode`` is left untouched."""
        return self.value

    @classmethod
    def decode(cls, value: object) -> Self:
        """Return the member whose wire string is *value*.

        Raises
        ------
        EnumDecodeError
            If *value* is not one of the recognised identifiers.

        """
        try:
            return cls(value)
        except ValueError as exc:
            raise EnumDecodeError(cls.__name__, value) from exc


# ---------------------------------------------------------------------------
# Chat roles
# ---------------------------------------------------------------------------


class Role(WireEnum):
    """Author of a conversational turn.

    * ``system`` … assigns a behaviour to the assistant
    * ``user`` … instructs the assistant
    * ``assistant`` … stores previous responses
    """

    system = 'system'
    user = 'user'
    assistant = 'assistant'


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Model(WireEnum):
    """Backend model variants accepted by the chat completions endpoint."""

    gpt_35_turbo = 'gpt-3.5-turbo'
    gpt_35_turbo_0301 = 'gpt-3.5-turbo-0301'
    gpt_4 = 'gpt-4'
    gpt_4_0314 = 'gpt-4-0314'
    gpt_4_32k = 'gpt-4-32k'
    gpt_4_32k_0314 = 'gpt-4-32k-0314'

    @classmethod
    def baseline(cls) -> Model:
        return cls.gpt_35_turbo


# ---------------------------------------------------------------------------
# Finish reasons (decode-only)
# ---------------------------------------------------------------------------


class FinishReason(WireEnum):
    """Why a streamed choice ended. Only ever decoded, never sent."""

    length = 'length'
    stop = 'stop'


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """Single chat message."""

    role: Role
    content: str

    # Immutable value-object
    model_config = ConfigDict(frozen=True)

    @field_validator('role', mode='before')
    @classmethod
    def _decode_role(cls, v: object) -> Role:
        return Role.decode(v)

    # --------------------------- Constructors -------------------------

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=Role.system, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.user, content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(role=Role.assistant, content=content)
