from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from cordyceps.core.exceptions import TransportError
from cordyceps.transport.decoding import collect_text, iter_responses
from cordyceps.transport.stream import Chunk

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


def _frame(*contents: str, finish_reason: str | None = None) -> bytes:
    return json.dumps(
        {
            'id': 'chatcmpl-1',
            'object': 'chat.completion.chunk',
            'created': 1,
            'model': 'gpt-3.5-turbo-0301',
            'choices': [
                {'delta': {'content': c}, 'index': i, 'finish_reason': finish_reason}
                for i, c in enumerate(contents)
            ],
        },
    ).encode()


async def _chunks(*items: bytes | TransportError) -> AsyncIterator[Chunk]:
    for item in items:
        if isinstance(item, TransportError):
            yield Chunk(error=item)
        else:
            yield Chunk(data=item)


@pytest.mark.asyncio
async def test_iter_responses_skips_noise() -> None:
    responses = [
        r
        async for r in iter_responses(
            _chunks(_frame('Hel'), b'', b'{"id": "chatcmpl-1", "obj', _frame('lo'), b'[DONE]\n\n'),
        )
    ]
    assert [r.text(0) for r in responses] == ['Hel', 'lo']


@pytest.mark.asyncio
async def test_iter_responses_raises_transport_errors() -> None:
    seen = []
    with pytest.raises(TransportError, match='reset'):
        async for response in iter_responses(_chunks(_frame('a'), TransportError('reset'), _frame('b'))):
            seen.append(response.text(0))
    assert seen == ['a']


@pytest.mark.asyncio
async def test_collect_text_rebuilds_answer() -> None:
    chunks = _chunks(_frame(''), _frame('Hello'), _frame(','), _frame(' world'), _frame('', finish_reason='stop'))
    assert await collect_text(chunks) == 'Hello, world'


@pytest.mark.asyncio
async def test_collect_text_other_candidate() -> None:
    chunks = _chunks(_frame('a', 'x'), _frame('b'), _frame('c', 'y'))
    assert await collect_text(chunks, index=1) == 'xy'
