from __future__ import annotations

import pytest
from pydantic import ValidationError

from cordyceps.chat.payload import API_URL, DEFAULT_USER, Payload, PayloadBuilder
from cordyceps.core.exceptions import MissingFieldError, PayloadValidationError
from cordyceps.core.types import Message, Model, Role
from cordyceps.registry.endpoint_registry import endpoint_registry


def test_default_payload() -> None:
    payload = Payload.builder().user_message('x').build()

    assert payload.model is Model.gpt_35_turbo
    assert payload.temperature == 1.0
    assert payload.top_p == 1.0
    assert payload.n == 1
    assert payload.stream is True
    assert payload.stop is None
    assert payload.max_tokens == 1024
    assert payload.presence_penalty == 0.0
    assert payload.frequency_penalty == 0.0
    assert payload.logit_bias == {}
    assert payload.user == DEFAULT_USER
    assert list(payload.messages) == [Message(role=Role.user, content='x')]


def test_build_without_messages_fails() -> None:
    builder = PayloadBuilder().temperature(0.5).model(Model.gpt_4)
    with pytest.raises(MissingFieldError, match='messages are not set') as info:
        builder.build()
    assert isinstance(info.value, PayloadValidationError)


@pytest.mark.parametrize('add', ['user_message', 'system_message', 'assistant_message'])
def test_any_role_satisfies_build(add: str) -> None:
    builder = getattr(PayloadBuilder(), add)('hello')
    assert len(builder.build().messages) == 1


def test_message_order_is_preserved() -> None:
    payload = Payload.builder().system_message('a').user_message('b').assistant_message('c').build()
    assert [(m.role, m.content) for m in payload.messages] == [
        (Role.system, 'a'),
        (Role.user, 'b'),
        (Role.assistant, 'c'),
    ]


def test_messages_and_message_append() -> None:
    history = [Message.system('rules'), Message.user('q1'), Message.assistant('a1')]
    payload = Payload.builder().messages(history).message(Message.user('q2')).build()
    assert payload.messages == (*history, Message.user('q2'))


def test_setters_are_chainable_and_verbatim() -> None:
    builder = PayloadBuilder()
    assert builder.n(3) is builder

    payload = (
        builder.model(Model.gpt_4_32k)
        .user_message('hi')
        .temperature(1.7)
        .top_p(0.25)
        .n(-2)
        .stream(False)
        .stop('\n\n')
        .max_tokens(7)
        .presence_penalty(-1.5)
        .frequency_penalty(2.5)
        .logit_bias({'50256': -100.0})
        .user('tester')
        .build()
    )

    assert payload.model is Model.gpt_4_32k
    assert payload.temperature == 1.7
    assert payload.top_p == 0.25
    assert payload.n == -2  # staging does no range checks
    assert payload.stream is False
    assert payload.stop == '\n\n'
    assert payload.max_tokens == 7
    assert payload.presence_penalty == -1.5
    assert payload.frequency_penalty == 2.5
    assert payload.logit_bias == {'50256': -100.0}
    assert payload.user == 'tester'


def test_built_payload_is_detached_from_builder() -> None:
    builder = PayloadBuilder().user_message('first')
    payload = builder.build()
    builder.user_message('second')
    assert len(payload.messages) == 1


def test_payload_is_frozen() -> None:
    payload = Payload.builder().user_message('x').build()
    with pytest.raises(ValidationError):
        payload.temperature = 0.0  # type: ignore[misc]


def test_wire_format() -> None:
    payload = Payload.builder().system_message('s').user_message('u').model(Model.gpt_4).build()
    assert payload.to_json() == {
        'model': 'gpt-4',
        'messages': [
            {'role': 'system', 'content': 's'},
            {'role': 'user', 'content': 'u'},
        ],
        'temperature': 1.0,
        'top_p': 1.0,
        'n': 1,
        'stream': True,
        'stop': None,
        'max_tokens': 1024,
        'presence_penalty': 0.0,
        'frequency_penalty': 0.0,
        'logit_bias': {},
        'user': DEFAULT_USER,
    }


def test_unknown_model_string_is_rejected() -> None:
    data = Payload.builder().user_message('x').build().to_json()
    data['model'] = 'davinci'
    with pytest.raises(ValidationError, match='not a valid Model'):
        Payload.model_validate(data)


def test_payload_endpoint_is_registered() -> None:
    assert endpoint_registry.get_endpoint(Payload) == API_URL


def test_logit_bias_is_read_only() -> None:
    payload = Payload.builder().user_message('x').build()

    with pytest.raises(TypeError):
        payload.logit_bias['50256'] = -100.0  # type: ignore[index]

    assert payload.logit_bias == {}
    assert payload.to_json()['logit_bias'] == {}


def test_logit_bias_is_detached_from_caller_mapping() -> None:
    bias = {'50256': -100.0}
    payload = Payload.builder().user_message('x').logit_bias(bias).build()

    bias['50256'] = 5.0

    assert payload.logit_bias == {'50256': -100.0}
    assert payload.to_json()['logit_bias'] == {'50256': -100.0}
