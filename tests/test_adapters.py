from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest
from ollama import ResponseError

from conftest import run
from ojjson.adapters import MockAdapter, OllamaAdapter, OpenAIAdapter
from ojjson.exceptions import TransportError
from ojjson.schemas import ChatMessage

MESSAGES = [ChatMessage.user("prompt"), ChatMessage.user('{"introduction":"Bob"}')]


# ------------------------------------------------------------
# Fakes
# ------------------------------------------------------------

class FakeOllamaClient:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def chat(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


class FakeCompletions:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


def _openai_client(result):
    completions = FakeCompletions(result)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _completion(content, role="assistant"):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(role=role, content=content))])


# ------------------------------------------------------------
# Ollama
# ------------------------------------------------------------

def test_ollama_sends_json_mode_request():
    client = FakeOllamaClient({"message": {"role": "assistant", "content": '{"a":1}'}})
    adapter = OllamaAdapter("llama3.1", options={"temperature": 0}, client=client)

    reply = run(adapter.chat(MESSAGES))

    assert reply == ChatMessage.assistant('{"a":1}')
    (call,) = client.calls
    assert call["model"] == "llama3.1"
    assert call["format"] == "json"
    assert call["options"] == {"temperature": 0}
    assert call["messages"] == [m.to_json() for m in MESSAGES]


def test_ollama_recovers_raw_output_from_response_error():
    client = FakeOllamaClient(ResponseError("error parsing tool call: raw='no json here'", 500))

    reply = run(OllamaAdapter("llama3.1", client=client).chat(MESSAGES))

    assert reply.content == "no json here"


def test_ollama_response_error_becomes_transport_error():
    client = FakeOllamaClient(ResponseError("model 'nope' not found", 404))

    with pytest.raises(TransportError) as info:
        run(OllamaAdapter("nope", client=client).chat(MESSAGES))

    assert info.value.status_code == 404
    assert info.value.is_http_error


def test_ollama_connection_failure_becomes_transport_error():
    client = FakeOllamaClient(ConnectionError("Failed to connect to Ollama"))

    with pytest.raises(TransportError) as info:
        run(OllamaAdapter("llama3.1", client=client).chat(MESSAGES))

    assert not info.value.is_http_error


def test_ollama_missing_message_is_malformed_envelope():
    with pytest.raises(TransportError):
        run(OllamaAdapter("llama3.1", client=FakeOllamaClient({"done": True})).chat(MESSAGES))


# ------------------------------------------------------------
# OpenAI
# ------------------------------------------------------------

def test_openai_requests_json_object_format():
    client, completions = _openai_client(_completion('{"a":1}'))

    reply = run(OpenAIAdapter("gpt-4o-mini", client=client).chat(MESSAGES))

    assert reply == ChatMessage.assistant('{"a":1}')
    (call,) = completions.calls
    assert call["response_format"] == {"type": "json_object"}
    assert call["model"] == "gpt-4o-mini"


def test_openai_null_content_becomes_empty_reply():
    client, _ = _openai_client(_completion(None))

    assert run(OpenAIAdapter("gpt-4o-mini", client=client).chat(MESSAGES)).content == ""


def test_openai_missing_choices_is_transport_error():
    client, _ = _openai_client(SimpleNamespace(choices=[]))

    with pytest.raises(TransportError):
        run(OpenAIAdapter("gpt-4o-mini", client=client).chat(MESSAGES))


def test_openai_status_error_keeps_status_code():
    response = httpx.Response(429, request=httpx.Request("POST", "https://api.test/v1/chat/completions"))
    client, _ = _openai_client(openai.RateLimitError("rate limited", response=response, body=None))

    with pytest.raises(TransportError) as info:
        run(OpenAIAdapter("gpt-4o-mini", client=client).chat(MESSAGES))

    assert info.value.status_code == 429


def test_openai_generic_error_is_transport_error():
    client, _ = _openai_client(openai.OpenAIError("boom"))

    with pytest.raises(TransportError) as info:
        run(OpenAIAdapter("gpt-4o-mini", client=client).chat(MESSAGES))

    assert info.value.status_code == -1


# ------------------------------------------------------------
# Mock
# ------------------------------------------------------------

def test_mock_adapter_replays_and_records():
    adapter = MockAdapter(["first", ChatMessage.assistant("second")])

    assert run(adapter.chat(MESSAGES)).content == "first"
    assert run(adapter.chat(MESSAGES[:1])).content == "second"
    assert adapter.calls == 2
    assert adapter.requests[1] == MESSAGES[:1]
    with pytest.raises(AssertionError):
        run(adapter.chat(MESSAGES))


def test_empty_model_name_is_rejected():
    with pytest.raises(ValueError):
        MockAdapter(model=" ")


def test_ollama_raw_output_keeps_inner_quotes():
    client = FakeOllamaClient(ResponseError("""error parsing tool call: raw='{"name":"O'Brien"}'""", 500))

    reply = run(OllamaAdapter("llama3.1", client=client).chat(MESSAGES))

    assert reply.content == '{"name":"O\'Brien"}'
