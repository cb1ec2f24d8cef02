"""
Tests for the text-generation adapter with a stubbed OpenAI client.
"""

from types import SimpleNamespace

import httpx
import pytest
from openai import APITimeoutError, OpenAIError

from adapters.llm_adapter import TextGenerationClient
from app.config import Settings
from app.exceptions import UpstreamError


class StubCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


def _client(completions) -> TextGenerationClient:
    stub = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return TextGenerationClient(config=Settings(llm_model="test-model"), client=stub)


def _response(*contents):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )


def test_complete_json_sends_json_mode_request():
    completions = StubCompletions(response=_response('{"calories": 1}', "ignored"))
    content = _client(completions).complete_json("system", "user")

    assert content == '{"calories": 1}'
    assert completions.kwargs["model"] == "test-model"
    assert completions.kwargs["temperature"] == 0.0
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["messages"][0] == {"role": "system", "content": "system"}


def test_temperature_override():
    completions = StubCompletions(response=_response("{}"))
    _client(completions).complete_json("s", "u", temperature=0.7)
    assert completions.kwargs["temperature"] == 0.7


def test_no_choices_returns_none():
    completions = StubCompletions(response=SimpleNamespace(choices=[]))
    assert _client(completions).complete_json("s", "u") is None


def test_timeout_becomes_upstream_error():
    request = httpx.Request("POST", "https://api.example.com/v1/chat/completions")
    completions = StubCompletions(error=APITimeoutError(request=request))

    with pytest.raises(UpstreamError) as exc_info:
        _client(completions).complete_json("s", "u")
    assert exc_info.value.details == {"reason": "timeout"}


def test_provider_error_becomes_upstream_error():
    completions = StubCompletions(error=OpenAIError("boom"))
    with pytest.raises(UpstreamError) as exc_info:
        _client(completions).complete_json("s", "u")
    assert exc_info.value.details == {"reason": "boom"}
