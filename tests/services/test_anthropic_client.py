"""Resilient Anthropic client — retry, backoff and error mapping against fake SDK errors.

Invariants:
    - Rate limits and transient failures are retried up to max_retries
    - Timeouts and client errors fail immediately
    - Every failure surfaces as AIProviderError with a typed api_error_type
"""

import httpx
import pytest
from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    BadRequestError,
    InternalServerError,
    RateLimitError,
)

from arguably.core.errors import AIProviderError
from arguably.infrastructure.anthropic_client import (
    ResilientAnthropicClient, response_text,
)

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls, status, headers=None):
    response = httpx.Response(status, request=_REQUEST, headers=headers or {})
    return cls(f"HTTP {status}", response=response, body=None)


class _Block:
    def __init__(self, type, text=""):
        self.type = type
        self.text = text


class _Usage:
    input_tokens = 10
    output_tokens = 5


class _Response:
    def __init__(self, *blocks):
        self.content = list(blocks)
        self.usage = _Usage()


class _FakeMessages:
    """Replays outcomes: exceptions are raised, anything else returned."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def create(self, **kwargs):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _client(outcomes, max_retries=2):
    client = ResilientAnthropicClient(
        api_key="sk-ant-test", max_retries=max_retries, base_delay_ms=0,
    )
    fake = _FakeMessages(outcomes)
    client.client.messages = fake
    return client, fake


async def _complete(client):
    return await client.complete_text(
        model="m", max_tokens=10, system="s", user_message="u",
    )


def test_response_text_joins_text_blocks():
    response = _Response(_Block("text", "Hello "), _Block("tool_use"), _Block("text", "world "))
    assert response_text(response) == "Hello world"


async def test_success_first_try():
    client, fake = _client([_Response(_Block("text", "ok"))])
    assert await _complete(client) == "ok"
    assert fake.calls == 1


async def test_rate_limit_retried_then_succeeds():
    client, fake = _client([
        _status_error(RateLimitError, 429),
        _Response(_Block("text", "ok")),
    ])
    assert await _complete(client) == "ok"
    assert fake.calls == 2


async def test_rate_limit_exhausted_carries_retry_after():
    errors = [_status_error(RateLimitError, 429, {"retry-after": "0"}) for _ in range(3)]
    client, fake = _client(errors)
    with pytest.raises(AIProviderError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "rate_limit"
    assert fake.calls == 3


async def test_transient_errors_retried():
    client, fake = _client([
        APIConnectionError(request=_REQUEST),
        _status_error(InternalServerError, 500),
        _Response(_Block("text", "recovered")),
    ])
    assert await _complete(client) == "recovered"
    assert fake.calls == 3


async def test_overloaded_retried_until_exhausted():
    client, fake = _client([_status_error(APIStatusError, 529) for _ in range(3)])
    with pytest.raises(AIProviderError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "connection_error"
    assert fake.calls == 3


async def test_timeout_not_retried():
    client, fake = _client([APITimeoutError(request=_REQUEST)])
    with pytest.raises(AIProviderError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "timeout"
    assert fake.calls == 1


async def test_client_error_not_retried():
    client, fake = _client([_status_error(BadRequestError, 400)])
    with pytest.raises(AIProviderError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "client_error"
    assert fake.calls == 1
