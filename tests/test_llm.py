"""Tests for the digital_twin.llm package.

Tests cover:
- OpenAIClient: request formatting, retry behavior, auth errors, env config
- LLMClient protocol: conformance, custom implementations
- Error hierarchy: correct inheritance, error attributes
"""

from __future__ import annotations

import json

import httpx
import pytest

from digital_twin.exceptions import DigitalTwinError
from digital_twin.llm import (
    LLMAuthError,
    LLMClient,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
    OpenAIClient,
)
from digital_twin.llm.client import API_KEY_ENV, BASE_URL_ENV, DEFAULT_BASE_URL


# ---------------------------------------------------------------------------
# Fixtures and helpers
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    """Skip tenacity's backoff sleeps."""
    monkeypatch.setattr("tenacity.nap.time.sleep", lambda seconds: None)


def _success_response(
    content: str = "Hello!",
    model: str = "gpt-4o-mini",
    prompt_tokens: int = 10,
    completion_tokens: int = 5,
) -> dict:
    """Build a realistic OpenAI chat completion response dict."""
    return {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }


def _make_transport(handler):
    """Create an httpx.MockTransport from a handler function."""
    return httpx.MockTransport(handler)


def _make_client(
    transport=None,
    api_key: str = "test-key",
    base_url: str = "http://test-api",
    max_retries: int = 3,
    **kwargs,
) -> OpenAIClient:
    """Create an OpenAIClient with an optional mock transport."""
    client = OpenAIClient(
        api_key=api_key,
        base_url=base_url,
        max_retries=max_retries,
        **kwargs,
    )
    if transport is not None:
        # Replace with mock transport but preserve original headers
        client._client = httpx.Client(
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )
    return client


def _failing_then_ok(status: int, failures: int = 1, **response_kwargs):
    """Handler returning *status* for the first *failures* calls, then 200."""
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] <= failures:
            return httpx.Response(status, json={"error": "nope"}, **response_kwargs)
        return httpx.Response(200, json=_success_response())

    return handler, calls


class MinimalClient:
    """A client with just chat() and close()."""

    def chat(self, messages, *, model=None, temperature=None, max_tokens=None, **kwargs):
        return _success_response("hi")

    def close(self) -> None:
        pass


# ===========================================================================
# Error hierarchy tests
# ===========================================================================

class TestErrorHierarchy:
    """Verify the LLM error hierarchy."""

    def test_llm_client_error_inherits_base_error(self):
        assert issubclass(LLMClientError, DigitalTwinError)

    @pytest.mark.parametrize(
        "error_class", [LLMConfigError, LLMRateLimitError, LLMAuthError, LLMResponseError]
    )
    def test_inherits_client_error(self, error_class):
        assert issubclass(error_class, LLMClientError)

    def test_rate_limit_error_has_retry_after(self):
        err = LLMRateLimitError("rate limited", retry_after=30.0)
        assert err.retry_after == 30.0
        assert "30.0s" in str(err)

    def test_rate_limit_error_no_retry_after(self):
        err = LLMRateLimitError("rate limited")
        assert err.retry_after is None

    def test_all_errors_catchable_as_base_error(self):
        """All LLM errors should be catchable with except DigitalTwinError."""
        for error_class in [LLMClientError, LLMConfigError, LLMRateLimitError,
                            LLMAuthError, LLMResponseError]:
            with pytest.raises(DigitalTwinError):
                raise error_class("test")


# ===========================================================================
# OpenAIClient tests
# ===========================================================================

class TestOpenAIClientChat:
    """Test OpenAIClient.chat() with mocked httpx transport."""

    def test_chat_success(self):
        """Successful chat returns parsed response dict."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_success_response())

        client = _make_client(transport=_make_transport(handler))
        response = client.chat([{"role": "user", "content": "Hello"}])

        assert response["choices"][0]["message"]["content"] == "Hello!"
        client.close()

    def test_chat_request_format(self):
        """Verify the request payload is correctly formatted."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["payload"] = json.loads(request.content)
            captured["headers"] = dict(request.headers)
            captured["url"] = str(request.url)
            return httpx.Response(200, json=_success_response())

        client = _make_client(transport=_make_transport(handler))
        client.chat(
            [{"role": "user", "content": "Test"}],
            model="gpt-4o",
            temperature=0.5,
            max_tokens=100,
        )

        payload = captured["payload"]
        assert payload["model"] == "gpt-4o"
        assert payload["messages"] == [{"role": "user", "content": "Test"}]
        assert payload["temperature"] == 0.5
        assert payload["max_tokens"] == 100
        assert captured["url"] == "http://test-api/chat/completions"
        assert captured["headers"]["authorization"] == "Bearer test-key"
        client.close()

    def test_chat_with_default_model(self):
        """When no model specified, uses default_model."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, json=_success_response())

        client = _make_client(
            transport=_make_transport(handler),
            default_model="local-model",
        )
        client.chat([{"role": "user", "content": "Hello"}])

        assert captured["payload"]["model"] == "local-model"
        assert client.default_model == "local-model"
        client.close()

    def test_none_params_omitted(self):
        """None model/temperature/max_tokens fall back to defaults."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, json=_success_response())

        client = _make_client(transport=_make_transport(handler))
        client.chat(
            [{"role": "user", "content": "Hello"}],
            model=None,
            temperature=None,
            max_tokens=None,
        )

        payload = captured["payload"]
        assert payload["model"] == "gpt-4o-mini"
        assert "temperature" not in payload
        assert "max_tokens" not in payload
        client.close()

    def test_chat_forwards_extra_kwargs(self):
        """Extra kwargs are forwarded to the API payload."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, json=_success_response())

        client = _make_client(transport=_make_transport(handler))
        client.chat([{"role": "user", "content": "Test"}], top_p=0.9, stop=["</response>"])

        payload = captured["payload"]
        assert payload["top_p"] == 0.9
        assert payload["stop"] == ["</response>"]
        client.close()


class TestOpenAIClientExtractors:
    """Test helper extract methods."""

    def test_extract_content(self):
        response = _success_response("Test content")
        assert OpenAIClient.extract_content(response) == "Test content"

    def test_extract_content_bad_format(self):
        """extract_content raises LLMResponseError on bad format."""
        with pytest.raises(LLMResponseError):
            OpenAIClient.extract_content({})

        with pytest.raises(LLMResponseError):
            OpenAIClient.extract_content({"choices": []})

        # A message with no content key returns ""
        assert OpenAIClient.extract_content({"choices": [{"message": {}}]}) == ""
        assert OpenAIClient.extract_content({"choices": [{"message": {"content": None}}]}) == ""


class TestOpenAIClientRetry:
    """Test retry behavior with different HTTP status codes."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retry_then_success(self, status):
        """Client retries transient statuses and succeeds on the next attempt."""
        handler, calls = _failing_then_ok(status)

        client = _make_client(transport=_make_transport(handler), max_retries=3)
        response = client.chat([{"role": "user", "content": "Test"}])

        assert calls["count"] == 2
        assert "choices" in response
        client.close()

    def test_connect_error_retried(self):
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            if calls["count"] == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json=_success_response())

        client = _make_client(transport=_make_transport(handler))
        client.chat([{"role": "user", "content": "Test"}])
        assert calls["count"] == 2
        client.close()

    @pytest.mark.parametrize("status", [401, 403])
    def test_no_retry_on_auth_error(self, status):
        """Client raises LLMAuthError immediately (no retry)."""
        handler, calls = _failing_then_ok(status, failures=5)

        client = _make_client(transport=_make_transport(handler), max_retries=3)
        with pytest.raises(LLMAuthError, match="Authentication failed") as exc_info:
            client.chat([{"role": "user", "content": "Test"}])

        assert calls["count"] == 1
        assert exc_info.value.status_code == status
        client.close()

    def test_no_retry_on_400(self):
        """Client raises HTTPStatusError on 400 (bad request, not retryable)."""
        handler, calls = _failing_then_ok(400, failures=5)

        client = _make_client(transport=_make_transport(handler), max_retries=3)
        with pytest.raises(httpx.HTTPStatusError):
            client.chat([{"role": "user", "content": "Test"}])

        assert calls["count"] == 1
        client.close()

    def test_max_retries_exhausted(self):
        """After max_retries exhausted, raises the last error."""
        handler, calls = _failing_then_ok(429, failures=10, headers={"Retry-After": "0.1"})

        client = _make_client(transport=_make_transport(handler), max_retries=3)
        with pytest.raises(LLMRateLimitError):
            client.chat([{"role": "user", "content": "Test"}])

        assert calls["count"] == 3
        client.close()

    def test_rate_limit_error_has_retry_after(self):
        """429 response with Retry-After header populates retry_after."""
        handler, _ = _failing_then_ok(429, failures=10, headers={"Retry-After": "42"})

        client = _make_client(transport=_make_transport(handler), max_retries=1)
        with pytest.raises(LLMRateLimitError) as exc_info:
            client.chat([{"role": "user", "content": "Test"}])

        assert exc_info.value.retry_after == 42.0
        client.close()

    def test_unparseable_retry_after(self):
        handler, _ = _failing_then_ok(429, failures=10, headers={"Retry-After": "soon"})

        client = _make_client(transport=_make_transport(handler), max_retries=1)
        with pytest.raises(LLMRateLimitError) as exc_info:
            client.chat([{"role": "user", "content": "Test"}])

        assert exc_info.value.retry_after is None
        client.close()

    def test_response_missing_choices_raises(self):
        """Response without 'choices' key raises LLMResponseError."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": "no choices"})

        client = _make_client(transport=_make_transport(handler))
        with pytest.raises(LLMResponseError, match="missing 'choices'") as exc_info:
            client.chat([{"role": "user", "content": "Test"}])
        assert exc_info.value.response == {"error": "no choices"}
        client.close()


class TestOpenAIClientConfig:
    """Test client configuration and environment variables."""

    def test_env_var_api_key(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "env-key-123")
        client = OpenAIClient()
        assert client._api_key == "env-key-123"
        client.close()

    def test_env_var_base_url(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "test-key")
        monkeypatch.setenv(BASE_URL_ENV, "http://custom-api/v1")
        client = OpenAIClient()
        assert client._base_url == "http://custom-api/v1"
        client.close()

    def test_default_base_url(self, monkeypatch):
        monkeypatch.delenv(BASE_URL_ENV, raising=False)
        client = OpenAIClient(api_key="test-key")
        assert client._base_url == DEFAULT_BASE_URL
        client.close()

    def test_constructor_overrides_env(self, monkeypatch):
        """Constructor args take precedence over env vars."""
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        monkeypatch.setenv(BASE_URL_ENV, "http://env-url/v1")
        client = OpenAIClient(api_key="arg-key", base_url="http://arg-url/v1")
        assert client._api_key == "arg-key"
        assert client._base_url == "http://arg-url/v1"
        client.close()

    def test_missing_api_key_raises(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        with pytest.raises(LLMConfigError, match="No API key"):
            OpenAIClient()

    def test_empty_api_key_raises(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        with pytest.raises(LLMConfigError):
            OpenAIClient(api_key="")

    def test_context_manager(self):
        with OpenAIClient(api_key="test-key") as client:
            assert isinstance(client, OpenAIClient)
        assert client._client.is_closed

    def test_base_url_trailing_slash_stripped(self):
        client = OpenAIClient(api_key="test-key", base_url="http://api/v1/")
        assert client._base_url == "http://api/v1"
        client.close()


# ===========================================================================
# Protocol conformance tests
# ===========================================================================

class TestProtocolConformance:
    """Test that classes conform to the LLMClient protocol."""

    def test_openai_client_conforms(self):
        client = OpenAIClient(api_key="test-key")
        assert isinstance(client, LLMClient)
        client.close()

    def test_minimal_client_conforms(self):
        assert isinstance(MinimalClient(), LLMClient)

    def test_missing_method_fails_protocol(self):
        class BadClient:
            def close(self) -> None:
                pass

        assert not isinstance(BadClient(), LLMClient)
