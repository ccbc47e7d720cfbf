"""
Unit tests for BudgetedInsightClient and error classification.

The completion callable is an AsyncMock, so no request leaves the process.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from core import ConfigurationError, LLMAPIError
from memory.usage_store import InMemoryUsageStore
from prompts.fallback import FALLBACKS
from schemas import FallbackReason, InsightRequest, Prompt, RateLimitConfig, UsageStatus
from utils.llm_client import BudgetedInsightClient, classify_error, generate_fallback


class StatusError(Exception):
    """Exception carrying an HTTP status code like provider SDK errors."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def make_prompt(kind: str = "evening", language: str = "de", tokens: int = 100) -> Prompt:
    return Prompt(
        system_prompt="system",
        user_prompt="user",
        estimated_token_count=tokens,
        language=language,
        kind=kind,
    )


def make_request(user_id: str = "user-1", **prompt_kwargs) -> InsightRequest:
    return InsightRequest(prompt=make_prompt(**prompt_kwargs), user_id=user_id)


@pytest.fixture
def make_client(rate_limits, usage_store, mock_completion, rng):
    """Factory building a client around the shared fakes."""

    def _make(**overrides) -> BudgetedInsightClient:
        kwargs = dict(
            api_key="test-key",
            model="gpt-4o-mini",
            timeout_seconds=5,
            max_retries=3,
            base_url="https://api.openai.com/v1",
            retry_backoff_seconds=0,
            rate_limits=rate_limits,
            usage_store=usage_store,
            completion=mock_completion,
            rng=rng,
        )
        kwargs.update(overrides)
        return BudgetedInsightClient(**kwargs)

    return _make


class TestClassifyError:
    """Tests for mapping exceptions to fallback reasons."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (asyncio.TimeoutError(), FallbackReason.TIMEOUT),
            (TimeoutError("read timed out"), FallbackReason.TIMEOUT),
            (StatusError("Too Many Requests", 429), FallbackReason.RATE_LIMIT),
            (StatusError("Bad Request", 400), FallbackReason.INVALID_REQUEST),
            (StatusError("Bad Gateway", 502), FallbackReason.SERVER_ERROR),
            (StatusError("Forbidden", 403), FallbackReason.UNKNOWN),
            (StatusError("You exceeded your current quota", 429), FallbackReason.RATE_LIMIT),
            (LLMAPIError(429, "You exceeded your current quota"), FallbackReason.RATE_LIMIT),
            (Exception("Error 429: You exceeded your current quota"), FallbackReason.RATE_LIMIT),
            (StatusError("insufficient_quota", 403), FallbackReason.QUOTA_EXCEEDED),
            (Exception("HTTP 429: slow down"), FallbackReason.RATE_LIMIT),
            (Exception("HTTP 400 invalid json"), FallbackReason.INVALID_REQUEST),
            (Exception("upstream returned 503"), FallbackReason.SERVER_ERROR),
            (Exception("Quota exceeded for project"), FallbackReason.QUOTA_EXCEEDED),
            (Exception("connection reset"), FallbackReason.UNKNOWN),
            (LLMAPIError(500, "boom"), FallbackReason.SERVER_ERROR),
        ],
    )
    def test_classification(self, error, expected):
        assert classify_error(error) == expected

    def test_numbers_inside_words_ignored(self):
        """Should not read 4000 or id5001 as status codes."""
        assert classify_error(Exception("max 4000 tokens for id5001")) == FallbackReason.UNKNOWN


class TestConstruction:
    """Tests for client configuration."""

    def test_missing_api_key_raises(self, monkeypatch):
        from config.settings import settings

        monkeypatch.setattr(settings, "OPENAI_API_KEY", "")

        with pytest.raises(ConfigurationError) as exc_info:
            BudgetedInsightClient(api_key="")

        assert exc_info.value.context["setting"] == "OPENAI_API_KEY"

    def test_default_store_uses_limits(self, rate_limits):
        client = BudgetedInsightClient(api_key="k", rate_limits=rate_limits, completion=AsyncMock())

        assert isinstance(client.usage_store, InMemoryUsageStore)
        assert client.usage_store.limits == rate_limits


class TestSendRequest:
    """Tests for the budgeted request lifecycle."""

    @pytest.mark.asyncio
    async def test_success_returns_response_and_counts_usage(self, make_client, mock_completion, usage_store):
        client = make_client()

        result = await client.send_request(make_request())

        assert result.is_fallback is False
        assert result.content.startswith("• Punkt 1")
        assert result.usage.total_tokens == 200
        assert result.finish_reason == "stop"
        status = await usage_store.get_status("user-1")
        assert status.calls_today == 1
        assert status.tokens_today == 200
        assert status.last_call_time is not None
        mock_completion.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_request_shape(self, make_client, mock_completion):
        """Should send system and user messages with configured parameters."""
        client = make_client(max_tokens=500, temperature=0.7)

        await client.send_request(make_request())

        kwargs = mock_completion.await_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o-mini"
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.7
        assert kwargs["api_base"] == "https://api.openai.com/v1"
        assert kwargs["api_key"] == "test-key"

    @pytest.mark.asyncio
    async def test_provider_prefixed_model_kept(self, make_client, mock_completion):
        client = make_client(model="anthropic/claude-haiku")

        await client.send_request(make_request())

        assert mock_completion.await_args.kwargs["model"] == "anthropic/claude-haiku"

    @pytest.mark.asyncio
    async def test_daily_call_budget_exhausted(self, make_client, mock_completion, usage_store):
        """Should return a rate_limit fallback without calling the API."""
        for _ in range(4):
            await usage_store.increment_usage("user-1", 10)
        client = make_client()

        result = await client.send_request(make_request())

        assert result.is_fallback is True
        assert result.reason == FallbackReason.RATE_LIMIT
        assert result.content in FALLBACKS["evening"]["de"]
        mock_completion.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_estimated_tokens_exceed_budget(self, make_client, mock_completion, usage_store):
        await usage_store.increment_usage("user-1", 1950)
        client = make_client()

        result = await client.send_request(make_request(tokens=100))

        assert result.reason == FallbackReason.RATE_LIMIT
        mock_completion.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_budget_is_per_user(self, make_client, usage_store):
        for _ in range(4):
            await usage_store.increment_usage("user-1", 10)
        client = make_client()

        result = await client.send_request(make_request(user_id="user-2"))

        assert result.is_fallback is False

    @pytest.mark.asyncio
    async def test_per_minute_limit(self, make_client, mock_completion):
        limits = RateLimitConfig(max_calls_per_day=100, max_tokens_per_day=100000, max_calls_per_minute=2)
        client = make_client(rate_limits=limits, usage_store=InMemoryUsageStore(limits=limits))

        results = [await client.send_request(make_request()) for _ in range(3)]

        assert [r.is_fallback for r in results] == [False, False, True]
        assert results[2].reason == FallbackReason.RATE_LIMIT
        assert mock_completion.await_count == 2

    @pytest.mark.asyncio
    async def test_server_errors_retried_then_timeout(self, make_client, usage_store):
        """Should make max_retries + 1 attempts on 5xx and report timeout."""
        completion = AsyncMock(side_effect=StatusError("Internal Server Error", 500))
        client = make_client(completion=completion)

        result = await client.send_request(make_request())

        assert completion.await_count == 4
        assert result.is_fallback is True
        assert result.reason == FallbackReason.TIMEOUT
        status = await usage_store.get_status("user-1")
        assert status.calls_today == 0

    @pytest.mark.asyncio
    async def test_server_error_then_success(self, make_client, make_completion_response):
        completion = AsyncMock(side_effect=[StatusError("Bad Gateway", 502), make_completion_response(content="ok")])
        client = make_client(completion=completion)

        result = await client.send_request(make_request())

        assert completion.await_count == 2
        assert result.is_fallback is False
        assert result.content == "ok"

    @pytest.mark.asyncio
    async def test_invalid_request_not_retried(self, make_client):
        completion = AsyncMock(side_effect=StatusError("Bad Request", 400))
        client = make_client(completion=completion)

        result = await client.send_request(make_request())

        assert completion.await_count == 1
        assert result.reason == FallbackReason.INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_provider_rate_limit_not_retried(self, make_client):
        completion = AsyncMock(side_effect=StatusError("Too Many Requests", 429))
        client = make_client(completion=completion)

        result = await client.send_request(make_request())

        assert completion.await_count == 1
        assert result.reason == FallbackReason.RATE_LIMIT

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, make_client):
        completion = AsyncMock(side_effect=Exception("You exceeded your current quota, check your plan"))
        client = make_client(completion=completion)

        result = await client.send_request(make_request())

        assert result.reason == FallbackReason.QUOTA_EXCEEDED

    @pytest.mark.asyncio
    async def test_quota_message_on_429_is_rate_limit(self, make_client):
        completion = AsyncMock(side_effect=StatusError("You exceeded your current quota", 429))
        client = make_client(completion=completion)

        result = await client.send_request(make_request())

        assert result.reason == FallbackReason.RATE_LIMIT

    @pytest.mark.asyncio
    async def test_provider_error_wrapped(self, make_client):
        """Should raise LLMAPIError carrying the status and the provider error."""
        provider_error = StatusError("Bad Gateway", 502)
        client = make_client(completion=AsyncMock(side_effect=provider_error))

        with pytest.raises(LLMAPIError) as exc_info:
            await client._complete(make_request().prompt)

        assert exc_info.value.status_code == 502
        assert exc_info.value.__cause__ is provider_error
        assert "Bad Gateway" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout(self, make_client):
        """Should abort a slow call after timeout_seconds."""

        async def slow_completion(**kwargs):
            await asyncio.sleep(1)

        client = make_client(completion=slow_completion, timeout_seconds=0.01)

        result = await client.send_request(make_request())

        assert result.reason == FallbackReason.TIMEOUT

    @pytest.mark.asyncio
    async def test_malformed_response(self, make_client, make_completion_response):
        response = make_completion_response()
        response.choices = []
        client = make_client(completion=AsyncMock(return_value=response))

        result = await client.send_request(make_request())

        assert result.reason == FallbackReason.UNKNOWN

    @pytest.mark.asyncio
    async def test_store_read_failure(self, make_client, mock_completion):
        store = AsyncMock()
        store.get_status = AsyncMock(side_effect=RuntimeError("store down"))
        client = make_client(usage_store=store)

        result = await client.send_request(make_request())

        assert result.reason == FallbackReason.UNKNOWN
        mock_completion.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_increment_failure_still_returns_response(self, make_client):
        store = AsyncMock()
        store.get_status = AsyncMock(return_value=UsageStatus(user_id="user-1"))
        store.increment_usage = AsyncMock(side_effect=RuntimeError("write failed"))
        client = make_client(usage_store=store)

        result = await client.send_request(make_request())

        assert result.is_fallback is False
        store.increment_usage.assert_awaited_once_with("user-1", 200)

    @pytest.mark.asyncio
    async def test_morning_fallback_pool(self, make_client):
        client = make_client(completion=AsyncMock(side_effect=StatusError("Bad Request", 400)))

        result = await client.send_request(make_request(kind="morning", language="en"))

        assert result.content in FALLBACKS["morning"]["en"]


class TestLimitsStatus:
    """Tests for usage status and resets."""

    @pytest.mark.asyncio
    async def test_status_and_reset(self, make_client):
        client = make_client()
        await client.send_request(make_request())

        status = await client.get_rate_limit_status("user-1")
        assert status.calls_today == 1

        await client.reset_daily_limits()

        status = await client.get_rate_limit_status("user-1")
        assert status.calls_today == 0
        assert status.tokens_today == 0


class TestGenerateFallback:
    """Tests for local fallback content."""

    @pytest.mark.parametrize("kind", ["evening", "morning"])
    @pytest.mark.parametrize("language", ["de", "en"])
    def test_from_pool(self, kind, language, rng):
        content = generate_fallback(kind, language, rng)

        assert content in FALLBACKS[kind][language]
        assert "💨" in content

    @pytest.mark.parametrize("kind", ["evening", "morning"])
    def test_varies_between_calls(self, kind, rng):
        """Should not hand out the same variant on every call."""
        variants = {generate_fallback(kind, "de", rng) for _ in range(30)}

        assert len(variants) > 1

    @pytest.mark.asyncio
    async def test_client_fallbacks_vary(self, make_client):
        client = make_client(completion=AsyncMock(side_effect=StatusError("Bad Request", 400)))

        contents = {(await client.send_request(make_request())).content for _ in range(20)}

        assert len(contents) > 1
        assert contents <= set(FALLBACKS["evening"]["de"])
