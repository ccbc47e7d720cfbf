"""
Budgeted LLM client for insight generation using LiteLLM.

Talks to any OpenAI-compatible chat completions endpoint. Every request is
checked against the user's daily call/token budget first; failures are
classified and turned into localized fallback content instead of raising.

Request lifecycle:
    CHECK_BUDGET -> SEND | FALLBACK(rate_limit)
    SEND -> SUCCESS | RETRY* -> SUCCESS | RETRY_EXHAUSTED -> FALLBACK(timeout)
         | FALLBACK(classified reason)
"""

import asyncio
import random
import re
from typing import Any, Awaitable, Callable, Optional

import litellm
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_none,
    wait_random_exponential,
)

from core import get_logger, ConfigurationError, LLMAPIError
from config.settings import settings
from memory.usage_store import InMemoryUsageStore, UsageStore
from prompts.fallback import FALLBACKS
from schemas import (
    FallbackReason,
    FallbackResponse,
    InsightRequest,
    InsightResponse,
    InsightResult,
    Prompt,
    RateLimitConfig,
    TokenUsage,
    UsageStatus,
)
from utils.rate_limiter import RateLimiter

logger = get_logger(__name__)

# Configure LiteLLM
litellm.suppress_debug_info = True

CompletionFn = Callable[..., Awaitable[Any]]

_STATUS_IN_MESSAGE = {
    FallbackReason.RATE_LIMIT: re.compile(r"\b429\b"),
    FallbackReason.INVALID_REQUEST: re.compile(r"\b400\b"),
    FallbackReason.SERVER_ERROR: re.compile(r"\b5\d\d\b"),
}


def classify_error(error: BaseException) -> FallbackReason:
    """
    Map an exception from the completion call to a fallback reason.

    Order: timeout, then 429, then quota wording, then other statuses. A
    numeric ``status_code`` attribute (LiteLLM and OpenAI exceptions carry
    one, as does LLMAPIError) is consulted before status-like numbers in the
    message. A 429 that mentions quota is still a rate limit.
    """
    if isinstance(error, (asyncio.TimeoutError, TimeoutError, litellm.Timeout)):
        return FallbackReason.TIMEOUT

    message = str(error).lower()
    status = getattr(error, "status_code", None)
    if not isinstance(status, int):
        status = None

    if status == 429 or (status is None and _STATUS_IN_MESSAGE[FallbackReason.RATE_LIMIT].search(message)):
        return FallbackReason.RATE_LIMIT
    if "quota" in message:
        return FallbackReason.QUOTA_EXCEEDED

    if status is not None:
        if status == 400:
            return FallbackReason.INVALID_REQUEST
        if 500 <= status < 600:
            return FallbackReason.SERVER_ERROR
        return FallbackReason.UNKNOWN

    for reason, pattern in _STATUS_IN_MESSAGE.items():
        if pattern.search(message):
            return reason
    return FallbackReason.UNKNOWN


def _is_server_error(error: BaseException) -> bool:
    return classify_error(error) == FallbackReason.SERVER_ERROR


class BudgetedInsightClient:
    """
    Rate-limited insight client with classified retry and local fallbacks.

    Usage:
        client = BudgetedInsightClient(usage_store=store)
        result = await client.send_request(InsightRequest(prompt=prompt, user_id="u1"))
        if result.is_fallback:
            ...

    Only server errors are retried. Every other failure returns a
    FallbackResponse with its classified reason on the first attempt.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: Optional[int] = None,
        base_url: Optional[str] = None,
        retry_backoff_seconds: Optional[float] = None,
        rate_limits: Optional[RateLimitConfig] = None,
        usage_store: Optional[UsageStore] = None,
        completion: Optional[CompletionFn] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the client. Unset arguments fall back to settings.

        Args:
            api_key: Bearer key for the API (else settings.OPENAI_API_KEY)
            model: Model id, e.g. "gpt-4o-mini"
            max_tokens: Maximum completion tokens
            temperature: Sampling temperature
            timeout_seconds: Per-attempt timeout
            max_retries: Retries for server errors (attempts = max_retries + 1)
            base_url: OpenAI-compatible base URL
            retry_backoff_seconds: Jittered exponential backoff multiplier, 0 for none
            rate_limits: Per-user budget
            usage_store: Store of per-user daily counters
            completion: Async completion callable (defaults to litellm.acompletion)
            rng: Random source for fallback selection

        Raises:
            ConfigurationError: If no API key is available
        """
        self.api_key = api_key or settings.OPENAI_API_KEY
        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY", "API key is required")

        self.model = model or settings.INSIGHT_MODEL
        self.max_tokens = max_tokens if max_tokens is not None else settings.INSIGHT_MAX_TOKENS
        self.temperature = temperature if temperature is not None else settings.INSIGHT_TEMPERATURE
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.INSIGHT_TIMEOUT_SECONDS
        self.max_retries = max_retries if max_retries is not None else settings.INSIGHT_MAX_RETRIES
        self.base_url = (base_url or settings.INSIGHT_BASE_URL).rstrip("/")
        self.retry_backoff_seconds = (
            retry_backoff_seconds if retry_backoff_seconds is not None else settings.INSIGHT_RETRY_BACKOFF_SECONDS
        )
        self.rate_limits = rate_limits or RateLimitConfig(
            max_calls_per_day=settings.MAX_CALLS_PER_DAY,
            max_tokens_per_day=settings.MAX_TOKENS_PER_DAY,
            max_calls_per_minute=settings.MAX_CALLS_PER_MINUTE,
        )
        self.usage_store = usage_store or InMemoryUsageStore(limits=self.rate_limits)
        self.minute_limiter = RateLimiter(max_requests=self.rate_limits.max_calls_per_minute, window_seconds=60)
        self._completion = completion or litellm.acompletion
        self._rng = rng or random.Random()

        logger.info(
            "Insight client initialized",
            model=self.model,
            base_url=self.base_url,
            max_retries=self.max_retries,
            timeout_seconds=self.timeout_seconds,
        )

    async def send_request(self, request: InsightRequest) -> InsightResult:
        """
        Send a composed prompt for a user, honouring their budget.

        Never raises for runtime failures: every error ends in a FallbackResponse.
        """
        prompt = request.prompt
        user_id = request.user_id
        log = logger.bind(user_id=user_id, request_id=request.request_id, kind=prompt.kind)

        try:
            status = await self.usage_store.get_status(user_id)
        except Exception as e:
            log.error("Usage store read failed", error=str(e))
            return self._fallback(FallbackReason.UNKNOWN, prompt)

        if self._over_daily_budget(status, prompt.estimated_token_count):
            log.info(
                "Daily budget exhausted",
                calls_today=status.calls_today,
                tokens_today=status.tokens_today,
                estimated_tokens=prompt.estimated_token_count,
            )
            return self._fallback(FallbackReason.RATE_LIMIT, prompt)

        allowed, _ = self.minute_limiter.check_rate_limit(user_id)
        if not allowed:
            return self._fallback(FallbackReason.RATE_LIMIT, prompt)

        try:
            raw = await self._complete_with_retries(prompt, log)
        except Exception as e:
            reason = classify_error(e)
            if reason == FallbackReason.SERVER_ERROR:
                log.warning("Retries exhausted", attempts=self.max_retries + 1, error=str(e))
                reason = FallbackReason.TIMEOUT
            else:
                log.warning("Insight request failed", reason=reason.value, error=str(e))
            return self._fallback(reason, prompt)

        try:
            response = self._parse_response(raw)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            log.error("Malformed completion response", error=str(e))
            return self._fallback(FallbackReason.UNKNOWN, prompt)

        try:
            await self.usage_store.increment_usage(user_id, response.usage.total_tokens)
        except Exception as e:
            log.error("Usage store increment failed", error=str(e))

        log.info(
            "Insight response received",
            model=response.model,
            total_tokens=response.usage.total_tokens,
            finish_reason=response.finish_reason,
        )
        return response

    async def get_rate_limit_status(self, user_id: str) -> UsageStatus:
        return await self.usage_store.get_status(user_id)

    async def reset_daily_limits(self) -> None:
        await self.usage_store.reset_daily_limits()

    # ==================== Internals ====================

    def _over_daily_budget(self, status: UsageStatus, estimated_tokens: int) -> bool:
        return (
            status.calls_today >= self.rate_limits.max_calls_per_day
            or status.tokens_today + estimated_tokens > self.rate_limits.max_tokens_per_day
        )

    def _wait_strategy(self):
        if self.retry_backoff_seconds <= 0:
            return wait_none()
        return wait_random_exponential(multiplier=self.retry_backoff_seconds, max=10)

    async def _complete_with_retries(self, prompt: Prompt, log) -> Any:
        """Issue the request, reissuing it unchanged after server errors."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait_strategy(),
            retry=retry_if_exception(_is_server_error),
            reraise=True,
            before_sleep=lambda state: log.warning(
                "Server error, retrying",
                attempt=state.attempt_number,
                error=str(state.outcome.exception()) if state.outcome else None,
            ),
        )
        async for attempt in retrying:
            with attempt:
                return await self._complete(prompt)

    async def _complete(self, prompt: Prompt) -> Any:
        """
        Issue one completion call.

        Raises:
            asyncio.TimeoutError: If the call exceeds timeout_seconds
            LLMAPIError: For any other failure, chained to the provider error
        """
        model = self.model if "/" in self.model else f"openai/{self.model}"
        try:
            return await asyncio.wait_for(
                self._completion(
                    model=model,
                    messages=[
                        {"role": "system", "content": prompt.system_prompt},
                        {"role": "user", "content": prompt.user_prompt},
                    ],
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    api_base=self.base_url,
                    api_key=self.api_key,
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, TimeoutError, litellm.Timeout):
            raise
        except Exception as e:
            status = getattr(e, "status_code", None)
            raise LLMAPIError(status if isinstance(status, int) else None, str(e)) from e

    def _parse_response(self, raw: Any) -> InsightResponse:
        choice = raw.choices[0]
        usage = getattr(raw, "usage", None)
        return InsightResponse(
            content=choice.message.content or "",
            model=getattr(raw, "model", None) or self.model,
            usage=TokenUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            ),
            finish_reason=getattr(choice, "finish_reason", None) or "",
        )

    def _fallback(self, reason: FallbackReason, prompt: Prompt) -> FallbackResponse:
        return FallbackResponse(
            content=generate_fallback(prompt.kind, prompt.language, self._rng),
            reason=reason,
        )


def generate_fallback(kind: str, language: str, rng: Optional[random.Random] = None) -> str:
    """Pick a localized fallback insight for the given kind."""
    pool = FALLBACKS[kind][language]
    return (rng or random).choice(pool)
