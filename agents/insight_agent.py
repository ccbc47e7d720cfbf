"""
Insight Agent - Composes aggregation, redaction, prompting and the budgeted API call.

Single entry point for the UI layer: generate_insight("evening" | "morning", ...).
"""

import random
import uuid
from datetime import datetime
from typing import Optional

from agents.aggregator import TimeWindowAggregator
from agents.insight_settings import InsightSettings
from agents.prompt_composer import PromptComposer
from config.settings import settings
from core import get_logger, InvalidInputError
from memory.data_source import DataSource
from schemas import (
    FallbackReason,
    FallbackResponse,
    InsightKind,
    InsightRequest,
    InsightResult,
    Language,
    PromptConfig,
    UsageStats,
)
from utils.llm_client import BudgetedInsightClient, generate_fallback
from utils.pii_redactor import PIIRedactor, pii_redactor

logger = get_logger(__name__)


class InsightAgent:
    """
    Generates evening summaries and morning focus insights.

    Flow:
        DataSource -> TimeWindowAggregator -> PromptComposer (PII scrubbed)
        -> BudgetedInsightClient -> placeholders restored in the answer

    Only the client's construction can raise (missing API key). Once built,
    every runtime failure ends in a FallbackResponse.
    """

    def __init__(
        self,
        client: Optional[BudgetedInsightClient] = None,
        composer: Optional[PromptComposer] = None,
        redactor: Optional[PIIRedactor] = None,
        insight_settings: Optional[InsightSettings] = None,
        language: Optional[Language] = None,
        rng: Optional[random.Random] = None,
    ):
        self._rng = rng or random.Random()
        self.client = client or BudgetedInsightClient(rng=self._rng)
        self.redactor = redactor or pii_redactor
        self.composer = composer or PromptComposer(redactor=self.redactor, rng=self._rng)
        self.insight_settings = insight_settings or InsightSettings(limits=self.client.rate_limits)
        self.language: Language = language or settings.DEFAULT_LANGUAGE
        logger.info("Insight agent initialized", language=self.language)

    async def generate_insight(
        self,
        kind: InsightKind,
        user_id: str,
        source: DataSource,
        language: Optional[Language] = None,
        now: Optional[datetime] = None,
    ) -> InsightResult:
        """
        Generate one insight for a user.

        Args:
            kind: "evening" or "morning"
            user_id: User whose data and budget are used
            source: Record source for the user
            language: Insight language (defaults to the agent's language)
            now: Reference time for the aggregation window

        Returns:
            InsightResponse, or FallbackResponse tagged with the failure reason

        Raises:
            InvalidInputError: If kind or user_id is invalid
        """
        if kind not in ("evening", "morning"):
            raise InvalidInputError("kind", f"expected 'evening' or 'morning', got {kind!r}")
        if not user_id:
            raise InvalidInputError("user_id", "must not be empty")

        language = language or self.language
        request_id = uuid.uuid4().hex[:12]
        log = logger.bind(user_id=user_id, kind=kind, request_id=request_id)

        try:
            aggregator = TimeWindowAggregator(language, rng=self._rng)
            config = PromptConfig(language=language)

            if kind == "evening":
                aggregation = await aggregator.aggregate_evening(user_id, source, now)
                if not aggregator.validate_aggregation(aggregation):
                    log.warning("Invalid aggregation window, using fallback prompt")
                    prompt = self.composer.build_fallback_prompt(kind, language)
                else:
                    prompt = self.composer.build_evening_prompt(aggregation, config)
            else:
                aggregation = await aggregator.aggregate_morning(user_id, source, now)
                if not aggregator.validate_aggregation(aggregation):
                    log.warning("Invalid aggregation window, using fallback prompt")
                    prompt = self.composer.build_fallback_prompt(kind, language)
                else:
                    prompt = self.composer.build_morning_prompt(aggregation, config)

            prompt = self.composer.optimize_for_token_budget(prompt)
            log.debug(
                "Prompt composed",
                estimated_tokens=prompt.estimated_token_count,
                redactions=len(prompt.redactions),
            )

            result = await self.client.send_request(
                InsightRequest(prompt=prompt, user_id=user_id, request_id=request_id)
            )
        except Exception as e:
            log.error("Insight generation failed", error=str(e), exc_info=True)
            return FallbackResponse(
                content=generate_fallback(kind, language, self._rng),
                reason=FallbackReason.UNKNOWN,
            )

        if result.is_fallback:
            log.info("Insight fallback returned", reason=result.reason.value)
            return result

        if prompt.redactions:
            result = result.model_copy(
                update={"content": self.redactor.unscrub(result.content, prompt.redactions)}
            )
        log.info("Insight generated", total_tokens=result.usage.total_tokens)
        return result

    async def get_usage_stats(self, user_id: str) -> UsageStats:
        """Usage counters and remaining daily budget for a user."""
        status = await self.client.get_rate_limit_status(user_id)
        return self.insight_settings.get_usage_stats(status)
