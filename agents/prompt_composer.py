"""
Prompt composition for evening summaries and morning focus.

Renders an aggregation into a bilingual system/user prompt pair, estimates its
token cost and can shrink it to a token budget. User-authored text is scrubbed
of PII before it is embedded.
"""

import math
import random
from typing import Dict, List, Optional, Tuple

from agents.aggregator import TimeWindowAggregator
from config.settings import settings
from core import get_logger
from prompts import (
    BREATHING_RECOMMENDATIONS,
    EVENING_FALLBACK_USER_PROMPT,
    EVENING_NO_DATA,
    EVENING_SYSTEM_PROMPT,
    EVENING_USER_PROMPT,
    MORNING_FALLBACK_USER_PROMPT,
    MORNING_IMPULSES,
    MORNING_NO_DATA,
    MORNING_SYSTEM_PROMPT,
    MORNING_USER_PROMPT,
)
from schemas import (
    EveningAggregation,
    InsightKind,
    Language,
    MorningAggregation,
    Prompt,
    PromptConfig,
    ScrubOptions,
)
from utils.pii_redactor import PIIRedactor, pii_redactor

logger = get_logger(__name__)

CHARS_PER_TOKEN = 4
ELLIPSIS = "..."


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


class PromptComposer:
    """
    Builds insight prompts from aggregations.

    Usage:
        composer = PromptComposer()
        prompt = composer.build_evening_prompt(aggregation, PromptConfig(language="en"))
        if not composer.validate_prompt_size(prompt):
            prompt = composer.optimize_for_token_budget(prompt)
    """

    def __init__(
        self,
        redactor: Optional[PIIRedactor] = None,
        rng: Optional[random.Random] = None,
        max_tokens: Optional[int] = None,
        target_tokens: Optional[int] = None,
    ):
        self.redactor = redactor or pii_redactor
        self._rng = rng or random.Random()
        self.max_tokens = max_tokens or settings.PROMPT_MAX_TOKENS
        self.target_tokens = target_tokens or settings.PROMPT_TARGET_TOKENS

    # ==================== Builders ====================

    def build_evening_prompt(
        self, aggregation: EveningAggregation, config: Optional[PromptConfig] = None
    ) -> Prompt:
        """Build the evening reflection prompt for a 24-hour aggregation."""
        language, redact, scrub_options = self._resolve(config)
        redactions: Dict[str, str] = {}
        if redact and aggregation.has_data:
            aggregation, redactions = self._redact_evening(aggregation, scrub_options)

        data = TimeWindowAggregator(language).format_for_ai_prompt(aggregation) or EVENING_NO_DATA[language]
        return self._make_prompt(
            EVENING_SYSTEM_PROMPT[language],
            EVENING_USER_PROMPT[language].format(data=data),
            language,
            "evening",
            redactions,
        )

    def build_morning_prompt(
        self, aggregation: MorningAggregation, config: Optional[PromptConfig] = None
    ) -> Prompt:
        """Build the morning focus prompt from yesterday's summary and today's impulses."""
        language, redact, scrub_options = self._resolve(config)
        redactions: Dict[str, str] = {}
        if redact and aggregation.last_evening_summary:
            scrubbed, redactions = self.redactor.scrub_many([aggregation.last_evening_summary], scrub_options)
            aggregation = aggregation.model_copy(update={"last_evening_summary": scrubbed[0]})

        data = TimeWindowAggregator(language).format_for_ai_prompt(aggregation) or MORNING_NO_DATA[language]
        return self._make_prompt(
            MORNING_SYSTEM_PROMPT[language],
            MORNING_USER_PROMPT[language].format(data=data),
            language,
            "morning",
            redactions,
        )

    def build_fallback_prompt(self, kind: InsightKind, language: Language) -> Prompt:
        """Build a data-free prompt asking for a general reflection or focus."""
        if kind == "evening":
            return self._make_prompt(
                EVENING_SYSTEM_PROMPT[language], EVENING_FALLBACK_USER_PROMPT[language], language, "evening"
            )
        return self._make_prompt(
            MORNING_SYSTEM_PROMPT[language], MORNING_FALLBACK_USER_PROMPT[language], language, "morning"
        )

    # ==================== Budget ====================

    def validate_prompt_size(self, prompt: Prompt) -> bool:
        return prompt.estimated_token_count <= self.max_tokens

    def optimize_for_token_budget(self, prompt: Prompt, target_tokens: Optional[int] = None) -> Prompt:
        """
        Shrink a prompt to a token target by truncating the user prompt.

        The system prompt is never touched. Returns the same prompt when it is
        already within the target; otherwise the result is strictly smaller.
        """
        target = target_tokens if target_tokens is not None else self.target_tokens
        if prompt.estimated_token_count <= target:
            return prompt

        system_tokens = estimate_tokens(prompt.system_prompt)
        keep = min(max(0, (target - system_tokens) * CHARS_PER_TOKEN), len(prompt.user_prompt))

        user_prompt = prompt.user_prompt[:keep] + ELLIPSIS
        estimated = estimate_tokens(prompt.system_prompt + user_prompt)
        # Appending the ellipsis can cost a token; cut further until it actually shrinks
        while estimated >= prompt.estimated_token_count and keep > 0:
            keep = max(0, keep - CHARS_PER_TOKEN)
            user_prompt = prompt.user_prompt[:keep] + ELLIPSIS
            estimated = estimate_tokens(prompt.system_prompt + user_prompt)
        if estimated >= prompt.estimated_token_count:
            # Tiny user prompt: the ellipsis alone would not shrink it
            user_prompt = ""
            estimated = estimate_tokens(prompt.system_prompt)

        logger.info(
            "Prompt truncated to token budget",
            kind=prompt.kind,
            before=prompt.estimated_token_count,
            after=estimated,
            target=target,
        )
        return prompt.model_copy(update={"user_prompt": user_prompt, "estimated_token_count": estimated})

    # ==================== Random helpers ====================

    def get_random_breathing_recommendation(self, language: Language) -> str:
        return self._rng.choice(BREATHING_RECOMMENDATIONS[language])

    def get_random_morning_impulses(self, language: Language, count: int = 3) -> List[str]:
        """Draw distinct impulses from the language pool."""
        pool = MORNING_IMPULSES[language]
        return self._rng.sample(pool, max(0, min(count, len(pool))))

    # ==================== Internals ====================

    @staticmethod
    def _resolve(config: Optional[PromptConfig]) -> Tuple[Language, bool, Optional[ScrubOptions]]:
        config = config or PromptConfig()
        language = config.language or settings.DEFAULT_LANGUAGE
        redact = config.redact_pii if config.redact_pii is not None else settings.REDACT_PII
        return language, redact, config.scrub_options

    def _redact_evening(
        self, aggregation: EveningAggregation, options: Optional[ScrubOptions]
    ) -> Tuple[EveningAggregation, Dict[str, str]]:
        diary = aggregation.diary_entries
        gratitude = aggregation.gratitude_entries
        scrubbed, redactions = self.redactor.scrub_many(
            [e.text for e in diary] + [e.text for e in gratitude], options
        )
        redacted = aggregation.model_copy(
            update={
                "diary_entries": [e.model_copy(update={"text": t}) for e, t in zip(diary, scrubbed)],
                "gratitude_entries": [
                    e.model_copy(update={"text": t}) for e, t in zip(gratitude, scrubbed[len(diary):])
                ],
            }
        )
        return redacted, redactions

    @staticmethod
    def _make_prompt(
        system_prompt: str,
        user_prompt: str,
        language: Language,
        kind: InsightKind,
        redactions: Optional[Dict[str, str]] = None,
    ) -> Prompt:
        return Prompt(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            estimated_token_count=estimate_tokens(system_prompt + user_prompt),
            language=language,
            kind=kind,
            redactions=redactions or {},
        )
