"""
Mindful Insights - Evening summaries and morning focus from a user's journal.
Main entry point: generates one insight from a JSON data export.

Usage:
    mindful-insights evening export.json --user-id u1
    mindful-insights morning export.json --user-id u1 --language en --dry-run
"""

import argparse
import asyncio
import sys

from agents import InsightAgent, PromptComposer, TimeWindowAggregator
from config.settings import settings
from core import configure_logging, get_logger, ConfigurationError, DataSourceException
from memory.data_source import JsonFileDataSource
from schemas import PromptConfig

logger = get_logger(__name__)


async def preview_prompt(kind: str, user_id: str, source: JsonFileDataSource, language: str) -> None:
    """Print the prompt that would be sent, without calling the API."""
    aggregator = TimeWindowAggregator(language)
    composer = PromptComposer()
    config = PromptConfig(language=language)

    if kind == "evening":
        aggregation = await aggregator.aggregate_evening(user_id, source)
        prompt = composer.build_evening_prompt(aggregation, config)
    else:
        aggregation = await aggregator.aggregate_morning(user_id, source)
        prompt = composer.build_morning_prompt(aggregation, config)
    prompt = composer.optimize_for_token_budget(prompt)

    print("=" * 50)
    print(f"SYSTEM ({prompt.estimated_token_count} tokens estimated)")
    print("=" * 50)
    print(prompt.system_prompt)
    print("=" * 50)
    print("USER")
    print("=" * 50)
    print(prompt.user_prompt)
    if prompt.redactions:
        print(f"\n{len(prompt.redactions)} values redacted")


async def run_insight(kind: str, user_id: str, source: JsonFileDataSource, language: str) -> None:
    agent = InsightAgent(language=language)
    result = await agent.generate_insight(kind, user_id, source)

    print(result.content)
    if result.is_fallback:
        print(f"\n(fallback: {result.reason.value})")
    elif kind == "evening":
        source.save_evening_summary(user_id, result.content)

    stats = await agent.get_usage_stats(user_id)
    display = agent.insight_settings.format_usage_stats(stats, language)
    print(f"\n{display.calls_text} · {display.tokens_text} · {display.status_text}")


def main():
    """Generate an evening or morning insight for one user."""
    parser = argparse.ArgumentParser(description="Generate a mindful evening summary or morning focus")
    parser.add_argument("kind", choices=["evening", "morning"], help="Insight kind")
    parser.add_argument("export", help="Path to a JSON export with diary, gratitude and breathing records")
    parser.add_argument("--user-id", required=True, help="User whose records are used")
    parser.add_argument("--language", choices=["de", "en"], default=settings.DEFAULT_LANGUAGE, help="Insight language")
    parser.add_argument("--dry-run", action="store_true", help="Print the composed prompt instead of calling the API")

    args = parser.parse_args()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    logger.info("Mindful Insights starting", kind=args.kind, user_id=args.user_id, dry_run=args.dry_run)

    try:
        source = JsonFileDataSource(args.export)
        if args.dry_run:
            asyncio.run(preview_prompt(args.kind, args.user_id, source, args.language))
        else:
            asyncio.run(run_insight(args.kind, args.user_id, source, args.language))
    except (ConfigurationError, DataSourceException) as e:
        logger.error("Cannot generate insight", **e.to_dict())
        sys.exit(1)


if __name__ == "__main__":
    main()
