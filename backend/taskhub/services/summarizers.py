"""Summarizer Strategies — offline fallback and Anthropic-backed implementations.

Invariants:
    - Exactly one strategy is chosen per process, at startup, by build_summarizer()
    - LocalFallbackSummarizer is deterministic: first three lines, space-joined,
      prefixed "Summary (fallback): "
    - RemoteSummarizer never returns an empty string ("No summary generated." instead)
    - Upstream failures propagate as UpstreamServiceError (502), no retries

Design Decisions:
    - Strategy objects over an inline "is a key configured?" branch in the service
"""

import logging

from taskhub.config import Settings
from taskhub.core.ports import Summarizer
from taskhub.infrastructure.anthropic_client import AnthropicSummaryClient

logger = logging.getLogger(__name__)

FALLBACK_PREFIX = "Summary (fallback): "
FALLBACK_LINE_COUNT = 3
EMPTY_SUMMARY = "No summary generated."

SYSTEM_PROMPT = "You summarize task lists into a concise overview."


def build_prompt(text: str) -> str:
    return f"Summarize the following tasks for a status update:\n\n{text}"


class LocalFallbackSummarizer:
    """Used when no summarizer API key is configured."""

    async def summarize(self, text: str) -> str:
        lines = [line for line in text.splitlines() if line]
        return FALLBACK_PREFIX + " ".join(lines[:FALLBACK_LINE_COUNT])


class RemoteSummarizer:
    def __init__(self, client: AnthropicSummaryClient):
        self.client = client

    async def summarize(self, text: str) -> str:
        summary = await self.client.complete(
            system=SYSTEM_PROMPT, prompt=build_prompt(text),
        )
        return summary or EMPTY_SUMMARY


def build_summarizer(settings: Settings) -> Summarizer:
    """Pick the summarizer strategy from configuration."""
    api_key = settings.anthropic_api_key.strip()
    if not api_key:
        logger.info("No summarizer API key configured, using offline fallback")
        return LocalFallbackSummarizer()
    logger.info(f"Using remote summarizer ({settings.summary_model})")
    return RemoteSummarizer(AnthropicSummaryClient(
        api_key=api_key,
        model=settings.summary_model,
        max_tokens=settings.summary_max_tokens,
        timeout_seconds=settings.summary_timeout_seconds,
    ))
