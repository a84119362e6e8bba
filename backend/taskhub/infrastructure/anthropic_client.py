"""Anthropic Summary Client — wraps AsyncAnthropic with timeout and error mapping.

Invariants:
    - No retries: the SDK client is built with max_retries=0 and nothing here loops
    - Every SDK failure mapped to UpstreamServiceError (core/errors.py), carrying
      the upstream error text
    - Only text blocks of the response are returned, joined and stripped

Design Decisions:
    - Wrapper over raw client: the summarizer strategy never touches SDK types
    - Timeout enforced by the SDK client itself (summary_timeout_seconds)
"""

import logging

import anthropic
from anthropic import (
    APIError,
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
)

from taskhub.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

_ERROR_PREFIX = "AI summary failed"


def _status_error_text(e: APIStatusError) -> str:
    """Upstream response body when available, SDK message otherwise."""
    try:
        body = e.response.text
    except Exception:
        body = ""
    return body or e.message or str(e)


class AnthropicSummaryClient:
    """Single-shot text completion against the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 200,
        timeout_seconds: int = 30,
        temperature: float = 0.3,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete(self, *, system: str, prompt: str) -> str:
        """Send one user turn, return the generated text ("" if none)."""
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except APITimeoutError:
            raise UpstreamServiceError(
                f"{_ERROR_PREFIX}: upstream timeout", "timeout",
            )
        except APIConnectionError as e:
            raise UpstreamServiceError(
                f"{_ERROR_PREFIX}: {e}", "connection_error",
            )
        except APIStatusError as e:
            logger.warning(
                f"Anthropic returned HTTP {e.status_code}",
                extra={"status_code": e.status_code},
            )
            raise UpstreamServiceError(
                f"{_ERROR_PREFIX}: {_status_error_text(e)}", "status_error",
            )
        except APIError as e:
            raise UpstreamServiceError(
                f"{_ERROR_PREFIX}: {e}", "client_error",
            )

        self._log_success(response)
        parts = [
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        ]
        return "".join(parts).strip()

    def _log_success(self, response) -> None:
        usage = getattr(response, "usage", None)
        logger.info(
            "Anthropic API success",
            extra={
                "event": "SUMMARY_UPSTREAM_OK",
                "count": getattr(usage, "output_tokens", None),
            },
        )
