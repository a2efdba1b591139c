"""Async OpenAI chat-completion wrapper used to generate test files.

``GenerationClient`` makes one request per call and retries rate limits and
transient connection failures itself. ``DryRunClient`` has the same interface
and never touches the network.
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
import re
from typing import Any, Protocol

from openai import APIConnectionError, APIError, APITimeoutError, AsyncOpenAI, RateLimitError

from e2egen.config import API_KEY_ENV
from e2egen.exceptions import ConfigurationError, GenerationError, GenerationRateLimitError

logger = logging.getLogger(__name__)

MODEL = "gpt-4o"
MAX_COMPLETION_TOKENS = 16_384

# Retry settings for rate-limit (429) errors
_RATE_LIMIT_MAX_RETRIES = 8
_RATE_LIMIT_BASE_DELAY = 5  # seconds, floor for exponential backoff


class TextGenerator(Protocol):
    """Anything that turns a system + user message pair into response text."""

    async def generate(self, system: str, user: str) -> str: ...


def _parse_retry_after(exc: RateLimitError) -> float | None:
    """Extract the suggested retry delay from an OpenAI rate limit error.

    Checks the ``Retry-After`` header first, then falls back to parsing
    the "Please try again in Xs / Xms" substring from the error message.
    Returns seconds as a float, or None if not found.
    """
    try:
        headers = exc.response.headers  # type: ignore[union-attr]
        if retry_after := headers.get("retry-after"):
            return float(retry_after)
    except (AttributeError, TypeError, ValueError):
        pass

    m = re.search(r"try again in (\d+(?:\.\d+)?)\s*(ms|s)\b", str(exc), re.IGNORECASE)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value

    return None


def _is_too_large(exc: Exception) -> bool:
    msg = str(exc).lower()
    return "request too large" in msg or "context_length_exceeded" in msg


class GenerationClient:
    """Single request/response chat completions against the OpenAI API."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = MODEL,
        max_retries: int = _RATE_LIMIT_MAX_RETRIES,
    ) -> None:
        api_key = api_key or os.environ.get(API_KEY_ENV)
        if not api_key:
            raise ConfigurationError(
                f"No OpenAI API key: pass --api-key, set api_key in the config, or export {API_KEY_ENV}",
            )
        self.model = model
        self.max_retries = max_retries
        self._client = AsyncOpenAI(api_key=api_key)

    async def _call_with_retry(self, **kwargs: Any) -> Any:
        """Call chat.completions.create with exponential backoff on 429 errors.

        Waits at least as long as OpenAI's suggested retry-after time, uses
        exponential backoff as a floor, and adds ±25% jitter. A request that
        is itself over the model's context limit fails immediately.
        """
        for attempt in range(self.max_retries):
            try:
                return await self._client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                if _is_too_large(exc):
                    logger.error("Request exceeds token limit (not retryable): %s", exc)
                    raise GenerationError("Request exceeds the model's token limit", detail=str(exc)) from exc
                if attempt == self.max_retries - 1:
                    raise GenerationRateLimitError(detail=str(exc)) from exc

                backoff = _RATE_LIMIT_BASE_DELAY * (2 ** attempt)
                suggested = _parse_retry_after(exc)
                base_delay = max(suggested or 0.0, backoff)
                jitter = random.uniform(-0.25 * base_delay, 0.25 * base_delay)
                delay = max(1.0, base_delay + jitter)

                logger.warning(
                    "Rate limited (429), retrying in %.1fs (attempt %d/%d, "
                    "suggested=%.1fs, backoff=%ds): %s",
                    delay, attempt + 1, self.max_retries,
                    suggested or 0.0, backoff, exc,
                )
                await asyncio.sleep(delay)
            except (APIConnectionError, APITimeoutError) as exc:
                if attempt == self.max_retries - 1:
                    raise GenerationError("Could not reach the OpenAI API", detail=str(exc)) from exc
                # Transient network errors: short backoff capped at ~40 s
                backoff = _RATE_LIMIT_BASE_DELAY * (2 ** min(attempt, 3))
                jitter = random.uniform(-0.25 * backoff, 0.25 * backoff)
                delay = max(2.0, backoff + jitter)
                logger.warning(
                    "Connection error, retrying in %.1fs (attempt %d/%d): %s",
                    delay, attempt + 1, self.max_retries, exc,
                )
                await asyncio.sleep(delay)
            except APIError as exc:
                if _is_too_large(exc):
                    raise GenerationError("Request exceeds the model's token limit", detail=str(exc)) from exc
                raise GenerationError(f"OpenAI API error: {exc}", detail=str(exc)) from exc
        raise GenerationError("No attempts made (max_retries must be positive)")

    async def generate(self, system: str, user: str) -> str:
        response = await self._call_with_retry(
            model=self.model,
            max_tokens=MAX_COMPLETION_TOKENS,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        )
        usage = getattr(response, "usage", None)
        if usage:
            logger.debug(
                "Tokens: %d in / %d out",
                getattr(usage, "prompt_tokens", 0), getattr(usage, "completion_tokens", 0),
            )
        return response.choices[0].message.content or ""


_DRY_RUN_RESPONSE = """\
Here is a smoke test for the provided code.

```typescript
// [Filename: dry-run-{index}.spec.ts]
import {{ test, expect }} from '@playwright/test';

test('page renders (chunk {index})', async ({{ page }}) => {{
  await page.goto('/');
  await expect(page.locator('body')).toBeVisible();
}});
```
"""

_CHUNK_RE = re.compile(r"Chunk (\d+) of \d+")


class DryRunClient:
    """Drop-in replacement for GenerationClient that makes zero API calls.

    Returns one canned, correctly marked spec file per chunk so the whole
    pipeline, including parsing and writing, can run offline.
    """

    model = "dry-run"

    async def generate(self, system: str, user: str) -> str:
        m = _CHUNK_RE.search(user)
        index = m.group(1) if m else "1"
        logger.info("[dry-run] Generating canned response for chunk %s", index)
        return _DRY_RUN_RESPONSE.format(index=index)
