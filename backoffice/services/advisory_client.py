"""
Advisory text generation (Anthropic Messages API) with bounded retries.

``AdvisoryClient.generate`` never raises. If no key is configured or the
retries run out, it returns one of the placeholder messages below.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, Optional

import anthropic
from anthropic import AsyncAnthropic

from backoffice.core.config import (
    ADVISORY_BACKOFF_MULTIPLIER,
    ADVISORY_BASE_DELAY,
    ADVISORY_MAX_ATTEMPTS,
    ADVISORY_MAX_TOKENS,
    ADVISORY_MODEL,
    ANTHROPIC_API_KEY,
)
from backoffice.core.errors import ExternalServiceFailure

log = logging.getLogger(__name__)

ADVISORY_KEY_MISSING_MESSAGE = "Advisory AI service is unavailable: API Key missing."
ADVISORY_UNAVAILABLE_MESSAGE = "Advisory AI service is unavailable."
ADVISORY_EMPTY_MESSAGE = "AI failed to generate a suggestion."


@dataclass
class RetryPolicy:
    max_attempts: int = ADVISORY_MAX_ATTEMPTS
    base_delay: float = ADVISORY_BASE_DELAY
    backoff_multiplier: float = ADVISORY_BACKOFF_MULTIPLIER
    # Bad credentials will not fix themselves
    non_retryable_statuses: FrozenSet[int] = frozenset({401, 403})
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    def delay_for(self, attempt: int) -> float:
        """Delay after the zero-based ``attempt`` failed."""
        return self.base_delay * (self.backoff_multiplier ** attempt)

    def is_retryable(self, status: Optional[int]) -> bool:
        if status is None:
            return True  # connection errors and timeouts
        if status in self.non_retryable_statuses:
            return False
        return status == 429 or status >= 500


class AdvisoryClient:
    def __init__(
        self,
        api_key: Optional[str] = ANTHROPIC_API_KEY,
        model: str = ADVISORY_MODEL,
        max_tokens: int = ADVISORY_MAX_TOKENS,
        policy: Optional[RetryPolicy] = None,
        client=None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.policy = policy or RetryPolicy()
        if client is not None:
            self.client = client
        elif api_key:
            # The SDK's own retries are disabled; the policy is the only retry loop
            self.client = AsyncAnthropic(api_key=api_key, max_retries=0)
        else:
            self.client = None

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def _call(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIStatusError as e:
            raise ExternalServiceFailure(
                f"API returned status {e.status_code}",
                status=e.status_code,
                retryable=self.policy.is_retryable(e.status_code),
            )
        except anthropic.APIConnectionError as e:
            raise ExternalServiceFailure(f"Connection failed: {e}", retryable=True)

        texts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        return "".join(texts).strip()

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        if not self.is_available:
            log.error("ANTHROPIC_API_KEY is not set.")
            return ADVISORY_KEY_MISSING_MESSAGE

        attempts = max(self.policy.max_attempts, 1)
        for attempt in range(attempts):
            try:
                text = await self._call(system_prompt, user_prompt)
                return text or ADVISORY_EMPTY_MESSAGE
            except ExternalServiceFailure as e:
                log.error(f"Advisory API attempt {attempt + 1} failed: {e.message}")
                if not e.retryable:
                    break
                if attempt < attempts - 1:
                    await self.policy.sleep(self.policy.delay_for(attempt))

        return ADVISORY_UNAVAILABLE_MESSAGE
