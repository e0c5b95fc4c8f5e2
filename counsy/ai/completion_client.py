"""
LLM Completion Client

Thin wrapper around an OpenAI-compatible chat completion API (Groq by default).

Every call returns a CompletionResult:
- Completed(text): the model produced a non-empty reply
- Unavailable(reason): no key configured, the API failed after retries,
  or the reply was empty

The client never returns user-facing fallback text. Callers pick their own
canned response when the result is Unavailable.
"""
import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from counsy.models.completion import Completed, CompletionResult, Unavailable
from counsy.resilience.retry import retry_with_backoff

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Chat completion client scoped to the application lifecycle

    Constructed once at startup with explicit settings and handed to the
    services that need AI responses.
    """

    MAX_RETRIES = 2

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: str = "llama-3.1-8b-instant",
        temperature: float = 0.7,
        timeout_seconds: float = 20.0,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self._client = client

        if self._client is None and api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=httpx.Timeout(timeout_seconds, connect=5.0),
                max_retries=0,  # retries handled by retry_with_backoff
            )

        if self._client is None:
            logger.warning("No LLM API key configured. Running in demo mode.")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 150,
        temperature: Optional[float] = None,
    ) -> CompletionResult:
        """
        Request a chat completion

        Args:
            messages: OpenAI-style messages ({"role": ..., "content": ...})
            max_tokens: Reply length limit
            temperature: Overrides the client default

        Returns:
            Completed(text) or Unavailable(reason)
        """
        if self._client is None:
            return Unavailable("not_configured")

        try:
            response = await retry_with_backoff(
                self._create,
                messages,
                max_tokens,
                self.temperature if temperature is None else temperature,
                max_retries=self.MAX_RETRIES,
            )
        except openai.APIError as e:
            logger.error(f"Completion request failed: {type(e).__name__}: {e}")
            return Unavailable(f"api_error: {type(e).__name__}")
        except httpx.HTTPError as e:
            logger.error(f"Completion transport failed: {type(e).__name__}: {e}")
            return Unavailable(f"transport_error: {type(e).__name__}")

        content = None
        if response.choices:
            content = response.choices[0].message.content

        if not content or not content.strip():
            logger.warning("Completion returned empty content")
            return Unavailable("empty_response")

        return Completed(content.strip())

    async def _create(self, messages, max_tokens, temperature):
        return await self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
