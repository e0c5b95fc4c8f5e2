"""
Retry transient failures with exponential backoff and jitter

Two calls leave the process and can fail for reasons that go away on their
own: the streak transaction in Postgres and a chat completion request.
Both go through retry_with_backoff. Errors that would fail the same way
again (bad SQL, 4xx responses, programming errors) propagate on the first
attempt.
"""

import asyncio
import random
import logging
from typing import Callable, Any, TypeVar
import httpx
import openai
import psycopg

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3
BASE_DELAY = 1.0  # seconds
MAX_DELAY = 30.0  # seconds
JITTER = 0.1  # +/- 10%

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

_RETRYABLE_ERRORS = (
    httpx.TimeoutException,
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
    psycopg.OperationalError,  # dropped or refused connection, pool timeout
)


def is_retryable_error(exc: BaseException) -> bool:
    """
    True for errors worth another attempt: timeouts, throttling, 5xx
    responses, LLM connection problems and lost database connections.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, _RETRYABLE_ERRORS)


def calculate_backoff(attempt: int, base_delay: float = BASE_DELAY) -> float:
    """
    Delay before retry number `attempt` (0-indexed)

    base_delay * 2**attempt, capped at MAX_DELAY, with +/- JITTER applied.
    With the defaults: ~1s, ~2s, ~4s.
    """
    delay = min(base_delay * (2 ** attempt), MAX_DELAY)
    return max(delay * (1 + random.uniform(-JITTER, JITTER)), 0.0)


async def retry_with_backoff(
    func: Callable[..., T],
    *args: Any,
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
    **kwargs: Any
) -> T:
    """
    Await func(*args, **kwargs), retrying transient errors

    func is called at most max_retries + 1 times. The last error propagates
    unchanged so callers can wrap it in their own exception type.

    Example:
        await retry_with_backoff(queries.save_streak_state, db, user_id, state, base_delay=0.5)
    """
    name = getattr(func, "__qualname__", None) or repr(func)
    attempt = 0

    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            if not is_retryable_error(e):
                logger.warning(f"[RETRY] {name} failed with non-retryable {type(e).__name__}: {e}")
                raise

            if attempt >= max_retries:
                logger.error(f"[RETRY] {name} still failing after {max_retries} retries ({type(e).__name__})")
                raise

            backoff = calculate_backoff(attempt, base_delay)
            attempt += 1
            logger.info(f"[RETRY] {name} retry {attempt}/{max_retries} in {backoff:.2f}s ({type(e).__name__})")
            await asyncio.sleep(backoff)
