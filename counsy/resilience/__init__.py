"""Resilience patterns for external calls

Retry with exponential backoff for the database and the LLM completion API.
"""

from counsy.resilience.retry import retry_with_backoff, is_retryable_error

__all__ = [
    "retry_with_backoff",
    "is_retryable_error",
]
