"""
Exception hierarchy for counsy

Every error carries a request id, a UTC timestamp and a message that is safe
to show to a student. Errors log themselves when constructed, client mistakes
(bad input, unknown records, bad credentials) at WARNING and everything else
at ERROR. The API turns them into JSON with to_dict().
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class CounsyError(Exception):
    """
    Base exception for all counsy errors

    Example:
        raise CounsyError(
            message="Failed to save journal entry",
            user_id="4f1c...",
            operation="save_journal_entry",
            context={"entry_id": "abc-123"}
        )
    """

    default_user_message = "An error occurred. Please try again."
    log_level = logging.ERROR

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or self.default_user_message
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        extra = {
            "error_type": type(self).__name__,
            "error_message": self.message,  # 'message' is reserved by logging
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
        }
        if self.cause is not None:
            extra["cause"] = repr(self.cause)

        logger.log(
            self.log_level,
            f"{type(self).__name__}: {self.message}",
            extra=extra,
            exc_info=self.cause if self.log_level >= logging.ERROR else None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


def _merge_context(kwargs: Dict[str, Any], **fields: Any) -> Dict[str, Any]:
    kwargs["context"] = {**(kwargs.get("context") or {}), **fields}
    return kwargs


# ==========================================
# Invalid arguments
# ==========================================

class ValidationError(CounsyError):
    """
    A caller passed a malformed argument; nothing was changed

    Examples: unknown activity category, activity date that is not a calendar
    date, empty journal entry, username already taken.
    """

    log_level = logging.WARNING

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        super().__init__(message, **_merge_context(kwargs, field=field, value=repr(value)))


# ==========================================
# Database
# ==========================================

class DatabaseError(CounsyError):
    """Base class for database failures"""

    default_user_message = "We encountered an issue saving your data. Please try again."


class ConnectionError(DatabaseError):
    """The database could not be reached"""

    default_user_message = "We're having trouble connecting to the database. Please try again in a moment."

    def __init__(self, message: str = "Database connection failed", **kwargs):
        super().__init__(message, **kwargs)


class QueryError(DatabaseError):
    """A statement failed (constraint, syntax, type)"""

    def __init__(self, message: str, query: Optional[str] = None, **kwargs):
        self.query = query
        super().__init__(message, **_merge_context(kwargs, query=query))


class RecordNotFoundError(DatabaseError):
    """A profile, journal entry or other record does not exist for this user"""

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        kwargs.setdefault("user_message", f"{record_type or 'Record'} not found.")
        super().__init__(message, **_merge_context(kwargs, record_type=record_type, record_id=record_id))


class StreakPersistenceError(DatabaseError):
    """
    Recording an activity failed after all retries

    Nothing was committed: the activity's entry rolled back with the streak
    update, so submitting the activity again is safe. `state` is the last
    computed StreakState (None if the row could not be read).
    """

    default_user_message = "We couldn't save your activity. Please try again."

    def __init__(self, message: str, state: Any = None, **kwargs):
        self.state = state
        super().__init__(message, **kwargs)


# ==========================================
# External services
# ==========================================

class ExternalAPIError(CounsyError):
    """An HTTP API outside counsy failed"""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs
    ):
        self.service = service
        self.status_code = status_code
        kwargs.setdefault(
            "user_message",
            f"We're having trouble connecting to {service or 'an external service'}. Please try again later."
        )
        super().__init__(message, **_merge_context(kwargs, service=service, status_code=status_code))


class CompletionAPIError(ExternalAPIError):
    """The LLM completion API failed"""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, service="LLM completion", **kwargs)


# ==========================================
# Auth & configuration
# ==========================================

class AuthenticationError(CounsyError):
    """Missing or unknown API key"""

    default_user_message = "Authentication failed. Please check your credentials."
    log_level = logging.WARNING


class ConfigurationError(CounsyError):
    """Required configuration is missing or inconsistent"""

    default_user_message = "The system is not properly configured. Please contact support."

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        self.config_key = config_key
        super().__init__(message, **_merge_context(kwargs, config_key=config_key))


# ==========================================
# Helpers
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> CounsyError:
    """
    Map a psycopg, openai or httpx exception onto the counsy hierarchy

    Example:
        try:
            await pool.open(wait=True)
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="init_pool")
    """
    import httpx
    import openai
    import psycopg

    common = dict(user_id=user_id, operation=operation, context=context, cause=error)

    if isinstance(error, psycopg.OperationalError):
        return ConnectionError(f"Database connection failed: {error}", **common)
    if isinstance(error, psycopg.Error):
        return QueryError(f"Database query failed: {error}", **common)

    if isinstance(error, openai.APIStatusError):
        return CompletionAPIError(
            f"Completion API returned error: {error.status_code}",
            status_code=error.status_code,
            **common
        )
    if isinstance(error, openai.APIError):
        return CompletionAPIError(f"Completion API request failed: {error}", **common)

    if isinstance(error, httpx.TimeoutException):
        return ExternalAPIError(f"API request timed out: {error}", **common)
    if isinstance(error, httpx.HTTPStatusError):
        return ExternalAPIError(
            f"API returned error: {error.response.status_code}",
            status_code=error.response.status_code,
            **common
        )

    return CounsyError(f"{operation} failed: {error}", **common)
