"""API middleware for rate limiting and CORS"""
import hashlib
import logging
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from counsy.config import CORS_ORIGINS

logger = logging.getLogger(__name__)

# Limits per client, by route cost
AI_RATE_LIMIT = "10/minute"       # every call waits on the completion service
WRITE_RATE_LIMIT = "20/minute"    # saves that may also ask for an AI insight
READ_RATE_LIMIT = "30/minute"
MONITORING_RATE_LIMIT = "60/minute"
DEFAULT_RATE_LIMIT = "100/minute"


def rate_limit_key(request: Request) -> str:
    """
    Identify the client for rate limiting

    Authenticated requests are keyed by a hash of their API key. Requests
    without a bearer token fall back to the client IP.
    """
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token:
        return "key:" + hashlib.sha256(token.encode()).hexdigest()[:16]
    return get_remote_address(request)


limiter = Limiter(key_func=rate_limit_key, default_limits=[DEFAULT_RATE_LIMIT])


def setup_cors(app, origins: list[str] = CORS_ORIGINS):
    """Allow the web frontend's origins"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )

    logger.info(f"CORS configured for origins: {origins}")


def setup_rate_limiting(app):
    """Configure rate limiting"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    logger.info(f"Rate limiting configured: {DEFAULT_RATE_LIMIT} per API key (or IP)")
