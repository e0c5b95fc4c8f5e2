"""Unit tests for API authentication and rate-limit keys"""
import pytest
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from counsy.api.auth import verify_api_key
from counsy.api.middleware import rate_limit_key
from counsy.config import get_api_keys
from counsy.exceptions import AuthenticationError, ConfigurationError


def _bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _request(headers=None, client=("10.0.0.7", 51234)):
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/api/health",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    })


def test_get_api_keys_parses_env(monkeypatch):
    monkeypatch.setenv("API_KEYS", " key_a, ,key_b ")

    assert get_api_keys() == ["key_a", "key_b"]


def test_get_api_keys_empty(monkeypatch):
    monkeypatch.delenv("API_KEYS", raising=False)

    assert get_api_keys() == []


@pytest.mark.asyncio
async def test_verify_api_key_valid(monkeypatch):
    monkeypatch.setenv("API_KEYS", "key_a,key_b")

    assert await verify_api_key(_bearer("key_b")) == "key_b"


@pytest.mark.asyncio
async def test_verify_api_key_invalid(monkeypatch):
    monkeypatch.setenv("API_KEYS", "key_a")

    with pytest.raises(AuthenticationError):
        await verify_api_key(_bearer("key_a_but_longer"))


@pytest.mark.asyncio
async def test_verify_api_key_missing_header(monkeypatch):
    monkeypatch.setenv("API_KEYS", "key_a")

    with pytest.raises(AuthenticationError):
        await verify_api_key(None)


@pytest.mark.asyncio
async def test_verify_api_key_not_configured(monkeypatch):
    monkeypatch.setenv("API_KEYS", "")

    with pytest.raises(ConfigurationError):
        await verify_api_key(_bearer("anything"))


def test_rate_limit_key_uses_api_key():
    first = rate_limit_key(_request({"Authorization": "Bearer key_a"}))
    second = rate_limit_key(_request({"Authorization": "Bearer key_a"}, client=("10.0.0.8", 40000)))

    assert first == second
    assert first.startswith("key:")
    assert "key_a" not in first


def test_rate_limit_key_falls_back_to_ip():
    assert rate_limit_key(_request()) == "10.0.0.7"
    assert rate_limit_key(_request({"Authorization": "Basic abc"})) == "10.0.0.7"
