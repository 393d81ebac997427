"""
Testes unitários para Rate Limiting.

Usa mocks para Redis para testar a lógica sem dependência externa.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException, Request
from redis.exceptions import ConnectionError as RedisConnectionError

from biblioteca.core.rate_limit import RateLimiter, client_ip


@pytest.fixture
def mock_request():
    """Cria mock de Request."""
    request = MagicMock(spec=Request)
    request.client.host = "127.0.0.1"
    request.headers = {}
    return request


@pytest.fixture
def mock_settings():
    with patch("biblioteca.core.rate_limit.settings") as settings:
        settings.RATE_LIMIT_ENABLED = True
        settings.RATE_LIMIT_REQUESTS = 60
        settings.RATE_LIMIT_WINDOW_SECONDS = 60
        yield settings


class TestClientIp:

    def test_direct_client(self, mock_request):
        assert client_ip(mock_request) == "127.0.0.1"

    def test_forwarded_for(self, mock_request):
        mock_request.headers = {"X-Forwarded-For": "200.1.2.3, 10.0.0.1"}

        assert client_ip(mock_request) == "200.1.2.3"


class TestRateLimiter:
    """Testes para o RateLimiter."""

    @pytest.mark.anyio
    async def test_disabled_allows_all(self, mock_request, mock_settings):
        mock_settings.RATE_LIMIT_ENABLED = False
        mock_redis = AsyncMock()

        with patch("biblioteca.db.redis.redis_client", mock_redis):
            await RateLimiter()(mock_request)

        mock_redis.incr.assert_not_called()

    @pytest.mark.anyio
    async def test_redis_unavailable_allows_all(self, mock_request, mock_settings):
        """Quando Redis não está disponível, permite (fail-open)."""
        with patch("biblioteca.db.redis.redis_client", None):
            await RateLimiter()(mock_request)

    @pytest.mark.anyio
    async def test_first_request_sets_window(self, mock_request, mock_settings):
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 1

        with patch("biblioteca.db.redis.redis_client", mock_redis):
            await RateLimiter(requests=10, window=30, scope="login")(mock_request)

        mock_redis.incr.assert_called_once_with("rate_limit:login:127.0.0.1")
        mock_redis.expire.assert_called_once_with("rate_limit:login:127.0.0.1", 30)

    @pytest.mark.anyio
    async def test_within_limit(self, mock_request, mock_settings):
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 30

        with patch("biblioteca.db.redis.redis_client", mock_redis):
            await RateLimiter()(mock_request)

        mock_redis.expire.assert_not_called()

    @pytest.mark.anyio
    async def test_exceeded_raises_429(self, mock_request, mock_settings):
        """Quando limite é excedido, deve lançar 429."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 61
        mock_redis.ttl.return_value = 45

        with patch("biblioteca.db.redis.redis_client", mock_redis):
            with pytest.raises(HTTPException) as exc_info:
                await RateLimiter()(mock_request)

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "45"

    @pytest.mark.anyio
    async def test_redis_error_fails_open(self, mock_request, mock_settings):
        mock_redis = AsyncMock()
        mock_redis.incr.side_effect = RedisConnectionError("conexão recusada")

        with patch("biblioteca.db.redis.redis_client", mock_redis):
            await RateLimiter()(mock_request)
