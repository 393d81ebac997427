"""
Conexão com Redis (contadores de rate limiting).

O cliente é criado no startup da aplicação; enquanto for None, o rate
limiting fica desligado.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from biblioteca.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

redis_client: Optional[redis.Redis] = None


async def init_redis() -> redis.Redis:
    """Cria o cliente Redis global a partir de REDIS_URL."""
    global redis_client
    redis_client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
    )
    return redis_client


async def close_redis() -> None:
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None


async def check_redis_connection() -> bool:
    """
    Verifica se o Redis responde ao PING.

    Returns:
        True se conectou com sucesso, False caso contrário.
    """
    if redis_client is None:
        return False
    try:
        await redis_client.ping()
        return True
    except RedisError as e:
        logger.warning(f"Erro ao verificar conexão Redis: {e}")
        return False
