"""
Rate limiting das rotas públicas usando Redis (janela fixa por IP).

Protege o login (verificação de senha bcrypt é custosa) e o envio público de
solicitações. Configurável via variáveis de ambiente:
    - RATE_LIMIT_ENABLED: bool (default: True)
    - RATE_LIMIT_REQUESTS: int (default: 60)
    - RATE_LIMIT_WINDOW_SECONDS: int (default: 60)

Sem Redis disponível a requisição passa (fail-open).

Uso:
    @router.post("/login")
    async def login(_: None = Depends(rate_limit_login)):
        ...
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from redis.exceptions import RedisError

from biblioteca.core.config import get_settings
from biblioteca.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()


def client_ip(request: Request) -> str:
    """IP do cliente, respeitando o primeiro hop de X-Forwarded-For."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """
    Dependency de rate limiting.

    Args:
        requests: Número máximo de requests por janela (default: config)
        window: Janela de tempo em segundos (default: config)
        scope: Nome da rota protegida, compõe a chave no Redis
    """

    def __init__(
        self,
        requests: Optional[int] = None,
        window: Optional[int] = None,
        scope: str = "default",
    ):
        self.requests = requests
        self.window = window
        self.scope = scope

    @property
    def limit(self) -> int:
        return self.requests or settings.RATE_LIMIT_REQUESTS

    @property
    def window_seconds(self) -> int:
        return self.window or settings.RATE_LIMIT_WINDOW_SECONDS

    async def __call__(self, request: Request) -> None:
        """
        Conta o request na janela atual.

        Raises:
            HTTPException 429: Limite excedido (com Retry-After)
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        client = redis_db.redis_client
        if client is None:
            return

        key = f"rate_limit:{self.scope}:{client_ip(request)}"
        try:
            current = await client.incr(key)
            if current == 1:
                await client.expire(key, self.window_seconds)
            if current <= self.limit:
                return
            ttl = await client.ttl(key)
        except RedisError as e:
            logger.warning(f"Rate limit indisponível ({type(e).__name__}); liberando request")
            return

        retry_after = max(int(ttl), 1)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Muitas requisições. Tente novamente em {retry_after} segundos.",
            headers={"Retry-After": str(retry_after)},
        )


# Instâncias pré-configuradas
rate_limit_login = RateLimiter(requests=10, window=60, scope="login")
rate_limit_public_requests = RateLimiter(requests=20, window=60, scope="requests")
