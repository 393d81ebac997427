"""
Sessão assíncrona do banco de dados (SQLAlchemy + asyncpg).

Uma sessão por request HTTP, entregue pela dependency `get_db`. Não há lock
em processo: a atomicidade de cada UPDATE fica a cargo do PostgreSQL.
"""

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from biblioteca.core.config import get_settings

settings = get_settings()

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base declarativa dos models (usuarios, libros, requests, logs)."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency que abre uma sessão por request e a fecha ao final."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """
    Executa um SELECT 1 para o healthcheck de startup.

    Returns:
        Tupla (sucesso, mensagem_erro)
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True, None
    except Exception as e:
        return False, str(e)
