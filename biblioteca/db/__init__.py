"""
Módulo de banco de dados - conexões e sessões.

Exports:
    - Base: Classe base para modelos SQLAlchemy
    - engine: Engine async do SQLAlchemy
    - get_db: Dependency para injeção de sessão
"""

from biblioteca.db.session import Base, async_session_factory, engine, get_db

__all__ = [
    "Base",
    "engine",
    "get_db",
    "async_session_factory",
]
