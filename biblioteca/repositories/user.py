"""
Repository para operações de User no banco de dados.
"""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from biblioteca.models.user import User


class UserRepository:
    """Repository SQLAlchemy de usuários (implementa PrincipalStore)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, user_id: int) -> User | None:
        """Busca usuário por ID."""
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        """Busca usuário por email, ignorando maiúsculas e espaços."""
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        result = await self.db.execute(
            select(User).where(func.lower(func.trim(User.email)) == normalized)
        )
        return result.scalars().first()

    async def touch_last_login(self, user_id: int, at: datetime) -> None:
        """Registra o último login."""
        try:
            await self.db.execute(
                update(User).where(User.id == user_id).values(last_login=at)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
