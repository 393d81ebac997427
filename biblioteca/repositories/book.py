"""
Repository de leitura do catálogo de livros.
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from biblioteca.models.book import Book


class BookRepository:
    """Repository SQLAlchemy do catálogo (implementa BookCatalog)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def titles_by_ids(self, book_ids: Sequence[int]) -> dict[int, str]:
        """
        Títulos dos livros informados.

        Livros inexistentes ou sem título ficam fora do dicionário.
        """
        ids = {book_id for book_id in book_ids if book_id is not None}
        if not ids:
            return {}
        result = await self.db.execute(
            select(Book.id, Book.titulo).where(Book.id.in_(ids))
        )
        return {book_id: titulo for book_id, titulo in result.all() if titulo}
