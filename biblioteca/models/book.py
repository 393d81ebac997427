"""
Model de livro do catálogo.

O catálogo é mantido por outro módulo; aqui só o título é lido, para o
relatório de empréstimos vencidos.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from biblioteca.db.session import Base
from biblioteca.models.base import SerialIdMixin


class Book(Base, SerialIdMixin):
    """Livro do catálogo (tabela `libros`)."""
    __tablename__ = "libros"

    titulo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    autor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Book {self.id} {self.titulo}>"
