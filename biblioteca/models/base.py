"""
Mixins compartilhados pelos models SQLAlchemy.
"""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column


class SerialIdMixin:
    """Chave primária inteira sequencial (SERIAL no PostgreSQL)."""
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
