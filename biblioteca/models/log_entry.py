"""
Model do log de auditoria (somente escrita).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from biblioteca.db.session import Base
from biblioteca.models.base import SerialIdMixin


class LogEntry(Base, SerialIdMixin):
    """
    Evento de auditoria.

    Attributes:
        usuario: Ator (email do usuário ou do solicitante)
        action: Ação executada (login, request_created, request_aprobado, ...)
        created_at: Momento do evento
        libro_id: Livro relacionado (opcional)
        request_id: Solicitação relacionada (opcional)
    """
    __tablename__ = "logs"

    usuario: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    libro_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    request_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<LogEntry {self.action} by {self.usuario}>"
