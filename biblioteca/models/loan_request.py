"""
Model de solicitação de empréstimo físico.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from biblioteca.db.session import Base
from biblioteca.models.base import SerialIdMixin
from biblioteca.models.enums import RequestStatus


class LoanRequest(Base, SerialIdMixin):
    """
    Solicitação de empréstimo de um livro físico.

    Criada como `pendiente` por qualquer visitante e alterada apenas pela
    transição de status feita por um admin. Nunca é removida.

    Attributes:
        id: ID sequencial
        book_id: ID do livro solicitado (tabela libros)
        requester_name: Nome do solicitante ("Visitante" se ausente)
        requester_email: Email de contato
        requester_rut: Documento nacional (opcional)
        requester_phone: Telefone
        requester_address: Endereço
        requester_id_photo: Referência da foto do documento
        book_title: Título em cache no momento da solicitação
        request_date: Data/hora da solicitação (imutável)
        status: Valor de RequestStatus
        due_date: Data de devolução (definida na aprovação)
        approved_at: Data/hora da aprovação
        picked_at: Data/hora da retirada
        returned_at: Data/hora da devolução
        updated_at: Última transição
    """
    __tablename__ = "requests"

    book_id: Mapped[int] = mapped_column(Integer, nullable=False)
    requester_name: Mapped[str] = mapped_column(String(255), nullable=False)
    requester_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    requester_rut: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    requester_phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    requester_address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    requester_id_photo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    book_title: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    request_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RequestStatus.PENDING.value,
    )
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    picked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    returned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_requests_status", "status"),
        Index("ix_requests_book_id", "book_id"),
        # Relatório de vencidos filtra por status + due_date
        Index("ix_requests_status_due_date", "status", "due_date"),
    )

    def __repr__(self) -> str:
        return f"<LoanRequest {self.id} - {self.status}>"
