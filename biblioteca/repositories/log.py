"""
Repository do log de auditoria.

Cada evento é gravado em sessão própria: uma falha no log nunca desfaz nem
expira os objetos da sessão do request.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from biblioteca.models.log_entry import LogEntry


class LogRepository:
    """Repository SQLAlchemy do log (implementa AuditLog)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def append(
        self,
        actor: str,
        action: str,
        at: datetime,
        request_id: int | None = None,
        book_id: int | None = None,
    ) -> None:
        """Insere um evento de auditoria em transação própria."""
        async with self.session_factory() as session:
            session.add(
                LogEntry(
                    usuario=actor,
                    action=action,
                    created_at=at,
                    request_id=request_id,
                    libro_id=book_id,
                )
            )
            await session.commit()
