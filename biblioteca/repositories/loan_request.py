"""
Repository para operações de LoanRequest no banco de dados.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from biblioteca.models.loan_request import LoanRequest


class LoanRequestRepository:
    """Repository SQLAlchemy de solicitações (implementa LoanRequestStore)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, request_id: int) -> LoanRequest | None:
        """Busca solicitação por ID."""
        return await self.db.get(LoanRequest, request_id)

    async def list_all(self) -> list[LoanRequest]:
        """Lista todas as solicitações, mais recentes primeiro."""
        result = await self.db.execute(
            select(LoanRequest).order_by(LoanRequest.id.desc())
        )
        return list(result.scalars().all())

    async def insert(self, request: LoanRequest) -> LoanRequest:
        """Persiste nova solicitação e devolve com ID atribuído."""
        self.db.add(request)
        await self.db.commit()
        await self.db.refresh(request)
        return request

    async def update(self, request: LoanRequest) -> LoanRequest:
        """
        Persiste as alterações de uma solicitação.

        Um único UPDATE ... WHERE id; duas transições concorrentes no mesmo
        ID resultam em last-writer-wins.
        """
        merged = await self.db.merge(request)
        await self.db.commit()
        await self.db.refresh(merged)
        return merged
