"""
Interfaces dos repositórios usados pelos services.

Os services dependem apenas destes protocolos; a implementação concreta
(SQLAlchemy) é injetada pelas dependencies em `biblioteca.core.deps`.
"""

from datetime import datetime
from typing import Any, Protocol, Sequence

from biblioteca.models.loan_request import LoanRequest


class LoanRequestStore(Protocol):
    """Persistência de solicitações de empréstimo."""

    async def find_by_id(self, request_id: int) -> LoanRequest | None: ...

    async def list_all(self) -> list[LoanRequest]: ...

    async def insert(self, request: LoanRequest) -> LoanRequest: ...

    async def update(self, request: LoanRequest) -> LoanRequest: ...


class PrincipalStore(Protocol):
    """Leitura de usuários para login e re-resolução de roles."""

    async def find_by_id(self, user_id: int) -> Any | None: ...

    async def find_by_email(self, email: str) -> Any | None: ...

    async def touch_last_login(self, user_id: int, at: datetime) -> None: ...


class BookCatalog(Protocol):
    """Consulta de títulos do catálogo."""

    async def titles_by_ids(self, book_ids: Sequence[int]) -> dict[int, str]: ...


class AuditLog(Protocol):
    """Log de auditoria (somente escrita)."""

    async def append(
        self,
        actor: str,
        action: str,
        at: datetime,
        request_id: int | None = None,
        book_id: int | None = None,
    ) -> None: ...
