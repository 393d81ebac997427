"""
Implementações em memória dos repositórios, para testes sem PostgreSQL.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Sequence

from sqlalchemy.exc import OperationalError

from biblioteca.models.enums import RequestStatus
from biblioteca.models.loan_request import LoanRequest


def make_request(
    request_id: int | None = None,
    status: str = RequestStatus.PENDING.value,
    due_date: date | None = None,
    book_id: int = 1,
    **overrides: Any,
) -> LoanRequest:
    """Solicitação pronta para uso nos testes."""
    values: dict[str, Any] = {
        "id": request_id,
        "book_id": book_id,
        "requester_name": "Ana Pérez",
        "requester_email": "ana@colegio.cl",
        "requester_rut": "12345678-9",
        "requester_phone": "+56911112222",
        "requester_address": "Av. Siempre Viva 742",
        "requester_id_photo": "",
        "book_title": None,
        "request_date": datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc),
        "status": status,
        "due_date": due_date,
    }
    values.update(overrides)
    return LoanRequest(**values)


@dataclass
class FakeUser:
    id: int
    email: str
    password: str | None = None
    rut: str | None = None
    role: Any = None
    nombre: str = ""
    last_login: datetime | None = None
    created_at: datetime | None = None


class InMemoryLoanRequestStore:
    def __init__(self, requests: Sequence[LoanRequest] = ()):
        self.rows: dict[int, LoanRequest] = {}
        self.update_calls = 0
        self._next_id = 1
        for request in requests:
            self._save(request)

    def _save(self, request: LoanRequest) -> LoanRequest:
        if request.id is None:
            request.id = self._next_id
        self._next_id = max(self._next_id, request.id + 1)
        self.rows[request.id] = request
        return request

    async def find_by_id(self, request_id: int) -> LoanRequest | None:
        return self.rows.get(request_id)

    async def list_all(self) -> list[LoanRequest]:
        return sorted(self.rows.values(), key=lambda r: r.id, reverse=True)

    async def insert(self, request: LoanRequest) -> LoanRequest:
        return self._save(request)

    async def update(self, request: LoanRequest) -> LoanRequest:
        self.update_calls += 1
        self.rows[request.id] = request
        return request


class InMemoryPrincipalStore:
    def __init__(self, users: Sequence[FakeUser] = (), fail_touch: bool = False):
        self.users = {user.id: user for user in users}
        self.fail_touch = fail_touch

    async def find_by_id(self, user_id: int) -> FakeUser | None:
        return self.users.get(user_id)

    async def find_by_email(self, email: str) -> FakeUser | None:
        target = email.strip().lower()
        for user in self.users.values():
            if user.email.strip().lower() == target:
                return user
        return None

    async def touch_last_login(self, user_id: int, at: datetime) -> None:
        if self.fail_touch:
            raise OperationalError("UPDATE usuarios", {}, Exception("conexão perdida"))
        self.users[user_id].last_login = at


class InMemoryBookCatalog:
    def __init__(self, titles: dict[int, str] | None = None):
        self.titles = titles or {}

    async def titles_by_ids(self, book_ids: Sequence[int]) -> dict[int, str]:
        return {i: self.titles[i] for i in book_ids if i in self.titles}


@dataclass
class InMemoryAuditLog:
    entries: list[dict[str, Any]] = field(default_factory=list)
    fail: bool = False

    async def append(
        self,
        actor: str,
        action: str,
        at: datetime,
        request_id: int | None = None,
        book_id: int | None = None,
    ) -> None:
        if self.fail:
            raise OperationalError("INSERT INTO logs", {}, Exception("tabela indisponível"))
        self.entries.append(
            {
                "actor": actor,
                "action": action,
                "at": at,
                "request_id": request_id,
                "book_id": book_id,
            }
        )

    @property
    def actions(self) -> list[str]:
        return [entry["action"] for entry in self.entries]
