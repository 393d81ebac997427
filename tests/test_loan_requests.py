"""
Testes unitários para LoanRequestService (repositórios em memória).
"""

from datetime import date, datetime, timezone
from itertools import product

import pytest

from biblioteca.core.errors import (
    InvalidDueDate,
    InvalidTransition,
    MissingDueDate,
    NotFound,
    UnsupportedStatus,
    ValidationError,
)
from biblioteca.models.enums import ALLOWED_TRANSITIONS, RequestStatus
from biblioteca.schemas.loan_request import LoanRequestCreate
from biblioteca.services.loan_request import LoanRequestService, parse_due_date
from tests.fakes import InMemoryAuditLog, InMemoryLoanRequestStore, make_request

NOW = datetime(2024, 1, 12, 15, 30, tzinfo=timezone.utc)


# ==========================================
# Fixtures
# ==========================================

@pytest.fixture
def store():
    return InMemoryLoanRequestStore()


@pytest.fixture
def audit():
    return InMemoryAuditLog()


@pytest.fixture
def service(store, audit):
    return LoanRequestService(store, audit, clock=lambda: NOW)


# ==========================================
# parse_due_date
# ==========================================

class TestParseDueDate:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-01-15", date(2024, 1, 15)),
            (" 2024-01-15 ", date(2024, 1, 15)),
            ("2024-01-15T18:00:00", date(2024, 1, 15)),
            (date(2024, 1, 15), date(2024, 1, 15)),
            (datetime(2024, 1, 15, 23, 0), date(2024, 1, 15)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_due_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value):
        with pytest.raises(MissingDueDate):
            parse_due_date(value)

    @pytest.mark.parametrize("value", ["amanhã", "2024-13-40", "15/01/2024"])
    def test_invalid(self, value):
        with pytest.raises(InvalidDueDate):
            parse_due_date(value)


# ==========================================
# Create
# ==========================================

class TestCreate:

    @pytest.mark.anyio
    async def test_creates_pending_request(self, service, store):
        payload = LoanRequestCreate.model_validate(
            {"bookId": 3, "requesterName": "Ana Pérez", "requesterEmail": "ana@colegio.cl"}
        )

        request = await service.create(payload)

        assert request.id is not None
        assert request.status == "pendiente"
        assert request.due_date is None
        assert request.request_date == NOW
        assert store.rows[request.id] is request

    @pytest.mark.anyio
    async def test_guest_name_when_requester_missing(self, service):
        request = await service.create(LoanRequestCreate.model_validate({"bookId": 3}))

        assert request.requester_name == "Visitante"
        assert request.requester_email == ""
        assert request.requester_phone == ""

    @pytest.mark.anyio
    async def test_legacy_form_fields(self, service):
        payload = LoanRequestCreate.model_validate(
            {
                "libroId": "4",
                "nombre": "Ana",
                "apellido": "Pérez",
                "rut": "12345678-9",
                "celular": 56911112222,
                "direccion": "Av. Siempre Viva 742",
            }
        )

        request = await service.create(payload)

        assert request.book_id == 4
        assert request.requester_name == "Ana Pérez"
        assert request.requester_rut == "12345678-9"
        assert request.requester_phone == "56911112222"

    @pytest.mark.anyio
    @pytest.mark.parametrize("book_id", [None, 0, -2])
    async def test_book_is_required(self, service, store, book_id):
        with pytest.raises(ValidationError):
            await service.create(LoanRequestCreate(book_id=book_id))

        assert store.rows == {}

    @pytest.mark.anyio
    async def test_creation_is_audited(self, service, audit):
        payload = LoanRequestCreate.model_validate({"bookId": 3, "email": "ana@colegio.cl"})

        request = await service.create(payload)

        assert audit.entries == [
            {
                "actor": "ana@colegio.cl",
                "action": "request_created",
                "at": NOW,
                "request_id": request.id,
                "book_id": 3,
            }
        ]

    @pytest.mark.anyio
    async def test_guest_actor(self, service, audit):
        await service.create(LoanRequestCreate.model_validate({"bookId": 3}))

        assert audit.entries[0]["actor"] == "visitante"

    @pytest.mark.anyio
    async def test_audit_failure_does_not_fail_creation(self, store):
        service = LoanRequestService(store, InMemoryAuditLog(fail=True), clock=lambda: NOW)

        request = await service.create(LoanRequestCreate.model_validate({"bookId": 3}))

        assert request.id in store.rows


# ==========================================
# Transition
# ==========================================

class TestTransition:

    @pytest.mark.anyio
    async def test_approve_sets_due_date(self, service, store, audit):
        request = await store.insert(make_request())

        updated = await service.transition(request.id, "aprobado", "2024-01-20", actor="admin@colegio.cl")

        assert updated.status == "aprobado"
        assert updated.due_date == date(2024, 1, 20)
        assert updated.approved_at == NOW
        assert updated.updated_at == NOW
        assert audit.entries[-1]["action"] == "request_aprobado"
        assert audit.entries[-1]["actor"] == "admin@colegio.cl"

    @pytest.mark.anyio
    async def test_approve_without_due_date(self, service, store):
        request = await store.insert(make_request())

        with pytest.raises(MissingDueDate) as exc_info:
            await service.transition(request.id, "aprobado")

        assert exc_info.value.status_code == 400
        assert request.status == "pendiente"
        assert store.update_calls == 0

    @pytest.mark.anyio
    async def test_approve_with_invalid_due_date(self, service, store):
        request = await store.insert(make_request())

        with pytest.raises(InvalidDueDate):
            await service.transition(request.id, "aprobado", "31/02/2024")

        assert request.status == "pendiente"
        assert request.due_date is None

    @pytest.mark.anyio
    async def test_full_lifecycle(self, service, store, audit):
        request = await store.insert(make_request())

        await service.transition(request.id, "aprobado", "2024-01-20")
        await service.transition(request.id, "recogido")
        returned = await service.transition(request.id, "devuelto")

        assert returned.status == "devuelto"
        assert returned.picked_at == NOW
        assert returned.returned_at == NOW
        assert returned.due_date == date(2024, 1, 20)
        assert audit.actions == ["request_aprobado", "request_recogido", "request_devuelto"]

    @pytest.mark.anyio
    async def test_reject_clears_due_date(self, service, store):
        request = await store.insert(make_request(status="aprobado", due_date=date(2024, 1, 20)))

        rejected = await service.transition(request.id, "rechazado")

        assert rejected.status == "rechazado"
        assert rejected.due_date is None

    @pytest.mark.anyio
    async def test_reject_after_approval_keeps_approved_at(self, service, store):
        request = await store.insert(make_request())

        await service.transition(request.id, "aprobado", "2024-01-15")
        rejected = await service.transition(request.id, "rechazado")

        assert rejected.due_date is None
        assert rejected.approved_at == NOW

    @pytest.mark.anyio
    async def test_english_status_names(self, service, store):
        request = await store.insert(make_request())

        updated = await service.transition(request.id, "Approved", "2024-01-20")

        assert updated.status == "aprobado"

    @pytest.mark.anyio
    async def test_unsupported_status_checked_before_lookup(self, service):
        with pytest.raises(UnsupportedStatus):
            await service.transition(999, "perdido")

    @pytest.mark.anyio
    async def test_not_found(self, service):
        with pytest.raises(NotFound) as exc_info:
            await service.transition(999, "aprobado", "2024-01-20")

        assert exc_info.value.status_code == 404

    @pytest.mark.anyio
    async def test_cannot_pick_up_pending(self, service, store):
        request = await store.insert(make_request())

        with pytest.raises(InvalidTransition) as exc_info:
            await service.transition(request.id, "recogido")

        assert exc_info.value.status_code == 409
        assert exc_info.value.current == "pendiente"
        assert request.status == "pendiente"

    @pytest.mark.anyio
    async def test_audit_failure_does_not_fail_transition(self, store):
        service = LoanRequestService(store, InMemoryAuditLog(fail=True), clock=lambda: NOW)
        request = await store.insert(make_request())

        updated = await service.transition(request.id, "rechazado")

        assert updated.status == "rechazado"

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "current, target",
        list(product(RequestStatus, RequestStatus)),
        ids=lambda status: status.value,
    )
    async def test_transition_table(self, service, store, current, target):
        due = date(2024, 1, 20) if current in (RequestStatus.APPROVED, RequestStatus.PICKED_UP) else None
        request = await store.insert(make_request(status=current.value, due_date=due))

        if target in ALLOWED_TRANSITIONS[current]:
            updated = await service.transition(request.id, target.value, "2024-01-25")
            assert updated.status == target.value
        else:
            with pytest.raises(InvalidTransition):
                await service.transition(request.id, target.value, "2024-01-25")
            assert request.status == current.value
            assert request.due_date == due


# ==========================================
# Read
# ==========================================

class TestRead:

    @pytest.mark.anyio
    async def test_get(self, service, store):
        request = await store.insert(make_request())

        assert await service.get(request.id) is request

    @pytest.mark.anyio
    async def test_get_not_found(self, service):
        with pytest.raises(NotFound):
            await service.get(42)

    @pytest.mark.anyio
    async def test_list_newest_first(self, service, store):
        first = await store.insert(make_request())
        second = await store.insert(make_request())

        assert [r.id for r in await service.list_all()] == [second.id, first.id]
