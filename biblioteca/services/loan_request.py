"""
Service da máquina de estados de solicitações de empréstimo (LoanRequest).

Regras de negócio:
    - Qualquer visitante cria solicitações; elas nascem como `pendiente`
    - Só admins mudam o status, seguindo ALLOWED_TRANSITIONS:
        pendiente -> aprobado | rechazado
        aprobado  -> recogido | rechazado
        recogido  -> devuelto
    - Aprovar exige data de devolução; rejeitar limpa a data
    - Cada transição grava um evento `request_<status>` no log (best-effort)
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError

from biblioteca.core.config import get_settings
from biblioteca.core.errors import (
    InvalidDueDate,
    InvalidTransition,
    MissingDueDate,
    NotFound,
    UnsupportedStatus,
    ValidationError,
)
from biblioteca.models.enums import ALLOWED_TRANSITIONS, RequestStatus
from biblioteca.models.loan_request import LoanRequest
from biblioteca.repositories.base import AuditLog, LoanRequestStore
from biblioteca.schemas.loan_request import LoanRequestCreate

logger = logging.getLogger(__name__)
settings = get_settings()

GUEST_ACTOR = "visitante"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_due_date(value: Any) -> date:
    """
    Converte a data de devolução informada em data de calendário.

    Aceita `date`, `datetime`, "YYYY-MM-DD" ou data/hora ISO 8601.

    Raises:
        MissingDueDate: Valor ausente ou vazio
        InvalidDueDate: Valor não reconhecido como data
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingDueDate()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidDueDate()


class LoanRequestService:
    """Service para criação e transição de solicitações."""

    def __init__(
        self,
        requests: LoanRequestStore,
        audit: AuditLog | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.requests = requests
        self.audit = audit
        self.clock = clock

    # ==========================================
    # Create
    # ==========================================

    async def create(self, payload: LoanRequestCreate) -> LoanRequest:
        """
        Registra nova solicitação (rota pública).

        Só o livro é obrigatório. Sem nome, o solicitante vira "Visitante";
        contatos ausentes ficam vazios.

        Raises:
            ValidationError: Livro não informado ou inválido
        """
        if payload.book_id is None or payload.book_id <= 0:
            raise ValidationError("Livro da solicitação é obrigatório")

        now = self.clock()
        request = LoanRequest(
            book_id=payload.book_id,
            requester_name=payload.full_name() or settings.GUEST_REQUESTER_NAME,
            requester_email=payload.requester_email or "",
            requester_rut=payload.requester_rut or "",
            requester_phone=payload.requester_phone or "",
            requester_address=payload.requester_address or "",
            requester_id_photo=payload.requester_id_photo or "",
            book_title=payload.book_title or None,
            request_date=now,
            status=RequestStatus.PENDING.value,
            due_date=None,
        )
        request = await self.requests.insert(request)
        logger.info(f"Solicitação {request.id} criada para o livro {request.book_id}")

        actor = request.requester_email or request.requester_rut or GUEST_ACTOR
        await self._audit(actor, "request_created", now, request)
        return request

    # ==========================================
    # Read
    # ==========================================

    async def get(self, request_id: int) -> LoanRequest:
        """
        Busca solicitação por ID.

        Raises:
            NotFound: Solicitação inexistente
        """
        request = await self.requests.find_by_id(request_id)
        if request is None:
            raise NotFound("Solicitação não encontrada")
        return request

    async def list_all(self) -> list[LoanRequest]:
        return await self.requests.list_all()

    # ==========================================
    # Transition
    # ==========================================

    async def transition(
        self,
        request_id: int,
        target_status: Any,
        due_date: Any = None,
        actor: str | None = None,
    ) -> LoanRequest:
        """
        Muda o status de uma solicitação.

        Toda a validação acontece antes de qualquer alteração no registro.

        Args:
            request_id: ID da solicitação
            target_status: Novo status (valor da API ou nome em inglês)
            due_date: Data de devolução (obrigatória ao aprovar)
            actor: Email do admin que executa a transição

        Raises:
            UnsupportedStatus: Status desconhecido
            NotFound: Solicitação inexistente
            InvalidTransition: Transição fora de ALLOWED_TRANSITIONS
            MissingDueDate / InvalidDueDate: Aprovação sem data válida
        """
        target = RequestStatus.parse(target_status)
        if target is None:
            raise UnsupportedStatus()

        request = await self.get(request_id)

        current = RequestStatus.parse(request.status)
        if current is None or target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransition(str(request.status), target.value)

        changes: dict[str, Any] = {}
        if target is RequestStatus.APPROVED:
            changes["due_date"] = parse_due_date(due_date)

        now = self.clock()
        if target is RequestStatus.APPROVED:
            changes["approved_at"] = now
        elif target is RequestStatus.PICKED_UP:
            changes["picked_at"] = now
        elif target is RequestStatus.RETURNED:
            changes["returned_at"] = now
        elif target is RequestStatus.REJECTED:
            changes["due_date"] = None

        changes["status"] = target.value
        changes["updated_at"] = now

        for field, value in changes.items():
            setattr(request, field, value)
        request = await self.requests.update(request)

        logger.info(
            f"Solicitação {request.id}: {current.value} -> {target.value} "
            f"(por {actor or 'admin'})"
        )
        await self._audit(actor or "admin", f"request_{target.value}", now, request)
        return request

    async def _audit(
        self,
        actor: str,
        action: str,
        at: datetime,
        request: LoanRequest,
    ) -> None:
        """Grava evento no log sem nunca falhar a operação principal."""
        if self.audit is None:
            return
        try:
            await self.audit.append(
                actor=actor,
                action=action,
                at=at,
                request_id=request.id,
                book_id=request.book_id,
            )
        except SQLAlchemyError:
            logger.warning(
                f"Falha ao registrar '{action}' da solicitação {request.id} no log",
                exc_info=True,
            )
