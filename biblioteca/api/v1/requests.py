"""
Endpoints de Solicitações de empréstimo físico (LoanRequest).

Contratos:
    - POST /requests: Cria solicitação (público)
    - GET /requests: Lista todas as solicitações (admin)
    - GET /requests/overdue: Lista empréstimos vencidos (admin)
    - GET /requests/overdue.csv: Exporta vencidos em CSV (admin)
    - GET /requests/{id}: Detalhes da solicitação (admin)
    - PUT /requests/{id}: Muda o status (admin)

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: Status não suportado, data de devolução ausente ou inválida
    - 401: Não autenticado
    - 403: Sem permissão
    - 404: Solicitação não encontrada
    - 409: Transição de status não permitida
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from biblioteca.core.deps import (
    AdminAuth,
    get_loan_request_service,
    get_overdue_service,
)
from biblioteca.core.rate_limit import rate_limit_public_requests
from biblioteca.schemas.base import error_responses
from biblioteca.schemas.loan_request import (
    LoanRequestCreate,
    LoanRequestEnvelope,
    LoanRequestRead,
    LoanRequestStatusUpdate,
)
from biblioteca.services.loan_request import LoanRequestService
from biblioteca.services.overdue import CSV_FILENAME, OverdueService

router = APIRouter(prefix="/requests", tags=["Requests"])

RequestServiceDep = Annotated[LoanRequestService, Depends(get_loan_request_service)]
OverdueServiceDep = Annotated[OverdueService, Depends(get_overdue_service)]


@router.post(
    "",
    response_model=LoanRequestEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Solicitar empréstimo",
    description="Registra uma solicitação de empréstimo físico. Não exige login.",
    dependencies=[Depends(rate_limit_public_requests)],
    responses=error_responses(400, 409, 429),
)
async def create_request(
    data: LoanRequestCreate,
    service: RequestServiceDep,
) -> LoanRequestEnvelope:
    """
    Cria solicitação com status `pendiente`.

    - **bookId**: ID do livro (obrigatório)
    - **requesterName**: Nome do solicitante ("Visitante" se ausente)
    - demais contatos são opcionais
    """
    request = await service.create(data)
    return LoanRequestEnvelope(request=LoanRequestRead.model_validate(request))


@router.get(
    "",
    response_model=list[LoanRequestRead],
    summary="Listar solicitações",
    description="Lista todas as solicitações. **Requer role admin.**",
    responses=error_responses(401, 403),
)
async def list_requests(
    service: RequestServiceDep,
    admin: AdminAuth,
) -> list[LoanRequestRead]:
    requests = await service.list_all()
    return [LoanRequestRead.model_validate(request) for request in requests]


@router.get(
    "/overdue",
    response_model=list[LoanRequestRead],
    summary="Empréstimos vencidos",
    description="Solicitações retiradas com data de devolução vencida. **Requer role admin.**",
    responses=error_responses(401, 403),
)
async def list_overdue(
    service: OverdueServiceDep,
    admin: AdminAuth,
) -> list[LoanRequestRead]:
    overdue = await service.list_overdue()
    return [LoanRequestRead.model_validate(request) for request in overdue]


@router.get(
    "/overdue.csv",
    response_class=Response,
    summary="Exportar vencidos (CSV)",
    description="Relatório CSV dos empréstimos vencidos. **Requer role admin.**",
    responses={200: {"content": {"text/csv": {}}}, **error_responses(401, 403)},
)
async def export_overdue_csv(
    service: OverdueServiceDep,
    admin: AdminAuth,
) -> Response:
    """
    Colunas: titulo, nombre, telefono, fecha_solicitud, fecha_devolucion, estado.
    """
    content = await service.export_csv()
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@router.get(
    "/{request_id}",
    response_model=LoanRequestRead,
    summary="Detalhes da solicitação",
    description="**Requer role admin.**",
    responses=error_responses(401, 403, 404),
)
async def get_request(
    request_id: int,
    service: RequestServiceDep,
    admin: AdminAuth,
) -> LoanRequestRead:
    """
    Raises:
        404: Solicitação não encontrada
    """
    return LoanRequestRead.model_validate(await service.get(request_id))


@router.put(
    "/{request_id}",
    response_model=LoanRequestEnvelope,
    summary="Mudar status da solicitação",
    description="Aprova, registra retirada/devolução ou rejeita. **Requer role admin.**",
    responses=error_responses(400, 401, 403, 404, 409),
)
async def update_request_status(
    request_id: int,
    data: LoanRequestStatusUpdate,
    service: RequestServiceDep,
    admin: AdminAuth,
) -> LoanRequestEnvelope:
    """
    Transição de status.

    - **status**: pendiente | aprobado | recogido | devuelto | rechazado
    - **due_date**: obrigatório ao aprovar (YYYY-MM-DD)

    Raises:
        400: Status não suportado ou data de devolução ausente/inválida
        404: Solicitação não encontrada
        409: Transição não permitida a partir do status atual
    """
    request = await service.transition(
        request_id,
        data.status,
        due_date=data.due_date,
        actor=admin.email or None,
    )
    return LoanRequestEnvelope(request=LoanRequestRead.model_validate(request))
