"""
Enums utilizados nos models da aplicação.
"""

import enum


class UserRole(str, enum.Enum):
    """Roles conhecidas. O vocabulário é aberto: o banco pode conter outras."""
    ADMIN = "admin"
    STUDENT = "alumno"
    TEACHER = "profesor"


class RequestStatus(str, enum.Enum):
    """
    Status de uma solicitação de empréstimo físico.

    Fluxo:
        PENDING -> APPROVED -> PICKED_UP -> RETURNED
        PENDING/APPROVED -> REJECTED

    Os valores são os mesmos aceitos e devolvidos pela API.
    """
    PENDING = "pendiente"     # Enviada, aguardando análise
    APPROVED = "aprobado"     # Aprovada com data de devolução
    PICKED_UP = "recogido"    # Livro retirado pelo solicitante
    RETURNED = "devuelto"     # Livro devolvido (terminal)
    REJECTED = "rechazado"    # Recusada (terminal)

    @classmethod
    def parse(cls, value: object) -> "RequestStatus | None":
        """
        Converte valor da API ("aprobado") ou nome em inglês ("approved").

        Returns:
            Status correspondente ou None se desconhecido
        """
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if not text:
            return None
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        return None


# Transições permitidas pela máquina de estados
ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset({RequestStatus.PICKED_UP, RequestStatus.REJECTED}),
    RequestStatus.PICKED_UP: frozenset({RequestStatus.RETURNED}),
    RequestStatus.RETURNED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}
