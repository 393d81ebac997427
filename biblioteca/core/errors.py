"""
Hierarquia de erros da aplicação.

Cada erro carrega o status HTTP correspondente. Os handlers registrados em
`biblioteca.main` convertem qualquer `AppError` em `{"error": mensagem}`.
"""

from fastapi import status


class AppError(Exception):
    """Erro base da aplicação."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Erro interno"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    """Credencial ausente, malformada, expirada ou com assinatura inválida."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token inválido ou expirado"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentials(Unauthenticated):
    """Email ou senha incorretos no login."""

    default_message = "Credenciais inválidas"


class Forbidden(AppError):
    """Credencial válida, mas sem a role exigida."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Acesso não autorizado"


class ValidationError(AppError):
    """Entrada malformada ou campo obrigatório ausente."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Dados inválidos"


class UnsupportedStatus(ValidationError):
    default_message = "Estado não suportado"


class MissingDueDate(ValidationError):
    default_message = "A data de devolução é obrigatória"


class InvalidDueDate(ValidationError):
    default_message = "Data de devolução inválida"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso não encontrado"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflito com o estado atual do recurso"


class InvalidTransition(Conflict):
    """Mudança de estado não permitida pela máquina de estados."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Transição de '{current}' para '{target}' não permitida")


class InternalError(AppError):
    """Falha inesperada de infraestrutura (mensagem genérica ao cliente)."""
