"""
Dependencies FastAPI para repositórios, services, autenticação e autorização.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from biblioteca.core.auth import AuthContext, authorize, resolve_effective_context
from biblioteca.core.config import get_settings
from biblioteca.core.errors import Unauthenticated
from biblioteca.core.roles import RoleSet, normalize_roles
from biblioteca.db.session import async_session_factory, get_db
from biblioteca.models.enums import UserRole
from biblioteca.repositories import (
    AuditLog,
    BookCatalog,
    BookRepository,
    LoanRequestRepository,
    LoanRequestStore,
    LogRepository,
    PrincipalStore,
    UserRepository,
)
from biblioteca.services import AuthService, LoanRequestService, OverdueService

logger = logging.getLogger(__name__)
settings = get_settings()

# Scheme Bearer; a ausência do header é tratada como 401 por get_auth_context
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


# ==========================================
# Repositórios
# ==========================================

def get_loan_request_store(db: DbSession) -> LoanRequestStore:
    return LoanRequestRepository(db)


def get_principal_store(db: DbSession) -> PrincipalStore:
    return UserRepository(db)


def get_book_catalog(db: DbSession) -> BookCatalog:
    return BookRepository(db)


def get_audit_log() -> AuditLog:
    return LogRepository(async_session_factory)


RequestStoreDep = Annotated[LoanRequestStore, Depends(get_loan_request_store)]
PrincipalStoreDep = Annotated[PrincipalStore, Depends(get_principal_store)]
BookCatalogDep = Annotated[BookCatalog, Depends(get_book_catalog)]
AuditLogDep = Annotated[AuditLog, Depends(get_audit_log)]


# ==========================================
# Services
# ==========================================

def get_loan_request_service(
    requests: RequestStoreDep,
    audit: AuditLogDep,
) -> LoanRequestService:
    return LoanRequestService(requests, audit)


def get_overdue_service(
    requests: RequestStoreDep,
    books: BookCatalogDep,
) -> OverdueService:
    return OverdueService(requests, books)


def get_auth_service(
    users: PrincipalStoreDep,
    audit: AuditLogDep,
) -> AuthService:
    return AuthService(users, audit)


# ==========================================
# Autenticação / autorização
# ==========================================

async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthContext:
    """
    Dependency que retorna o contexto autenticado a partir do token Bearer.

    Raises:
        Unauthenticated: Header ausente, token inválido ou expirado
    """
    if credentials is None:
        raise Unauthenticated("Token não informado")
    return AuthContext.from_token(credentials.credentials)


class RequireRole:
    """
    Dependency que exige alguma das roles informadas, lidas das claims do token.

    O contexto autorizado fica em `request.state.auth` e é devolvido ao endpoint.
    Prefira `require_role()`, que escolhe o guard conforme a configuração.

    Uso:
        @router.get("/admin-only")
        async def endpoint(auth: AuthContext = Depends(require_role("admin"))):
            ...
    """

    def __init__(self, *roles: str):
        self.expected: RoleSet = normalize_roles(list(roles))

    async def __call__(
        self,
        request: Request,
        context: Annotated[AuthContext, Depends(get_auth_context)],
    ) -> AuthContext:
        logger.debug(f"Roles do usuário {context.id} lidas apenas do token")
        return self._grant(request, context)

    def _grant(self, request: Request, context: AuthContext) -> AuthContext:
        context = authorize(context, self.expected)
        request.state.auth = context
        return context


class RequireStoredRole(RequireRole):
    """Variante que recarrega as roles do cadastro a cada request."""

    async def __call__(
        self,
        request: Request,
        context: Annotated[AuthContext, Depends(get_auth_context)],
        users: PrincipalStoreDep,
    ) -> AuthContext:
        resolved = await resolve_effective_context(context, users)
        return self._grant(request, resolved)


def require_role(*roles: str, resolve_from_store: bool | None = None) -> RequireRole:
    """
    Cria o guard de roles.

    Com GUARD_RESOLVE_ROLES_FROM_STORE ligado (padrão), as roles valem conforme
    o banco; desligado, valem as claims assinadas e o guard não abre sessão
    de banco.
    """
    if resolve_from_store is None:
        resolve_from_store = settings.GUARD_RESOLVE_ROLES_FROM_STORE
    guard = RequireStoredRole if resolve_from_store else RequireRole
    return guard(*roles)


require_admin = require_role(UserRole.ADMIN.value)

# Type aliases para uso nos endpoints
CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]
AdminAuth = Annotated[AuthContext, Depends(require_admin)]
