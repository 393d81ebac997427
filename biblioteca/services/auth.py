"""
Service de autenticação (login por senha).
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from biblioteca.core.auth import AuthContext, issue_token
from biblioteca.core.config import get_settings
from biblioteca.core.errors import Forbidden, InvalidCredentials, NotFound, ValidationError
from biblioteca.core.roles import ensure_roles
from biblioteca.core.security import CredentialVerifier
from biblioteca.models.enums import UserRole
from biblioteca.models.user import raw_roles
from biblioteca.repositories.base import AuditLog, PrincipalStore
from biblioteca.schemas.user import LoginResponse, UserRead
from biblioteca.services.loan_request import utcnow

logger = logging.getLogger(__name__)
settings = get_settings()


class AuthService:
    """Service para login e consulta do usuário autenticado."""

    def __init__(
        self,
        users: PrincipalStore,
        audit: AuditLog | None = None,
        verifier: CredentialVerifier | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.users = users
        self.audit = audit
        self.verifier = verifier or CredentialVerifier()
        self.clock = clock

    async def login(
        self,
        email: str,
        password: str,
        entry_role: str | None = None,
    ) -> LoginResponse:
        """
        Autentica usuário e retorna token JWT.

        Args:
            email: Email (comparado sem diferenciar maiúsculas)
            password: Senha, ou RUT quando o fallback legado está ligado
            entry_role: Role exigida pela entrada de login ("admin" no painel)

        Returns:
            Token e usuário serializado com a role ativa

        Raises:
            ValidationError: Email ou senha em branco
            InvalidCredentials: Usuário inexistente ou prova inválida
            Forbidden: Usuário sem a role exigida pela entrada
        """
        email = (email or "").strip().lower()
        password = (password or "").strip()
        if not email or not password:
            raise ValidationError("Email e senha são obrigatórios")

        user = await self.users.find_by_email(email)
        if user is None:
            raise InvalidCredentials()

        if not self.verifier.verify(password, user.password, getattr(user, "rut", None)):
            raise InvalidCredentials()

        roles = ensure_roles(raw_roles(user), settings.DEFAULT_ROLE)
        if entry_role is not None and not roles.has_any(entry_role):
            raise Forbidden("Usuário sem permissão para este acesso")

        active_role = entry_role or roles.primary
        token = issue_token(user.id, user.email, roles, active_role=active_role)
        user_read = UserRead.from_user(user, roles=roles, active_role=active_role)

        now = self.clock()
        await self._record_login(user_read, now, entry_role)
        user_read.last_login = now

        logger.info(f"Login de {user_read.email} como '{active_role}'")
        return LoginResponse(token=token, user=user_read)

    async def me(self, context: AuthContext) -> UserRead:
        """
        Dados atualizados do usuário autenticado.

        Raises:
            NotFound: Usuário removido após a emissão do token
        """
        user = await self.users.find_by_id(context.id)
        if user is None:
            raise NotFound("Usuário não encontrado")
        roles = ensure_roles(raw_roles(user), settings.DEFAULT_ROLE)
        return UserRead.from_user(user, roles=roles, active_role=context.active_role)

    async def _record_login(
        self,
        user: UserRead,
        at: datetime,
        entry_role: str | None,
    ) -> None:
        """Último login e log de auditoria; falhas não impedem o login."""
        try:
            await self.users.touch_last_login(user.id, at)
        except SQLAlchemyError:
            logger.warning(f"Falha ao registrar último login de {user.email}", exc_info=True)

        if self.audit is None:
            return
        action = "admin_login" if entry_role == UserRole.ADMIN.value else "login"
        try:
            await self.audit.append(actor=user.email, action=action, at=at)
        except SQLAlchemyError:
            logger.warning(f"Falha ao registrar '{action}' de {user.email} no log", exc_info=True)
