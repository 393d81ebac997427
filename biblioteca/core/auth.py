"""
Contexto de autenticação e verificação de roles.

`AuthContext` é o principal autenticado de um request: identidade, conjunto
de roles e a role ativa da sessão (escolhida no login). É imutável; a
re-resolução de roles feita pelo guard produz um novo contexto.
"""

from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any

from biblioteca.core.config import get_settings
from biblioteca.core.errors import Forbidden, Unauthenticated
from biblioteca.core.roles import RoleSet, ensure_roles, normalize_roles, primary_role
from biblioteca.core.security import create_access_token, decode_token
from biblioteca.models.user import raw_roles
from biblioteca.repositories.base import PrincipalStore

settings = get_settings()


@dataclass(frozen=True)
class AuthContext:
    """
    Principal autenticado.

    Attributes:
        id: ID do usuário
        email: Email do usuário
        roles: Roles normalizadas
        active_role: Role sob a qual a sessão opera (pertence a `roles`)
    """

    id: int
    email: str
    roles: RoleSet
    active_role: str | None = None

    def __post_init__(self) -> None:
        roles = normalize_roles(self.roles)
        object.__setattr__(self, "roles", roles)
        active = normalize_roles(self.active_role).primary
        if roles and active not in roles:
            active = roles.primary
        object.__setattr__(self, "active_role", active)

    @property
    def effective_roles(self) -> RoleSet:
        """Roles usadas na autorização (a role ativa se o conjunto vier vazio)."""
        return self.roles or normalize_roles(self.active_role)

    def with_roles(self, roles: Any) -> "AuthContext":
        """
        Novo contexto com o conjunto de roles re-resolvido.

        Mantém a role ativa quando ela ainda pertence ao conjunto.
        """
        return replace(self, roles=normalize_roles(roles), active_role=self.active_role)

    @classmethod
    def from_claims(cls, payload: dict[str, Any]) -> "AuthContext":
        """
        Monta o contexto a partir do payload já validado do token.

        Raises:
            Unauthenticated: Claims de identidade ausentes ou inválidas
        """
        raw_id = payload.get("id", payload.get("sub"))
        try:
            user_id = int(raw_id)
        except (TypeError, ValueError):
            raise Unauthenticated()

        return cls(
            id=user_id,
            email=str(payload.get("email") or ""),
            roles=normalize_roles(payload.get("roles")),
            active_role=payload.get("role"),
        )

    @classmethod
    def from_token(cls, token: str | None) -> "AuthContext":
        """
        Verifica assinatura e expiração do token e monta o contexto.

        Raises:
            Unauthenticated: Token ausente, malformado, expirado ou adulterado
        """
        if not token or not token.strip():
            raise Unauthenticated("Token não informado")

        payload = decode_token(token.strip())
        if payload is None:
            raise Unauthenticated()

        return cls.from_claims(payload)


def issue_token(
    user_id: int,
    email: str,
    roles: Any,
    active_role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Emite o token de sessão.

    Args:
        user_id: ID do usuário
        email: Email do usuário
        roles: Roles do usuário (qualquer formato)
        active_role: Role da sessão; padrão é a role primária
        expires_delta: Expiração customizada (padrão JWT_EXPIRES_MINUTES)

    Raises:
        Forbidden: `active_role` não pertence ao conjunto de roles
    """
    role_set = normalize_roles(roles)
    active = primary_role(active_role) or role_set.primary
    if role_set and active not in role_set:
        raise Forbidden(f"Role '{active}' não atribuída ao usuário")

    return create_access_token(
        subject=str(user_id),
        extra_data={
            "id": user_id,
            "email": email,
            "role": active,
            "roles": list(role_set),
        },
        expires_delta=expires_delta,
    )


def authorize(context: AuthContext | None, expected: Any) -> AuthContext:
    """
    Verifica se o contexto possui alguma das roles esperadas.

    Um conjunto esperado vazio não libera ninguém.

    Raises:
        Unauthenticated: Sem contexto autenticado
        Forbidden: Nenhuma role em comum
    """
    if context is None:
        raise Unauthenticated()
    if not context.effective_roles.has_any(expected):
        raise Forbidden()
    return context


async def resolve_effective_context(
    context: AuthContext,
    users: PrincipalStore,
) -> AuthContext:
    """
    Re-resolve as roles do principal a partir do cadastro.

    As claims do token são apenas uma dica; as roles valem conforme o banco
    no momento do request. Devolve um novo contexto, sem alterar o original.

    Raises:
        Forbidden: Usuário não existe mais
    """
    user = await users.find_by_id(context.id)
    if user is None:
        raise Forbidden("Usuário não encontrado")
    return context.with_roles(ensure_roles(raw_roles(user), settings.DEFAULT_ROLE))
