"""
Schemas Pydantic para User e login.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from biblioteca.core.roles import RoleSet, ensure_roles, primary_role
from biblioteca.models.user import raw_roles
from biblioteca.schemas.base import BaseSchema


class LoginRequest(BaseSchema):
    """
    Schema para login (email + senha).

    Campos vazios são aceitos aqui e rejeitados pelo service com 400,
    mantendo a mesma mensagem para as duas entradas de login.
    """
    email: str = Field("", examples=["ana@colegio.cl"])
    password: str = Field("", examples=["Senha123!"])


class UserRead(BaseSchema):
    """
    Schema de leitura de usuário.

    Nunca expõe a senha. `role` é a role ativa da sessão e `roles`
    o conjunto completo normalizado.
    """
    id: int
    nombre: str | None = None
    rut: str | None = None
    email: str
    role: str | None = None
    roles: list[str] = Field(default_factory=list)
    last_login: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_user(
        cls,
        user: Any,
        roles: RoleSet | None = None,
        active_role: str | None = None,
    ) -> "UserRead":
        """
        Serializa um usuário do banco.

        Args:
            user: Registro do usuário
            roles: Roles já resolvidas (padrão: normaliza o campo legado)
            active_role: Role ativa (padrão: role primária)
        """
        role_set = roles if roles is not None else ensure_roles(raw_roles(user))
        return cls(
            id=user.id,
            nombre=getattr(user, "nombre", None),
            rut=getattr(user, "rut", None),
            email=user.email,
            role=active_role or primary_role(role_set),
            roles=list(role_set),
            last_login=getattr(user, "last_login", None),
            created_at=getattr(user, "created_at", None),
        )


class LoginResponse(BaseSchema):
    """Resposta do login: token bearer e usuário serializado."""
    token: str
    user: UserRead


class MeResponse(BaseSchema):
    """Dados do usuário autenticado."""
    user: UserRead
