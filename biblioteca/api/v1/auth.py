"""
Endpoints de autenticação.

Contratos:
    - POST /auth/login: Login de aluno/professor (role ativa = role primária)
    - POST /auth/admin/login: Login do painel (exige role admin; role ativa = admin)
    - GET /auth/me: Dados do usuário autenticado

Rate Limiting aplicado:
    - POST /auth/login e /auth/admin/login: 10 req/min por IP
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from biblioteca.core.deps import CurrentAuth, get_auth_service
from biblioteca.core.rate_limit import rate_limit_login
from biblioteca.models.enums import UserRole
from biblioteca.schemas.base import error_responses
from biblioteca.schemas.user import LoginRequest, LoginResponse, MeResponse
from biblioteca.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Autenticar usuário",
    description="Retorna token JWT para uso no header Authorization.",
    dependencies=[Depends(rate_limit_login)],
    responses=error_responses(400, 401, 429),
)
async def login(data: LoginRequest, service: AuthServiceDep) -> LoginResponse:
    """
    Login por email e senha.

    Uso do token: `Authorization: Bearer <token>`

    Raises:
        400: Email ou senha em branco
        401: Credenciais inválidas
    """
    return await service.login(data.email, data.password)


@router.post(
    "/admin/login",
    response_model=LoginResponse,
    summary="Autenticar administrador",
    description="Login do painel administrativo. **Requer role admin.**",
    dependencies=[Depends(rate_limit_login)],
    responses=error_responses(400, 401, 403, 429),
)
async def admin_login(data: LoginRequest, service: AuthServiceDep) -> LoginResponse:
    """
    Login pela entrada do painel.

    Um usuário admin e aluno ao mesmo tempo recebe sessão com role ativa admin.

    Raises:
        400: Email ou senha em branco
        401: Credenciais inválidas
        403: Usuário sem role admin
    """
    return await service.login(data.email, data.password, entry_role=UserRole.ADMIN.value)


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Dados do usuário autenticado",
    responses=error_responses(401, 404),
)
async def get_me(auth: CurrentAuth, service: AuthServiceDep) -> MeResponse:
    """Retorna os dados atuais do usuário logado."""
    return MeResponse(user=await service.me(auth))
