"""
Schemas base reutilizáveis em toda a aplicação.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Schema base com configurações padrão."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """
    Resposta de erro padrão.

    Todos os erros da API (400, 401, 403, 404, 409, 500) usam este formato.
    """
    error: str


def error_responses(*status_codes: int) -> dict[int | str, dict]:
    """Documenta no OpenAPI os status de erro de uma rota."""
    return {code: {"model": ErrorResponse} for code in status_codes}
