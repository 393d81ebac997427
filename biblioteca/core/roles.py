"""
Normalização de roles.

O cadastro de usuários guarda roles em formatos diferentes (string única,
lista separada por vírgula, array do PostgreSQL). Todo o resto da aplicação
enxerga apenas `RoleSet`: tokens em minúsculas, sem espaços, sem duplicados e
na ordem da primeira ocorrência.

Uso:
    >>> normalize_roles("Admin, admin,ALUMNO")
    ('admin', 'alumno')
    >>> has_any_role(["admin"], ["admin", "profesor"])
    True
"""

import enum
from collections.abc import Iterable, Mapping
from typing import Any

from biblioteca.models.enums import UserRole

DEFAULT_ROLE = UserRole.STUDENT.value
ROLE_DELIMITER = ","


def _tokens(value: Any) -> Iterable[Any]:
    if value is None:
        return ()
    if isinstance(value, enum.Enum):
        return (value.value,)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore").split(ROLE_DELIMITER)
    if isinstance(value, str):
        return value.split(ROLE_DELIMITER)
    if isinstance(value, Mapping):
        return ()
    if isinstance(value, Iterable):
        return value
    return (value,)


def _clean(token: Any) -> str:
    if token is None:
        return ""
    if isinstance(token, enum.Enum):
        token = token.value
    return str(token).strip().lower()


class RoleSet(tuple):
    """
    Conjunto ordenado e imutável de roles.

    A normalização acontece no construtor, então `RoleSet(RoleSet(x))`
    é sempre igual a `RoleSet(x)`.
    """

    def __new__(cls, value: Any = None) -> "RoleSet":
        roles: list[str] = []
        for token in _tokens(value):
            role = _clean(token)
            if role and role not in roles:
                roles.append(role)
        return super().__new__(cls, roles)

    def __repr__(self) -> str:
        return f"RoleSet({list(self)!r})"

    @property
    def primary(self) -> str | None:
        return self[0] if self else None

    def has_any(self, expected: Any) -> bool:
        """
        True se alguma role esperada pertence ao conjunto.

        Um conjunto esperado vazio não libera nenhuma role.
        """
        targets = RoleSet(expected)
        return any(role in self for role in targets)


def normalize_roles(value: Any) -> RoleSet:
    """Normaliza qualquer representação de roles. Nunca falha."""
    return value if type(value) is RoleSet else RoleSet(value)


def ensure_roles(value: Any, fallback: Any = DEFAULT_ROLE) -> RoleSet:
    """Normaliza `value`; se o resultado for vazio, normaliza `fallback`."""
    roles = normalize_roles(value)
    if roles:
        return roles
    return normalize_roles(fallback)


def has_any_role(owned: Any, expected: Any) -> bool:
    return normalize_roles(owned).has_any(expected)


def primary_role(owned: Any, fallback: str | None = None) -> str | None:
    roles = normalize_roles(owned)
    return roles.primary if roles else fallback
