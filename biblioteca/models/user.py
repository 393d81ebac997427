"""
Model de usuário do sistema.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from biblioteca.db.session import Base
from biblioteca.models.base import SerialIdMixin


class User(Base, SerialIdMixin):
    """
    Usuário da biblioteca (aluno, professor ou administrador).

    Attributes:
        id: ID sequencial
        nombre: Nome completo
        rut: Documento nacional (também aceito como credencial legada)
        email: Email único (login)
        password: Hash bcrypt ou senha legada em texto plano
        role: Roles no formato legado; leia sempre via `biblioteca.core.roles`
        last_login: Último login registrado
        created_at: Data de criação
    """
    __tablename__ = "usuarios"

    nombre: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    rut: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[Optional[list[str]]] = mapped_column(
        ARRAY(Text),
        nullable=True,
        server_default="{alumno}",
    )
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


def raw_roles(user: Any) -> Any:
    """Campo de roles bruto, seja qual for o nome usado pelo registro."""
    value = getattr(user, "role", None)
    if value:
        return value
    return getattr(user, "roles", None)
