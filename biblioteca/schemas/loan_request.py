"""
Schemas Pydantic para solicitações de empréstimo (LoanRequest).

O formulário público envia campos em camelCase, snake_case ou com os nomes
do formulário antigo (`libroId`, `nombre`, `apellido`, `rut`, `celular`,
`direccion`, `fotoId`); todos são aceitos.
"""

from datetime import date, datetime

from pydantic import AliasChoices, ConfigDict, Field

from biblioteca.schemas.base import BaseSchema


class LoanRequestCreate(BaseSchema):
    """Schema para criar solicitação (rota pública)."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    book_id: int | None = Field(
        None,
        validation_alias=AliasChoices("bookId", "libroId", "book_id"),
        description="ID do livro solicitado",
    )
    requester_name: str | None = Field(
        None,
        validation_alias=AliasChoices("requesterName", "requester_name"),
    )
    nombre: str | None = None
    apellido: str | None = None
    requester_email: str | None = Field(
        None,
        validation_alias=AliasChoices("requesterEmail", "requester_email", "email"),
    )
    requester_rut: str | None = Field(
        None,
        validation_alias=AliasChoices("requesterRut", "requester_rut", "rut"),
    )
    requester_phone: str | None = Field(
        None,
        validation_alias=AliasChoices("requesterPhone", "requester_phone", "celular"),
    )
    requester_address: str | None = Field(
        None,
        validation_alias=AliasChoices("requesterAddress", "requester_address", "direccion"),
    )
    requester_id_photo: str | None = Field(
        None,
        validation_alias=AliasChoices("requesterIdPhoto", "requester_id_photo", "fotoId"),
    )
    book_title: str | None = Field(
        None,
        validation_alias=AliasChoices("bookTitle", "book_title"),
    )

    def full_name(self) -> str:
        """Nome informado, ou nome + sobrenome do formulário antigo."""
        if self.requester_name:
            return self.requester_name
        parts = [part for part in (self.nombre, self.apellido) if part]
        return " ".join(parts).strip()


class LoanRequestRead(BaseSchema):
    """Schema de leitura de solicitação."""

    id: int
    book_id: int
    requester_name: str
    requester_email: str = ""
    requester_rut: str = ""
    requester_phone: str = ""
    requester_address: str = ""
    requester_id_photo: str = ""
    book_title: str | None = None
    request_date: datetime
    status: str
    due_date: date | None = None
    approved_at: datetime | None = None
    picked_at: datetime | None = None
    returned_at: datetime | None = None
    updated_at: datetime | None = None


class LoanRequestEnvelope(BaseSchema):
    """Resposta de criação/transição: `{ok: true, request}`."""

    ok: bool = True
    request: LoanRequestRead


class LoanRequestStatusUpdate(BaseSchema):
    """
    Schema para transição de status (admin).

    `status` aceita pendiente, aprobado, recogido, devuelto ou rechazado.
    `due_date` é obrigatório ao aprovar (YYYY-MM-DD ou data/hora ISO).
    """

    status: str = Field("", examples=["aprobado"])
    due_date: str | None = Field(
        None,
        validation_alias=AliasChoices("due_date", "dueDate"),
        examples=["2024-01-15"],
    )
