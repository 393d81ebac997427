"""
Projeção de empréstimos vencidos e exportação CSV.

Visão somente leitura sobre as solicitações: nada aqui é persistido.
Uma solicitação está vencida quando foi retirada (`recogido`) e o fim do dia
da data de devolução, no fuso da biblioteca, já passou.
"""

from datetime import date, datetime, time
from typing import Any, Callable, Iterable, Sequence
from zoneinfo import ZoneInfo

from biblioteca.core.config import get_settings
from biblioteca.core.errors import ValidationError
from biblioteca.models.enums import RequestStatus
from biblioteca.repositories.base import BookCatalog, LoanRequestStore
from biblioteca.services.loan_request import parse_due_date, utcnow

settings = get_settings()

CSV_HEADER = (
    "titulo",
    "nombre",
    "telefono",
    "fecha_solicitud",
    "fecha_devolucion",
    "estado",
)
CSV_FILENAME = "prestamos_vencidos.csv"
END_OF_DAY = time(23, 59, 59, 999000)


def library_timezone() -> ZoneInfo:
    return ZoneInfo(settings.LIBRARY_TIMEZONE)


def _as_date(value: Any) -> date | None:
    try:
        return parse_due_date(value)
    except ValidationError:
        return None


def due_deadline(due: date, tz: ZoneInfo | None = None) -> datetime:
    """Último instante do dia de devolução (23:59:59.999 local)."""
    return datetime.combine(due, END_OF_DAY, tzinfo=tz or library_timezone())


def is_overdue(request: Any, reference: datetime) -> bool:
    """
    Indica se a solicitação está vencida no instante de referência.

    Só solicitações `recogido` com data de devolução válida podem vencer.
    Referências sem fuso são interpretadas no fuso da biblioteca.
    """
    if RequestStatus.parse(getattr(request, "status", None)) is not RequestStatus.PICKED_UP:
        return False

    due = _as_date(getattr(request, "due_date", None))
    if due is None:
        return False

    tz = library_timezone()
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=tz)
    return due_deadline(due, tz) < reference


def overdue_list(requests: Iterable[Any], reference: datetime) -> list[Any]:
    return [request for request in requests if is_overdue(request, reference)]


# ==========================================
# CSV
# ==========================================

def csv_escape(value: Any) -> str:
    """Aspas só quando o valor contém aspas, vírgula ou quebra de linha."""
    text = "" if value is None else str(value)
    if '"' in text or "," in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def format_csv_date(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(library_timezone())
        return value.date().isoformat()
    parsed = _as_date(value)
    return parsed.isoformat() if parsed else str(value)


def resolve_book_title(request: Any, titles: dict[int, str]) -> str:
    """Título do catálogo, depois o título em cache, depois 'Book #<id>'."""
    book_id = getattr(request, "book_id", None)
    title = titles.get(book_id) if book_id is not None else None
    if title:
        return title
    snapshot = getattr(request, "book_title", None)
    if snapshot:
        return snapshot
    return f"Book #{book_id or 's/n'}"


def csv_row(request: Any, titles: dict[int, str]) -> list[str]:
    return [
        resolve_book_title(request, titles),
        (getattr(request, "requester_name", None) or "").strip(),
        getattr(request, "requester_phone", None) or "",
        format_csv_date(getattr(request, "request_date", None)),
        format_csv_date(getattr(request, "due_date", None)),
        str(getattr(request, "status", None) or "").lower(),
    ]


def render_csv(rows: Sequence[Sequence[Any]]) -> str:
    lines = [CSV_HEADER, *rows]
    return "\n".join(",".join(csv_escape(col) for col in line) for line in lines)


class OverdueService:
    """Liga a projeção de vencidos aos repositórios."""

    def __init__(
        self,
        requests: LoanRequestStore,
        books: BookCatalog,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.requests = requests
        self.books = books
        self.clock = clock

    async def list_overdue(self, reference: datetime | None = None) -> list[Any]:
        """Solicitações vencidas no instante informado (padrão: agora)."""
        all_requests = await self.requests.list_all()
        return overdue_list(all_requests, reference or self.clock())

    async def export_csv(self, reference: datetime | None = None) -> str:
        """Relatório CSV dos empréstimos vencidos."""
        overdue = await self.list_overdue(reference)
        titles = await self.books.titles_by_ids([r.book_id for r in overdue])
        return render_csv([csv_row(request, titles) for request in overdue])
