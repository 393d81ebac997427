"""
Models SQLAlchemy da aplicação.

Importar todos os models aqui para que o metadata conheça todas as tabelas.
"""

from biblioteca.models.enums import ALLOWED_TRANSITIONS, RequestStatus, UserRole
from biblioteca.models.user import User
from biblioteca.models.book import Book
from biblioteca.models.loan_request import LoanRequest
from biblioteca.models.log_entry import LogEntry

__all__ = [
    "ALLOWED_TRANSITIONS",
    "RequestStatus",
    "UserRole",
    "User",
    "Book",
    "LoanRequest",
    "LogEntry",
]
