"""
Módulo de repositórios - acesso a dados.
"""

from biblioteca.repositories.base import (
    AuditLog,
    BookCatalog,
    LoanRequestStore,
    PrincipalStore,
)
from biblioteca.repositories.book import BookRepository
from biblioteca.repositories.loan_request import LoanRequestRepository
from biblioteca.repositories.log import LogRepository
from biblioteca.repositories.user import UserRepository

__all__ = [
    "AuditLog",
    "BookCatalog",
    "LoanRequestStore",
    "PrincipalStore",
    "BookRepository",
    "LoanRequestRepository",
    "LogRepository",
    "UserRepository",
]
