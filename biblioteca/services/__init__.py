"""
Módulo de serviços - lógica de negócio.
"""

from biblioteca.services.auth import AuthService
from biblioteca.services.loan_request import LoanRequestService
from biblioteca.services.overdue import OverdueService

__all__ = [
    "AuthService",
    "LoanRequestService",
    "OverdueService",
]
