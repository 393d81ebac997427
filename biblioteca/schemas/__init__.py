"""
Schemas Pydantic da aplicação.
"""

from biblioteca.schemas.base import BaseSchema, ErrorResponse, error_responses
from biblioteca.schemas.health import HealthResponse
from biblioteca.schemas.user import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    UserRead,
)
from biblioteca.schemas.loan_request import (
    LoanRequestCreate,
    LoanRequestEnvelope,
    LoanRequestRead,
    LoanRequestStatusUpdate,
)

__all__ = [
    # Base
    "BaseSchema",
    "ErrorResponse",
    "error_responses",
    # Health
    "HealthResponse",
    # User
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "UserRead",
    # LoanRequest
    "LoanRequestCreate",
    "LoanRequestEnvelope",
    "LoanRequestRead",
    "LoanRequestStatusUpdate",
]
