"""
Fixtures compartilhadas para testes.

Os repositórios SQLAlchemy são substituídos por implementações em memória
via `app.dependency_overrides`; nenhum teste precisa de PostgreSQL ou Redis.
"""

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from biblioteca.core.auth import issue_token
from biblioteca.core.deps import (
    get_audit_log,
    get_book_catalog,
    get_loan_request_store,
    get_principal_store,
)
from biblioteca.core.security import hash_password
from biblioteca.main import app
from tests.fakes import (
    FakeUser,
    InMemoryAuditLog,
    InMemoryBookCatalog,
    InMemoryLoanRequestStore,
    InMemoryPrincipalStore,
)

ADMIN_PASSWORD = "Admin123!"
STUDENT_PASSWORD = "Alumno123!"


# ==========================================
# Event loop configuration
# ==========================================

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==========================================
# Repositórios em memória
# ==========================================

@pytest.fixture
def admin_user() -> FakeUser:
    return FakeUser(
        id=1,
        email="admin@colegio.cl",
        password=hash_password(ADMIN_PASSWORD),
        rut="11111111-1",
        role=["admin"],
        nombre="Admin Biblioteca",
    )


@pytest.fixture
def student_user() -> FakeUser:
    return FakeUser(
        id=2,
        email="ana@colegio.cl",
        password=STUDENT_PASSWORD,  # senha legada em texto plano
        rut="12345678-9",
        role="alumno",
        nombre="Ana Pérez",
    )


@pytest.fixture
def dual_role_user() -> FakeUser:
    return FakeUser(
        id=3,
        email="prof@colegio.cl",
        password=hash_password("Profe123!"),
        role="profesor, admin",
        nombre="Pedro Soto",
    )


@pytest.fixture
def users(admin_user, student_user, dual_role_user) -> InMemoryPrincipalStore:
    return InMemoryPrincipalStore([admin_user, student_user, dual_role_user])


@pytest.fixture
def request_store() -> InMemoryLoanRequestStore:
    return InMemoryLoanRequestStore()


@pytest.fixture
def catalog() -> InMemoryBookCatalog:
    return InMemoryBookCatalog({1: "Cien años de soledad", 2: "Rayuela"})


@pytest.fixture
def audit_log() -> InMemoryAuditLog:
    return InMemoryAuditLog()


# ==========================================
# HTTP Client fixtures
# ==========================================

@pytest.fixture
async def client(
    request_store, users, catalog, audit_log
) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono para testes.

    Substitui as dependencies de repositório pelas versões em memória.
    """
    app.dependency_overrides[get_loan_request_store] = lambda: request_store
    app.dependency_overrides[get_principal_store] = lambda: users
    app.dependency_overrides[get_book_catalog] = lambda: catalog
    app.dependency_overrides[get_audit_log] = lambda: audit_log

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Limpar override após o teste
    app.dependency_overrides.clear()


# ==========================================
# Auth fixtures
# ==========================================

@pytest.fixture
def admin_token(admin_user) -> str:
    return issue_token(admin_user.id, admin_user.email, admin_user.role)


@pytest.fixture
def student_token(student_user) -> str:
    return issue_token(student_user.id, student_user.email, student_user.role)


@pytest.fixture
def auth_headers(admin_token: str) -> dict:
    """Headers de autenticação com token admin."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def student_headers(student_token: str) -> dict:
    """Headers de autenticação com token de aluno."""
    return {"Authorization": f"Bearer {student_token}"}
