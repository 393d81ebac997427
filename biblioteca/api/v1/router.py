"""
Router principal da API v1.

Inclui todos os routers de endpoints.
"""

from fastapi import APIRouter

from biblioteca.api.v1.auth import router as auth_router
from biblioteca.api.v1.requests import router as requests_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router)
api_router.include_router(requests_router)
