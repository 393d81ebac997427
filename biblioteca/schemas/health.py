"""
Schemas Pydantic para o endpoint de healthcheck.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """
    Resposta do endpoint de healthcheck.

    Attributes:
        status: Status da aplicação ("healthy" ou "unhealthy")
        app_name: Nome da aplicação
        environment: Ambiente atual (development, staging, production)
        database: Estado da conexão com o PostgreSQL ("up", "down" ou "unknown")
    """

    status: str
    app_name: str
    environment: str
    database: str = "unknown"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "app_name": "Biblioteca API",
                    "environment": "development",
                    "database": "up",
                }
            ]
        }
    }
