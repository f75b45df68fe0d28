from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import TodoError
from .logging_config import configure_logging
from .repositories import Repository, build_repository
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "List, create, update, complete and delete Todo items.",
    },
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, repository: Optional[Repository] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings; read from the environment when omitted.
        repository: Pre-built storage backend. When omitted one is built from
            settings at startup. Either way it is closed on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        repo = repository if repository is not None else build_repository(settings)
        app.state.repository = repo
        logger.info("Todo backend started with %s storage", repo.name)
        try:
            yield
        finally:
            repo.close()
            logger.info("Storage released on application shutdown")

    app = FastAPI(
        title="Todo Backend",
        description="Backend API service for managing todos stored in a document collection.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(TodoError)
    async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
        """
        Map service errors to HTTP responses by their kind.

        Response format:
            {"error": "<kind>", "message": "...", "detail": ...}
        """
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": request.app.state.repository.name}

    app.include_router(todos_router.router)
    return app


app = create_app()
