from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from .db import SQLRepository, create_pool, create_schema
from .errors import StorageFailure, TodoNotFound
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service liveness endpoint."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The connection pool is created when the application starts and disposed of
    when it stops; handlers reach it through the repository stored on app.state.
    Settings are read from the environment at startup unless given here.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        resolved = settings or get_settings()
        engine = create_pool(resolved)
        try:
            if resolved.auto_create_schema:
                await create_schema(engine)
            app.state.repository = SQLRepository(engine)
            yield
        finally:
            await engine.dispose()

    app = FastAPI(
        title="Todo API",
        description="Minimal CRUD service for todos backed by a relational database.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Reject malformed requests before they reach storage.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=400,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(TodoNotFound)
    async def not_found_handler(request: Request, exc: TodoNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "Todo not found"})

    @app.exception_handler(StorageFailure)
    async def storage_failure_handler(request: Request, exc: StorageFailure) -> JSONResponse:
        # The cause goes to the log only, never to the client.
        logger.error(
            "database error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"detail": "database error"})

    @app.get(
        "/health",
        summary="Health Check",
        tags=["health"],
        response_class=PlainTextResponse,
    )
    async def health_check() -> str:
        """
        Liveness probe. Does not touch the database.
        """
        return "ok"

    app.include_router(todos_router.router)
    return app


app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Load settings, configure logging and serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("listening on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
