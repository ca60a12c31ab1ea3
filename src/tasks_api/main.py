from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import Database, DatabaseInitError, SQLTaskRepository, init_database
from .repositories import TaskRepository
from .routers import tasks as tasks_router
from .settings import Settings, load_settings
from .utils import ApiError, error_envelope

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "List and create tasks stored in the relational tasks table.",
    },
]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


# PUBLIC_INTERFACE
def create_app(
    repository: Optional[TaskRepository] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        repository: Storage to serve requests from. When omitted, the
            application opens its own database pool on startup (failing
            startup if the pool cannot be initialized) and closes it on
            shutdown.
        settings: Application settings; loaded from .env and the environment
            if omitted.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned: Optional[Database] = None
        if app.state.repository is None:
            owned = await init_database(settings.database)
            app.state.repository = SQLTaskRepository(owned)
        try:
            yield
        finally:
            if owned is not None:
                app.state.repository = None
                await owned.close()

    app = FastAPI(
        title="Task Service",
        description="Minimal HTTP service listing and creating tasks backed by a relational table.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.repository = repository
    app.state.settings = settings

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for malformed request bodies.

        Response format:
            {
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": [... pydantic/fastapi error details ...]
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

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy"}

    app.include_router(tasks_router.router)
    return app


# PUBLIC_INTERFACE
async def serve(settings: Settings) -> int:
    """
    Initialize storage, then run the HTTP server until it is stopped.

    Returns the process exit status: 1 if the database could not be
    initialized (nothing is bound in that case) or the listener failed to
    start, 0 after a clean shutdown.
    """
    try:
        database = await init_database(settings.database)
    except DatabaseInitError as e:
        logger.error("%s", e)
        return 1

    app = create_app(SQLTaskRepository(database), settings)
    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_config=None)
    server = uvicorn.Server(config)
    logger.info("Server running on http://localhost:%d", settings.port)
    logger.info("GET: http://localhost:%d/api/tasks", settings.port)
    logger.info("POST (send JSON body to): http://localhost:%d/api/tasks", settings.port)
    try:
        await server.serve()
    finally:
        await database.close()
    return 0 if server.started else 1


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    sys.exit(asyncio.run(serve(settings)))


app = create_app()
