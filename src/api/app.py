from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from src.config.telemetry import (
    clear_correlation_context,
    get_request_id,
    set_correlation_context,
)
from src.database.engine import dispose_engine
from src.errors import CombinationNotFoundError, InvalidListQueryError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: cleanup database engine on shutdown."""
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Combination Admin API",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def correlate_request(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        clear_correlation_context()
        set_correlation_context(request_id=request_id)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = get_request_id()
        return response

    # Exception handlers
    @app.exception_handler(InvalidListQueryError)
    async def invalid_list_query_handler(
        request: Request, exc: InvalidListQueryError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(CombinationNotFoundError)
    async def combination_not_found_handler(
        request: Request, exc: CombinationNotFoundError
    ) -> JSONResponse:
        logger.info("Combination %s not found", exc.combination_id)
        return JSONResponse(status_code=404, content={"detail": exc.message})

    from src.api.routes.combinations import router as combinations_router
    from src.api.routes.health import router as health_router

    app.include_router(health_router)
    app.include_router(combinations_router)

    return app
