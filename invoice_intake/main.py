"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invoice_intake.config import Settings, get_settings
from invoice_intake.domain.exceptions import EntityNotFoundError, InvalidQueryError
from invoice_intake.infrastructure.dependencies import InvoiceRuntime, build_runtime
from invoice_intake.infrastructure.logging.log_config import setup_logging
from invoice_intake.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, then stop timers and SSE clients on exit."""
    runtime: InvoiceRuntime = app.state.runtime
    setup_logging(runtime.settings)

    Path(runtime.settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info(
        "Invoice intake ready — uploads in %s, processing delay %.0f–%.0fs",
        runtime.settings.upload_dir,
        runtime.settings.processing_min_delay_seconds,
        runtime.settings.processing_max_delay_seconds,
    )

    yield

    # Shutdown — in-flight invoices are not persisted and stay Processing
    await runtime.processor.shutdown()
    await runtime.sse_manager.shutdown()


async def _not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": f"{exc.entity_type} not found"},
    )


async def _invalid_query_handler(request: Request, exc: InvalidQueryError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": str(exc)},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.runtime = build_runtime(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(EntityNotFoundError, _not_found_handler)
    app.add_exception_handler(InvalidQueryError, _invalid_query_handler)

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "invoice_intake.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
