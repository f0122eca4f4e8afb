"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware and exception
handlers, and configures lifespan.

Dependencies: fastapi, uvicorn, nova.api, nova.observability, nova.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nova.api.deps import get_service_cache
from nova.api.errors import register_exception_handlers
from nova.api.routers import chat_router, documents_router, health_router
from nova.configs import get_settings
from nova.observability.logger import configure_logging
from nova.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events. Sessions live in process memory and
    are dropped on shutdown.
    """
    # Startup
    configure_logging(get_settings().log_level)
    logger.info("Application startup: logging configured")

    yield

    # Shutdown
    get_service_cache().clear()
    logger.info("Application shutdown: sessions cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="Nova RAG API",
        description="Conversational Q&A with streamed answers grounded in uploaded documents",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(chat_router)
    app.include_router(documents_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nova.main:app",
        host="0.0.0.0",
        port=3000,
    )
