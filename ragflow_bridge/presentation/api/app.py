"""FastAPI application for the RAGFlow bridge"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import os
import logging
import time

from shared.config.settings import settings
from shared.models.base import ErrorResponse, HealthCheck
from shared.utils.database import DatabaseManager
from ...infrastructure.database import models  # noqa: F401  registers tables
from ...infrastructure.external.ragflow_client import create_ragflow_client
from .agent_routes import router as agent_router
from .chunk_routes import router as chunk_router
from .conversation_routes import router as conversation_router
from .dataset_document_routes import router as dataset_document_router
from .dataset_routes import router as dataset_router
from .knowledge_graph_routes import router as knowledge_graph_router
from .system_routes import router as system_router

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level))
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"{settings.service_name} starting up...")

    try:
        os.makedirs(settings.upload_dir, exist_ok=True)
        logger.info("Upload directory created/verified")
    except OSError as e:
        logger.error(f"Failed to create upload directory: {e}")

    DatabaseManager.initialize_database()

    app.state.ragflow_client = create_ragflow_client(settings.ragflow_instance())
    logger.info(f"RAGFlow client configured for {settings.ragflow_api_url}")

    yield

    logger.info(f"{settings.service_name} shutting down...")
    client = getattr(app.state, "ragflow_client", None)
    if client is not None:
        await client.close()


def create_application() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="RAGFlow Bridge",
        description="REST facade over a RAGFlow instance with local mirrors of its resources",
        version=settings.service_version,
        lifespan=lifespan
    )

    setup_middleware(app)

    app.include_router(dataset_router, prefix=API_PREFIX)
    app.include_router(dataset_document_router, prefix=API_PREFIX)
    app.include_router(chunk_router, prefix=API_PREFIX)
    app.include_router(conversation_router, prefix=API_PREFIX)
    app.include_router(agent_router, prefix=API_PREFIX)
    app.include_router(knowledge_graph_router, prefix=API_PREFIX)
    app.include_router(system_router, prefix=API_PREFIX)

    setup_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        database_ok = DatabaseManager.check_health()
        health = HealthCheck(
            service_name=settings.service_name,
            status="healthy" if database_ok else "unhealthy",
            details={"database": "ok" if database_ok else "unavailable", "version": settings.service_version}
        )
        return JSONResponse(status_code=200 if database_ok else 503, content=health.model_dump(mode="json"))

    return app


def setup_middleware(app: FastAPI):
    """Setup application middleware"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


def setup_exception_handlers(app: FastAPI):
    """Setup custom exception handlers"""

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.warning(f"Value error in {request.url}: {exc}")
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(message="Invalid request", error=str(exc)).model_dump()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception in {request.url}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message="An unexpected error occurred", error=str(exc)).model_dump()
        )


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ragflow_bridge.presentation.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
