"""
zk-form Service - Main Application
==================================

FastAPI application verifying zk-form submissions.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.zk_form.routes import verify
from services.zk_form.services.submission import SubmissionService
from shared.config import settings
from shared.logging import get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse
from shared.spaces import get_space_registry
from shared.store import StoreInitRegistry, get_store_backend
from shared.zk import ProofVerifier


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="zk-form",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "zk_form_service_starting",
        environment=settings.environment.value,
        port=settings.port,
        demo=settings.demo,
    )

    # Startup
    try:
        spaces = get_space_registry()
        logger.info("spaces_ready", spaces=len(spaces))

        backend = get_store_backend()
        logger.info("store_ready", mode=backend.mode.value)

        verifier = ProofVerifier()

    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    app.state.verifier = verifier
    app.state.store_backend = backend
    app.state.submission_service = SubmissionService(
        spaces=spaces,
        backend=backend,
        init_registry=StoreInitRegistry(),
        verifier=verifier,
    )

    yield

    # Shutdown
    logger.info("zk_form_service_shutting_down")
    await verifier.close()
    await backend.close()


# Create FastAPI application
app = FastAPI(
    title="zk-form Service",
    description="Zero-knowledge proof verified form submissions",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and its dependencies.
    """
    components: dict[str, dict[str, Any]] = {
        "store": await app.state.store_backend.health_check(),
        "verifier": await app.state.verifier.health_check(),
    }

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="zk-form",
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "zk-form Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    verify.router,
    prefix="/api/zk-form",
    tags=["zk-form"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail), status_code=exc.status_code).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Any, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        ).model_dump(),
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.zk_form.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
