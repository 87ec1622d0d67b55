"""
FastAPI Application Entry Point

Integrates:
  - Task endpoints (POST /tasks, POST /process, GET /status)
  - Health checks
  - Availability monitor lifecycle
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import router as tasks_router
from config import Config
from infra import bootstrap_infrastructure
from orchestration.health import HealthChecker

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    infra = bootstrap_infrastructure()
    infra.get_monitor().start()
    app.state.health = HealthChecker(
        start_time=_start_time,
        backend=infra.config.inference_backend,
        monitor=infra.get_monitor(),
    )

    logger.info("=" * 60)
    logger.info("VisionLens starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Infrastructure: {infra}")
    logger.info(f"Required models: {', '.join(infra.config.model_catalog().required())}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("VisionLens shutting down...")
    await infra.shutdown()


# Create FastAPI app
app = FastAPI(
    title="VisionLens API",
    description="Local image understanding and translation over Ollama",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400)."""
    return JSONResponse(
        status_code=400,
        content={"status": "error", "message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


# Include routers
app.include_router(tasks_router)


# Health check endpoints
def _health_checker(request: Request) -> HealthChecker:
    checker = getattr(request.app.state, "health", None)
    if checker is None:
        checker = HealthChecker(start_time=_start_time, backend=Config.INFERENCE_BACKEND)
    return checker


@app.get("/health/live")
async def health_live(request: Request):
    """Live health check (Kubernetes liveness probe)."""
    checker = _health_checker(request)
    return HealthChecker.to_dict(checker.check_live())


@app.get("/health/ready")
async def health_ready(request: Request):
    """Readiness health check (Kubernetes readiness probe)."""
    checker = _health_checker(request)
    status = checker.check_ready()
    return JSONResponse(
        status_code=200 if status.ready else 503,
        content=HealthChecker.to_dict(status),
    )


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "VisionLens API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "tasks": "POST /tasks",
            "process": "POST /process",
            "status": "GET /status",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


@app.get("/config/info")
async def config_info():
    """Get non-sensitive configuration info."""
    return {
        "environment": Config.ENVIRONMENT,
        "inference_backend": Config.INFERENCE_BACKEND,
        "ollama_base_url": Config.OLLAMA_BASE_URL,
        "api_port": Config.API_PORT,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=Config.API_PORT,
        reload=Config.ENVIRONMENT == "development",
    )
