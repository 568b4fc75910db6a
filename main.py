"""
FastAPI Application Entry Point

Integrates:
  - AI assistant and provider endpoints
  - Order listing through the confidentiality gate
  - Firewall emergency and administration endpoints
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import ai_router, orders_router
from config import Config
from firewall.router import router as firewall_router
from infra import bootstrap_infrastructure

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    infra = bootstrap_infrastructure()
    logger.info("=" * 60)
    logger.info(f"{Config.APP_NAME} starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Infrastructure: {infra!r}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info(f"{Config.APP_NAME} shutting down...")


# Create FastAPI app
app = FastAPI(
    title=Config.APP_NAME,
    description="AI assistants and confidentiality firewall for a book-printing shop",
    version=Config.APP_VERSION,
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
    # Query strings may carry the firewall secret; log the path only
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


# Include routers
app.include_router(ai_router)
app.include_router(orders_router)
app.include_router(firewall_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness)."""
    try:
        # Check configuration
        Config.validate()
        return {"status": "ready"}
    except ValueError as e:
        return {"status": "not_ready", "reason": str(e)}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": Config.APP_NAME,
        "version": Config.APP_VERSION,
        "status": "running",
        "endpoints": {
            "chat": "POST /ai/chat",
            "assistants": "GET /ai/assistants",
            "providers": "GET /ai/providers",
            "orders": "GET /orders",
            "firewall_emergency": "GET /firewall/emergency",
            "firewall_settings": "GET|POST /firewall/settings",
            "firewall_logs": "GET /firewall/logs",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=Config.APP_PORT,
        reload=Config.ENVIRONMENT == "development",
    )
