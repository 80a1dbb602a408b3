"""
FastAPI application relaying OAuth authorization-code redirects.

This module wires dependencies and configures the application.
Relay logic is in app/core, delivery adapters in app/infrastructure.
"""

import logging
from contextlib import asynccontextmanager

# Configure logging FIRST, before other local imports
from app.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from app.core.exceptions import RelayError  # noqa: E402
from app.relay import router as relay_router  # noqa: E402
from app.relay.config import get_relay_config  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    A bad configuration is logged here and reported per request through
    the RelayError handler, so health checks keep answering.
    """
    try:
        config = get_relay_config()
    except RelayError as e:
        logger.error(f"Invalid relay configuration: {e}")
    else:
        logger.info(
            f"OAuth server running on port {config.port}",
            extra={"mode": config.mode},
        )
        if config.exchanges_code:
            logger.info(f"Callback URL: {config.redirect_uri}")
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title="OAuth Callback Relay",
    description="Relays OAuth authorization-code redirects to native apps or opener windows",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    """
    Handle relay errors escaping a route (e.g., misconfigured wiring).

    The callback route renders its own failures; this only catches the rest.
    """
    logger.error(f"Relay error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "error",
            "message": str(exc),
        },
    )


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "OAuth server running",
        "endpoints": ["/auth/callback"],
    }


@app.get("/health")
async def health():
    """Health check endpoint for container probes."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(relay_router.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_relay_config().port)
