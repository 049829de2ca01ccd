"""
FastAPI Application Configuration

This module contains the main FastAPI application setup with:
- CORS middleware
- API routes
- Simulator lifecycle
- Error handling
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import uvicorn
import logging

from ..core import (
    NetworkSimulator, NotFoundError, InvalidStateError, InvalidArgumentError
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager: one simulator per process run"""
    # Startup
    logger.info("Starting Dynamic Network Simulator API...")
    app.state.simulator = NetworkSimulator()

    yield

    # Shutdown
    logger.info("Shutting down...")
    app.state.simulator.teardown()


# =============================================================================
# Create FastAPI Application
# =============================================================================

app = FastAPI(
    title="Dynamic Network Simulator API",
    description="""
    API for the procedural network and intrusion-session simulator.

    ## Features
    - Generate target networks per difficulty
    - Run hacking sessions and read traceback risk
    - Install backdoors on compromised nodes
    - Advance the autonomous defense tick
    """,
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# =============================================================================
# CORS Configuration
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Import and Include Routers
# =============================================================================

from .routes import networks, sessions

app.include_router(networks.router, prefix="/api/networks", tags=["Networks"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["Sessions"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint with welcome message and links"""
    return {
        "message": "Welcome to the Dynamic Network Simulator API",
        "version": "0.1.0",
        "documentation": "/api/docs",
        "health": "/health",
        "endpoints": {
            "networks": "/api/networks",
            "sessions": "/api/sessions",
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "dynamic-network-simulator-api",
        "version": "0.1.0"
    }


# =============================================================================
# Error Handlers
# =============================================================================

def _error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": detail,
            "status_code": status_code
        }
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler"""
    return _error_response(exc.status_code, exc.detail)


@app.exception_handler(NotFoundError)
async def not_found_handler(request, exc):
    return _error_response(404, str(exc))


@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request, exc):
    return _error_response(409, str(exc))


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request, exc):
    return _error_response(400, str(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(500, "Internal server error")


def run(host: str = "127.0.0.1", port: int = 8000):
    """Serve the API with uvicorn"""
    uvicorn.run(app, host=host, port=port)
