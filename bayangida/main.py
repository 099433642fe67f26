"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bayangida import __version__
from bayangida.api import router
from bayangida.config import get_settings
from bayangida.state.manager import close_state_manager, get_state_manager
from bayangida.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("application_starting")

    await get_state_manager()
    logger.info("state_manager_initialized")

    yield

    logger.info("application_shutting_down")
    await close_state_manager()


app = FastAPI(
    title="Bayangida Order Operations",
    description="Order lifecycle and driver assignment API for the Bayangida admin dashboard",
    version=__version__,
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "bayangida-orders"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": "Bayangida Order Operations API",
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(router, prefix="/api/v1", tags=["api"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bayangida.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )
