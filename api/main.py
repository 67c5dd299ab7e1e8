"""
FastAPI application factory and configuration.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before importing config-dependent modules
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

from catalog.config import CORS_ORIGINS
from catalog.logger import setup_logging
from catalog.postgrest import PostgrestQueryService

from .routes import journals, stats


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: one shared query service for every request
    setup_logging()
    service = PostgrestQueryService.from_env()
    app.state.query_service = service
    yield
    # Shutdown
    await service.aclose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Medical Journal Directory API",
        description="Read-only catalog API for the medical journal directory",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS configuration for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(stats.router, prefix="/api/v1", tags=["stats"])
    app.include_router(journals.router, prefix="/api/v1", tags=["journals"])

    @app.get("/api/v1/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Create app instance for uvicorn
app = create_app()
