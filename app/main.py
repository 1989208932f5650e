"""FastAPI application factory and main entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.dependencies import build_explorer_service
from app.api.routes import router
from app.config import Settings, get_settings
from app.core.exceptions import ExplorerError
from app.middleware.security import RateLimitMiddleware, SecurityHeadersMiddleware
from app.services.explorer import ExplorerService
from app.services.rate_limit_service import RateLimitService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    explorer: ExplorerService | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment.
        explorer: Pre-built explorer service (tests inject one backed by
            fake connections). Built from settings at startup when omitted.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager for startup and shutdown events."""
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        service = explorer or build_explorer_service(settings)
        app.state.explorer = service

        default = service.registry.default_network
        try:
            version = await service.node_version(default)
            logger.info(f"Connected to Solana {default}. Version: {version}")
        except ExplorerError as e:
            logger.error(f"Failed to connect to Solana {default}: {e.message}")

        yield

        logger.info("Shutting down, closing network connections...")
        await service.close()
        logger.info("Cleanup complete")

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Solana blockchain explorer API: look up transactions and accounts "
            "on mainnet, testnet and devnet."
        ),
        version=settings.app_version,
        lifespan=lifespan,
    )

    allowed_origins = ["*"]
    if settings.allowed_origins:
        allowed_origins = [
            origin.strip()
            for origin in settings.allowed_origins.split(",")
            if origin.strip()
        ]

    # Middleware added last runs first: headers wrap rate limiting wraps CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials="*" not in allowed_origins,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )
    app.add_middleware(
        RateLimitMiddleware,
        rate_limiter=RateLimitService(
            limit=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    )
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(router)

    @app.get("/api", tags=["root"])
    async def api_info() -> dict[str, str]:
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/api/health",
        }

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )
