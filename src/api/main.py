"""
FastAPI application factory for the relay's HTTP side.

Routes: /devices (the listing existing web clients call), the same router
under /api/v1, /api/v1/system and /api/health. The Socket.IO push channel is
wrapped around this app in main_asyncio.py.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import devices, system
from api.middleware.error_handler import register_exception_handlers
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

SERVICE_NAME = "rgb-relay"


def create_app(
    title: str = "RGB Relay",
    version: str = "1.0.0",
    docs_enabled: bool = True,
    cors_origins: Optional[list[str]] = None
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        title: shown in the OpenAPI docs
        version: reported by /api/health
        docs_enabled: serve /docs, /redoc and /openapi.json
        cors_origins: allowed origins, every origin when None
    """
    app = FastAPI(
        title=title,
        description="Relay color commands to networked RGB controllers",
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )

    origins = cors_origins if cors_origins is not None else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
    )

    register_exception_handlers(app)

    app.include_router(devices.router)
    app.include_router(devices.router, prefix="/api/v1")
    app.include_router(system.router, prefix="/api/v1")

    @app.get("/api/health", tags=["System"], summary="Health check")
    async def health_check():
        return {"status": "healthy", "service": SERVICE_NAME, "version": version}

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": SERVICE_NAME,
            "devices": "/devices",
            "docs": "/docs" if docs_enabled else None,
            "health": "/api/health",
        }

    log.info(f"FastAPI app ready: {title} v{version}", cors=",".join(origins))
    return app
