from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from datagen.config.settings import Settings, get_settings
from datagen.dependencies import build_services
from datagen.middlewares.request_validation_middleware import (
    RequestValidationMiddleware,
)
from datagen.routers import generation_router
from datagen.services.llm_service import LLMInterface
from datagen.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    llm_service: Optional[LLMInterface] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    services = build_services(settings, llm_service=llm_service, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Application startup complete",
            ai_configured=services.llm_service.is_configured,
        )
        yield
        try:
            await services.close()
            logger.info("Application shutdown complete")
        except Exception as e:
            logger.error(f"Error during application shutdown: {e}")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )
    app.state.services = services

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    app.add_middleware(
        RequestValidationMiddleware,
        paths=(
            f"{settings.API_PREFIX}/generate",
            f"{settings.API_PREFIX}/download",
        ),
    )

    # Include routers
    app.include_router(generation_router.router, prefix=settings.API_PREFIX)

    @app.get(f"{settings.API_PREFIX}/", tags=["Health Check"])
    async def root():
        return {"status": "ok", "message": "Welcome to the Data Generator API"}

    @app.get(f"{settings.API_PREFIX}/health", tags=["Health Check"])
    async def health_check():
        return {"status": "ok", "aiConfigured": services.llm_service.is_configured}

    return app


app = create_app()
