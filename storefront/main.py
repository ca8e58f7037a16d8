from typing import Any, Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from storefront.core.config import Settings, get_settings
from storefront.core.lifespan import build_lifespan
from storefront.core.logging import configure_logging
from storefront.api.errors import register_error_handlers
from storefront.api.v1.routers.health import router as health_router
from storefront.api.v1.routers.products import router as products_router
from storefront.api.v1.routers.articles import router as articles_router
from storefront.api.v1.routers.admin import router as admin_router
from storefront.api.v1.routers.importer import router as import_router


def create_app(settings: Optional[Settings] = None, kv_client: Optional[Any] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

    app = FastAPI(title=settings.APP_NAME, lifespan=build_lifespan(settings, kv_client))

    # ------- CORS -------
    # ALLOWED_ORIGINS is a CSV list; cookies need explicit origins, never "*"
    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["content-type", "x-api-version"],
            max_age=86400,
        )

    register_error_handlers(app)

    # ------- Routes -------
    app.include_router(health_router)
    app.include_router(products_router, prefix=settings.api_prefix)     # products, knives, tools
    app.include_router(articles_router, prefix=settings.api_prefix)     # news, knowledge, blog
    app.include_router(admin_router, prefix=settings.api_prefix)        # login, status, migration
    app.include_router(import_router, prefix=settings.api_prefix)       # CSV import/export
    return app


app = create_app()
