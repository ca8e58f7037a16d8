# storefront/core/lifespan.py
from contextlib import asynccontextmanager
from typing import Any, Optional
import logging
from fastapi import FastAPI

from storefront.core.config import DEFAULT_SESSION_SECRET, Settings
from storefront.db import redis as r
from storefront.db.selector import select_backend
from storefront.domain.repositories.article_repo import ArticleRepo
from storefront.domain.repositories.product_repo import ProductRepo

logger = logging.getLogger(__name__)


def build_lifespan(settings: Settings, kv_client: Optional[Any] = None):
    """
    Lifespan bound to one Settings instance. The backend is chosen once here and
    the repositories are exposed on app.state for the API dependencies.
    Passing `kv_client` skips the KV connection (tests, scripts).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup ---
        if settings.APP_ENV == "production" and settings.SESSION_SECRET == DEFAULT_SESSION_SECRET:
            logger.warning("SESSION_SECRET is the development default; set a real secret in production")

        owns_client = kv_client is None and settings.STORAGE_BACKEND in ("auto", "remote-kv")
        client = kv_client
        if owns_client:
            client = await r.connect(settings.KV_URL, settings.KV_TOKEN)

        try:
            selection = select_backend(settings, client)
        except Exception:
            if owns_client:
                await r.disconnect(client)
            raise

        app.state.settings = settings
        app.state.kv = client
        app.state.storage = selection
        app.state.products = ProductRepo(selection.store)
        app.state.articles = ArticleRepo(selection.store)

        # Application runs
        yield

        # --- Shutdown ---
        if owns_client:
            try:
                await r.disconnect(client)
            except Exception as e:
                logger.warning("KV disconnect failed: %s", e)

    return lifespan
