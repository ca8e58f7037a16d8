# storefront/api/v1/routers/admin.py

from fastapi import APIRouter, Depends, HTTPException, Response
from typing import Annotated, Optional
import hmac
import logging

from storefront.api.deps import (
    app_settings, article_repo, current_admin, product_repo, require_admin, storage_dep,
)
from storefront.api.v1.schemas.catalog import LoginIn, MigrationResult, SessionOut
from storefront.core.config import Settings
from storefront.core.oauth import OAUTH_COOKIE_NAME, AdminIdentity
from storefront.core.session import ADMIN_SUBJECT, COOKIE_NAME, create_session_value
from storefront.db.file_store import FileStore
from storefront.db.selector import BackendSelection
from storefront.domain.repositories.article_repo import ArticleRepo
from storefront.domain.repositories.product_repo import ProductRepo
from storefront.domain.services.migration_svc import migrate_file_to_kv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

SettingsDep = Annotated[Settings, Depends(app_settings)]
StorageDep = Annotated[BackendSelection, Depends(storage_dep)]

SAMPLE_SIZE = 3


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


@router.post("/login", summary="Legacy username/password login")
async def login(body: LoginIn, response: Response, settings: SettingsDep):
    user_ok = _same(body.username, settings.ADMIN_USERNAME)
    pass_ok = _same(body.password, settings.ADMIN_PASSWORD)
    if not (user_ok and pass_ok):
        logger.info("admin login rejected")
        raise HTTPException(status_code=401, detail="Unauthorized")

    response.set_cookie(
        key=COOKIE_NAME,
        value=create_session_value(ADMIN_SUBJECT, settings.SESSION_SECRET),
        max_age=settings.SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        path="/",
    )
    logger.info("admin login ok")
    return {"success": True}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(COOKIE_NAME, path="/")
    response.delete_cookie(OAUTH_COOKIE_NAME, path="/")
    return {"success": True}


@router.get("/session", response_model=SessionOut)
async def session(admin: Annotated[Optional[AdminIdentity], Depends(current_admin)]):
    if admin is None:
        return SessionOut(authenticated=False)
    return SessionOut(authenticated=True, email=admin.email, name=admin.name, source=admin.source)


@router.get("/db-status", summary="Active storage backend and collection sizes")
async def db_status(
    storage: StorageDep,
    products: Annotated[ProductRepo, Depends(product_repo)],
    articles: Annotated[ArticleRepo, Depends(article_repo)],
):
    """
    Diagnostic view of the storage layer:
    - which backend is active and whether it survives restarts
    - whether KV credentials are present (never their values)
    - record counts and a few sample products
    """
    all_products = await products.read_all()
    all_articles = await articles.read_all()
    return {
        "success": True,
        "productCount": len(all_products),
        "articleCount": len(all_articles),
        "sampleProducts": [
            {"id": p.id, "title": p.title, "type": p.type} for p in all_products[:SAMPLE_SIZE]
        ],
        "metadata": {
            products.collection: await products.read_metadata(),
            articles.collection: await articles.read_metadata(),
        },
        "databaseInfo": storage.describe(products.collection),
    }


@router.post("/migrate-kv", response_model=MigrationResult, summary="Copy file documents into the KV backend")
async def migrate_kv(
    storage: StorageDep,
    settings: SettingsDep,
    admin: Annotated[AdminIdentity, Depends(require_admin)],
):
    if storage.kind != "remote-kv":
        raise HTTPException(status_code=400, detail="KV backend is not active")
    source = FileStore(settings.DATA_DIR)
    migrated = await migrate_file_to_kv(
        source, storage.store, (ProductRepo.collection, ArticleRepo.collection)
    )
    logger.info("migrate-kv by=%s result=%s", admin.name or admin.email, migrated)
    return {"migrated": migrated}
