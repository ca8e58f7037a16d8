# storefront/api/deps.py
from typing import Optional
import logging
from fastapi import Depends, HTTPException, Request

from storefront.core.config import Settings
from storefront.core.oauth import OAUTH_COOKIE_NAME, AdminIdentity, verify_oauth_session
from storefront.core.session import COOKIE_NAME, verify_session_value
from storefront.db.selector import BackendSelection
from storefront.domain.models.product import Maker
from storefront.domain.repositories.article_repo import ArticleRepo
from storefront.domain.repositories.product_repo import ProductRepo

logger = logging.getLogger(__name__)

# Everything below is populated by the lifespan (see core/lifespan.py)
def app_settings(request: Request) -> Settings:
    return request.app.state.settings

def storage_dep(request: Request) -> BackendSelection:
    return request.app.state.storage

def product_repo(request: Request) -> ProductRepo:
    return request.app.state.products

def article_repo(request: Request) -> ArticleRepo:
    return request.app.state.articles

def current_admin(request: Request, settings: Settings = Depends(app_settings)) -> Optional[AdminIdentity]:
    """Admin behind either session cookie (legacy signed cookie or OAuth), else None."""
    if verify_session_value(request.cookies.get(COOKIE_NAME), settings.SESSION_SECRET):
        return AdminIdentity(email="", name=settings.ADMIN_USERNAME, source="legacy")
    return verify_oauth_session(request.cookies.get(OAUTH_COOKIE_NAME), settings)

def require_admin(admin: Optional[AdminIdentity] = Depends(current_admin)) -> AdminIdentity:
    # one generic 401 for every failure
    if admin is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return admin

def attribution(admin: AdminIdentity) -> dict:
    return Maker(email=admin.email, name=admin.name).model_dump()
