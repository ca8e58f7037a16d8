# storefront/api/v1/routers/articles.py

from fastapi import APIRouter, Body, Depends, Query, HTTPException
from typing import Annotated, Any, Dict, Optional

from storefront.api.deps import article_repo, attribution, require_admin
from storefront.core.oauth import AdminIdentity
from storefront.domain.models.article import ARTICLE_TYPES
from storefront.domain.repositories.article_repo import ArticleRepo
from storefront.domain.services.validation import format_missing, missing_article_fields
from storefront.api.v1.schemas.catalog import ArticleListOut

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["articles"])

RepoDep = Annotated[ArticleRepo, Depends(article_repo)]
AdminDep = Annotated[AdminIdentity, Depends(require_admin)]

_SERVER_FIELDS = ("id", "createdAt", "updatedAt", "createdBy", "updatedBy")


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Article not found")


@router.get("/articles", response_model=ArticleListOut, summary="List articles, optionally by type")
async def list_articles(
    repo: RepoDep,
    type: Optional[str] = Query(None, description="news | knowledge | blog"),
):
    # unknown types list everything
    if type in ARTICLE_TYPES:
        articles = await repo.read_by_type(type)
    else:
        articles = await repo.read_all()
    logger.info("GET /articles type=%s -> %s items", type or "all", len(articles))
    return {"articles": [a.to_doc() for a in articles], "total": len(articles)}


@router.get("/articles/{article_id}")
async def get_article(article_id: str, repo: RepoDep):
    article = await repo.read_by_id(article_id)
    if article is None:
        raise _not_found()
    return article.to_doc()


@router.post("/articles", status_code=201, summary="Create an article (admin)")
async def create_article(repo: RepoDep, admin: AdminDep, payload: Dict[str, Any] = Body(...)):
    missing = missing_article_fields(payload)
    if missing:
        raise HTTPException(status_code=400, detail=format_missing(missing))

    maker = attribution(admin)
    data = {k: v for k, v in payload.items() if k not in _SERVER_FIELDS}
    data["createdBy"] = maker
    data["updatedBy"] = maker
    article = await repo.upsert_one(data)
    logger.info("POST /articles id=%s type=%s", article.id, article.type)
    return article.to_doc()


@router.put("/articles/{article_id}", summary="Update an article (admin)")
async def update_article(
    article_id: str,
    repo: RepoDep,
    admin: AdminDep,
    payload: Dict[str, Any] = Body(...),
):
    existing = await repo.read_by_id(article_id)
    if existing is None:
        raise _not_found()

    missing = missing_article_fields({**existing.to_doc(), **payload})
    if missing:
        raise HTTPException(status_code=400, detail=format_missing(missing))

    changes = {k: v for k, v in payload.items() if k not in _SERVER_FIELDS}
    changes["updatedBy"] = attribution(admin)
    article = await repo.update_by_id(article_id, changes)
    if article is None:
        raise _not_found()
    logger.info("PUT /articles/%s", article_id)
    return article.to_doc()


@router.delete("/articles/{article_id}", summary="Delete an article (admin)")
async def delete_article(article_id: str, repo: RepoDep, admin: AdminDep):
    if not await repo.delete_by_id(article_id):
        raise _not_found()
    logger.info("DELETE /articles/%s by=%s", article_id, admin.name or admin.email)
    return {"success": True, "id": article_id}
