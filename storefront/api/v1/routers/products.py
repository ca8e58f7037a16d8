# storefront/api/v1/routers/products.py

from fastapi import APIRouter, Body, Depends, Query, HTTPException
from typing import Annotated, Any, Dict, List, Optional
import time

from storefront.api.deps import attribution, product_repo, require_admin
from storefront.core.oauth import AdminIdentity
from storefront.core.versioning import ApiVersion, resolve_version
from storefront.domain.models.product import Product
from storefront.domain.repositories.product_repo import ProductRepo
from storefront.domain.services.filters import DEFAULT_SORT, SORT_KEYS, ProductQuery, apply_query
from storefront.domain.services.legacy import to_legacy, unify_legacy_keys
from storefront.domain.services.validation import format_missing, missing_product_fields
from storefront.api.v1.schemas.catalog import ProductListOut

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])

VersionDep = Annotated[ApiVersion, Depends(resolve_version)]
RepoDep = Annotated[ProductRepo, Depends(product_repo)]
AdminDep = Annotated[AdminIdentity, Depends(require_admin)]

SORT_PATTERN = "^(" + "|".join(SORT_KEYS) + ")$"


def present(product: Product, version: ApiVersion) -> Dict[str, Any]:
    """Wire shape for the requested API version."""
    if version == "v1":
        return to_legacy(product).to_doc()
    return product.to_doc()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Product not found")


@router.get("/products", response_model=ProductListOut, summary="List products with filters and sorting")
async def list_products(
    version: VersionDep,
    repo: RepoDep,
    type: Optional[str] = Query(None, description="knife | tool | all"),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Substring of title or description"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    min_blade_length: Optional[float] = Query(None, alias="minBladeLength"),
    max_blade_length: Optional[float] = Query(None, alias="maxBladeLength"),
    steel: Optional[str] = Query(None),
    handle: Optional[str] = Query(None, description="Handle material"),
    maker: Optional[str] = Query(None, description="Email or name of creator/editor"),
    sort_by: str = Query(DEFAULT_SORT, alias="sortBy", pattern=SORT_PATTERN),
    sort_order: str = Query("asc", alias="sortOrder", pattern=r"^(asc|desc)$"),
):
    t0 = time.perf_counter()
    query = ProductQuery(
        type=type, category=category, steel=steel, handle_material=handle, maker=maker,
        search=search, min_price=min_price, max_price=max_price,
        min_blade_length=min_blade_length, max_blade_length=max_blade_length,
        sort_by=sort_by, sort_order=sort_order,
    )
    products = apply_query(await repo.read_all(), query)
    filters = {
        "type": type, "category": category, "search": search,
        "minPrice": min_price, "maxPrice": max_price,
        "minBladeLength": min_blade_length, "maxBladeLength": max_blade_length,
        "steel": steel, "handle": handle, "maker": maker,
        "sortBy": sort_by, "sortOrder": sort_order,
    }
    logger.info("GET /products version=%s -> %s items in %.3fs", version, len(products), time.perf_counter() - t0)
    return {
        "products": [present(p, version) for p in products],
        "total": len(products),
        "filters": {k: v for k, v in filters.items() if v is not None},
    }


@router.get("/products/{product_id}", summary="One product by id")
async def get_product(product_id: str, version: VersionDep, repo: RepoDep):
    product = await repo.read_by_id(product_id)
    if product is None:
        raise _not_found()
    return present(product, version)


@router.post("/products", status_code=201, summary="Create a product (admin)")
async def create_product(
    version: VersionDep,
    repo: RepoDep,
    admin: AdminDep,
    payload: Dict[str, Any] = Body(...),
):
    missing = missing_product_fields(payload, require_images=True)
    if missing:
        raise HTTPException(status_code=400, detail=format_missing(missing))

    maker = attribution(admin)
    # ids are always assigned by the repository on create
    data = {k: v for k, v in payload.items() if k not in ("id", "createdAt", "updatedAt")}
    data["createdBy"] = maker
    data["updatedBy"] = maker
    product = await repo.upsert_one(data)
    logger.info("POST /products id=%s type=%s by=%s", product.id, product.type, admin.name or admin.email)
    return present(product, version)


@router.put("/products/{product_id}", summary="Update a product (admin)")
async def update_product(
    product_id: str,
    version: VersionDep,
    repo: RepoDep,
    admin: AdminDep,
    payload: Dict[str, Any] = Body(...),
):
    existing = await repo.read_by_id(product_id)
    if existing is None:
        raise _not_found()

    payload = unify_legacy_keys(payload)
    merged = {**existing.to_doc(), **payload}
    missing = missing_product_fields(merged)
    if missing:
        raise HTTPException(status_code=400, detail=format_missing(missing))

    changes = {k: v for k, v in payload.items() if k not in ("id", "createdAt", "createdBy")}
    changes["updatedBy"] = attribution(admin)
    product = await repo.update_by_id(product_id, changes)
    if product is None:
        raise _not_found()
    logger.info("PUT /products/%s by=%s", product_id, admin.name or admin.email)
    return present(product, version)


@router.delete("/products/{product_id}", summary="Delete a product (admin)")
async def delete_product(product_id: str, repo: RepoDep, admin: AdminDep):
    if not await repo.delete_by_id(product_id):
        raise _not_found()
    logger.info("DELETE /products/%s by=%s", product_id, admin.name or admin.email)
    return {"success": True, "id": product_id}


async def _typed(repo: ProductRepo, product_type: str, product_id: str) -> Product:
    product = await repo.read_by_id(product_id)
    if product is None or product.type != product_type:
        raise _not_found()
    return product


def _listing(products: List[Product], version: ApiVersion) -> Dict[str, Any]:
    return {"products": [present(p, version) for p in products], "total": len(products)}


@router.get("/knives", summary="All knives")
async def list_knives(version: VersionDep, repo: RepoDep):
    return _listing(await repo.read_knives(), version)


@router.get("/knives/{product_id}", summary="One knife by id")
async def get_knife(product_id: str, version: VersionDep, repo: RepoDep):
    return present(await _typed(repo, "knife", product_id), version)


@router.get("/tools", summary="All tools")
async def list_tools(version: VersionDep, repo: RepoDep):
    return _listing(await repo.read_tools(), version)


@router.get("/tools/{product_id}", summary="One tool by id")
async def get_tool(product_id: str, version: VersionDep, repo: RepoDep):
    return present(await _typed(repo, "tool", product_id), version)
