from fastapi import APIRouter, UploadFile, File, Form, HTTPException, Depends
from fastapi.responses import Response
from typing import Annotated, Literal
from datetime import datetime, timezone
import logging

from storefront.api.deps import attribution, product_repo, require_admin
from storefront.api.v1.schemas.catalog import ImportResult
from storefront.core.oauth import AdminIdentity
from storefront.domain.repositories.product_repo import ProductRepo
from storefront.domain.services.csv_io import CsvFormatError, export_products_csv, parse_products_csv

router = APIRouter(prefix="/admin/products", tags=["import"])

MAX_CSV_MB = 5                    # max allowed upload size (in MB)

logger = logging.getLogger(__name__)

ImportMode = Literal["append", "update", "replace"]
RepoDep = Annotated[ProductRepo, Depends(product_repo)]
AdminDep = Annotated[AdminIdentity, Depends(require_admin)]


def _too_large() -> HTTPException:
    return HTTPException(status_code=413, detail=f"CSV too large (> {MAX_CSV_MB} MB)")


async def _read_text(upload: UploadFile) -> str:
    limit = int(MAX_CSV_MB * 1024 * 1024)
    # size is known up front for spooled multipart uploads
    if upload.size is not None and upload.size > limit:
        raise _too_large()
    # if size unknown, enforce the limit while reading
    raw = await upload.read(limit + 1)
    if len(raw) > limit:
        raise _too_large()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        # spreadsheets exported on Windows
        return raw.decode("latin-1")


@router.post("/import", response_model=ImportResult, summary="Bulk import products from CSV")
async def import_products(
    repo: RepoDep,
    admin: AdminDep,
    file: UploadFile = File(..., description="CSV with a header row"),
    mode: ImportMode = Form("append"),
):
    """
    Modes:
    - append: rows whose id already exists are skipped
    - update: rows are upserted by id
    - replace: the collection becomes exactly the valid rows
    Invalid rows are skipped; only counts are reported.
    """
    text = await _read_text(file)
    try:
        partials = parse_products_csv(text)
    except CsvFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    maker = attribution(admin)
    for partial in partials:
        partial.setdefault("createdBy", maker)
        partial["updatedBy"] = maker

    if mode == "replace":
        imported = await repo.replace_all(partials)
    elif mode == "update":
        imported = await repo.upsert_many(partials)
    else:
        imported = await repo.append_many(partials)

    logger.info(
        "CSV import file=%s mode=%s received=%s imported=%s",
        file.filename, mode, len(partials), imported,
    )
    return ImportResult(mode=mode, received=len(partials), imported=imported)


@router.get("/export", summary="Download all products as CSV")
async def export_products(repo: RepoDep, admin: AdminDep):
    products = await repo.read_all()
    filename = f"products-{datetime.now(timezone.utc):%Y%m%d}.csv"
    logger.info("CSV export rows=%s", len(products))
    return Response(
        content=export_products_csv(products),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
