"""
Product CSV export and import parsing.

Export writes a fixed column layout. Import matches headers loosely
(case, spaces, dashes and underscores are ignored) and also understands the
legacy and Indonesian column names of older spreadsheets. Parsed rows are
unified-shaped partials; validation happens in the repository bulk paths.
"""
from __future__ import annotations

import csv
import io
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from storefront.domain.models.product import Product

logger = logging.getLogger(__name__)

IMAGE_SEPARATOR = ";"

CSV_COLUMNS = [
    "id", "title", "price", "type", "category", "images",
    "steel", "handleMaterial",
    "bladeLengthCm", "handleLengthCm", "bladeThicknessMm", "weightGr",
    "bladeStyle", "handleStyle", "description", "specs",
    "createdAt", "updatedAt",
    "createdByName", "createdByEmail", "updatedByName", "updatedByEmail",
]

# field -> accepted header spellings (compared after _normalize_key)
_HEADER_ALIASES: Dict[str, List[str]] = {
    "id": ["id"],
    "title": ["title", "judul", "nama"],
    "price": ["price", "harga"],
    "type": ["type", "tipe", "jenis"],
    "category": ["category", "kategori"],
    "images": ["images", "image", "photo", "foto", "gambar", "fotourl"],
    "steel": ["steel", "bahanbaja"],
    "handleMaterial": ["handlematerial", "bahangagang"],
    "bladeLengthCm": ["bladelengthcm", "bladelength", "panjangbilah"],
    "handleLengthCm": ["handlelengthcm", "handlelength", "panjanggagang"],
    "bladeThicknessMm": ["bladethicknessmm", "bladethickness"],
    "weightGr": ["weightgr", "weight", "berat"],
    "bladeStyle": ["bladestyle", "modelbilah"],
    "handleStyle": ["handlestyle", "modelgagang"],
    "description": ["description", "deskripsi"],
    "specs": ["specs"],
    "createdAt": ["createdat"],
    "updatedAt": ["updatedat"],
    "createdByName": ["createdbyname"],
    "createdByEmail": ["createdbyemail"],
    "updatedByName": ["updatedbyname"],
    "updatedByEmail": ["updatedbyemail"],
}


class CsvFormatError(ValueError):
    """The upload is not a usable product CSV (no header, no rows, no title column)."""


def _normalize_key(key: str) -> str:
    return re.sub(r"[\s\-_]", "", (key or "").lower())


def _number_text(value: Optional[float]) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


def product_to_row(product: Product) -> Dict[str, str]:
    created_by, updated_by = product.created_by, product.updated_by
    return {
        "id": product.id,
        "title": product.title,
        "price": str(product.price),
        "type": product.type,
        "category": product.category,
        "images": IMAGE_SEPARATOR.join(product.images),
        "steel": product.steel,
        "handleMaterial": product.handle_material,
        "bladeLengthCm": _number_text(product.blade_length_cm),
        "handleLengthCm": _number_text(product.handle_length_cm),
        "bladeThicknessMm": _number_text(product.blade_thickness_mm),
        "weightGr": _number_text(product.weight_gr),
        "bladeStyle": product.blade_style,
        "handleStyle": product.handle_style,
        "description": product.description,
        "specs": json.dumps(product.specs, ensure_ascii=False) if product.specs else "",
        "createdAt": product.created_at,
        "updatedAt": product.updated_at,
        "createdByName": created_by.name if created_by else "",
        "createdByEmail": created_by.email if created_by else "",
        "updatedByName": updated_by.name if updated_by else "",
        "updatedByEmail": updated_by.email if updated_by else "",
    }


def export_products_csv(products: Iterable[Product]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for product in products:
        writer.writerow(product_to_row(product))
    return buf.getvalue()


def _map_headers(headers: List[str]) -> Dict[str, str]:
    """CSV header -> field name, first matching spelling wins."""
    lookup = {alias: field for field, aliases in _HEADER_ALIASES.items() for alias in aliases}
    mapping: Dict[str, str] = {}
    taken = set()
    for header in headers:
        field = lookup.get(_normalize_key(header))
        if field and field not in taken:
            mapping[header] = field
            taken.add(field)
    return mapping


def _maker(name: str, email: str) -> Optional[Dict[str, str]]:
    if not name and not email:
        return None
    return {"name": name, "email": email}


def _specs(raw: str) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("csv specs column is not JSON, ignored: %r", raw[:80])
        return {}
    return value if isinstance(value, dict) else {}


def row_to_partial(row: Dict[str, str]) -> Dict[str, Any]:
    partial: Dict[str, Any] = {}
    for field in ("id", "title", "price", "type", "category", "steel", "handleMaterial",
                  "bladeLengthCm", "handleLengthCm", "bladeThicknessMm", "weightGr",
                  "bladeStyle", "handleStyle", "description", "createdAt", "updatedAt"):
        value = (row.get(field) or "").strip()
        if value:
            partial[field] = value
    images = [i.strip() for i in (row.get("images") or "").split(IMAGE_SEPARATOR) if i.strip()]
    if images:
        partial["images"] = images
    specs = _specs((row.get("specs") or "").strip())
    if specs:
        partial["specs"] = specs
    created_by = _maker((row.get("createdByName") or "").strip(), (row.get("createdByEmail") or "").strip())
    updated_by = _maker((row.get("updatedByName") or "").strip(), (row.get("updatedByEmail") or "").strip())
    if created_by:
        partial["createdBy"] = created_by
    if updated_by:
        partial["updatedBy"] = updated_by
    return partial


def parse_products_csv(text: str) -> List[Dict[str, Any]]:
    """
    Unified-shaped partials, one per non-blank data row.
    Raises CsvFormatError when there is no header, no title column or no data row.
    """
    text = text.lstrip("\ufeff")
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise CsvFormatError("CSV has no header row")
    mapping = _map_headers(list(reader.fieldnames))
    if "title" not in mapping.values():
        raise CsvFormatError("CSV has no title column")

    partials: List[Dict[str, Any]] = []
    for raw in reader:
        row = {field: raw.get(header) or "" for header, field in mapping.items()}
        if not any(v.strip() for v in row.values()):
            continue
        partials.append(row_to_partial(row))
    if not partials:
        raise CsvFormatError("CSV has no data rows")
    return partials
