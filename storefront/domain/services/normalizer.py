"""
Turns untrusted partial records into complete entities.

Normalization never fails: unknown or malformed values fall back to the
field's empty default. Ids and timestamps are passed through untouched (blank
when absent); assigning them is the repository's job.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional

from storefront.domain.models.article import ARTICLE_TYPES, Article
from storefront.domain.models.product import (
    KNIFE_CATEGORIES,
    LEGACY_CATEGORY_TYPES,
    PRODUCT_TYPES,
    TOOL_CATEGORIES,
    Maker,
    Product,
)


def as_number(value: Any) -> Optional[float]:
    """Finite float for numbers and numeric strings, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            num = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def as_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        return str(value)
    except ValueError:
        # int with more digits than the interpreter will print
        return ""


def first_present(partial: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key that is set to something other than None/''."""
    for key in keys:
        value = partial.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_mapping(partial: Any) -> Mapping[str, Any]:
    return partial if isinstance(partial, Mapping) else {}


def _as_images(partial: Mapping[str, Any]) -> List[str]:
    images = partial.get("images")
    if isinstance(images, (list, tuple)):
        return [img for img in (as_text(i) for i in images) if img]
    if isinstance(images, str) and images:
        return [images]
    single = as_text(partial.get("image"))
    return [single] if single else []


def _as_specs(value: Any) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        return {}
    specs: Dict[str, Any] = {}
    for key, val in value.items():
        if isinstance(val, bool):
            specs[str(key)] = str(val).lower()
        elif isinstance(val, (int, float)) and as_number(val) is not None:
            specs[str(key)] = val
        else:
            specs[str(key)] = as_text(val)
    return specs


def _as_maker(value: Any) -> Optional[Maker]:
    if not isinstance(value, Mapping):
        return None
    email, name = as_text(value.get("email")), as_text(value.get("name"))
    if not email and not name:
        return None
    return Maker(email=email, name=name)


def product_type_for(category: str) -> str:
    if category in KNIFE_CATEGORIES:
        return "knife"
    if category in TOOL_CATEGORIES:
        return "tool"
    return LEGACY_CATEGORY_TYPES.get(category, "knife")


def normalize_product(partial: Any) -> Product:
    p = _as_mapping(partial)
    category = as_text(p.get("category"))
    raw_type = as_text(p.get("type"))
    price = as_number(p.get("price"))
    blade = as_number(first_present(p, "bladeLengthCm", "bladeLength"))
    handle = as_number(first_present(p, "handleLengthCm", "handleLength"))

    return Product(
        id=as_text(p.get("id")),
        title=as_text(p.get("title")),
        price=int(price) if price is not None else 0,
        type=raw_type if raw_type in PRODUCT_TYPES else product_type_for(category),
        category=category,
        images=_as_images(p),
        steel=as_text(p.get("steel")),
        handle_material=as_text(p.get("handleMaterial")),
        blade_length_cm=blade if blade is not None else 0,
        handle_length_cm=handle if handle is not None else 0,
        blade_thickness_mm=as_number(p.get("bladeThicknessMm")),
        weight_gr=as_number(p.get("weightGr")),
        blade_style=as_text(p.get("bladeStyle")),
        handle_style=as_text(p.get("handleStyle")),
        description=as_text(p.get("description")),
        specs=_as_specs(p.get("specs")),
        created_at=as_text(p.get("createdAt")),
        updated_at=as_text(p.get("updatedAt")),
        created_by=_as_maker(p.get("createdBy")),
        updated_by=_as_maker(p.get("updatedBy")),
    )


def normalize_article(partial: Any) -> Article:
    a = _as_mapping(partial)
    raw_type = as_text(a.get("type"))

    return Article(
        id=as_text(a.get("id")),
        type=raw_type if raw_type in ARTICLE_TYPES else "news",
        title=as_text(a.get("title")),
        excerpt=as_text(a.get("excerpt")),
        content=as_text(a.get("content")),
        image=as_text(a.get("image")),
        icon=as_text(a.get("icon")),
        publish_date=as_text(a.get("publishDate")),
        read_time=as_text(a.get("readTime")),
        created_at=as_text(a.get("createdAt")),
        updated_at=as_text(a.get("updatedAt")),
        created_by=_as_maker(a.get("createdBy")),
        updated_by=_as_maker(a.get("updatedBy")),
    )
