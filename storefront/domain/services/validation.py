"""Required-field checks shared by the API routes and the bulk write paths."""
from __future__ import annotations

from typing import Any, List, Mapping

from storefront.domain.models.article import ARTICLE_TYPES, KNOWLEDGE_ICONS
from storefront.domain.services.normalizer import as_number, as_text, first_present

# (label, accepted keys)
_PRODUCT_TEXT_FIELDS = (
    ("title", ("title",)),
    ("category", ("category",)),
    ("steel", ("steel",)),
    ("handleMaterial", ("handleMaterial",)),
    ("bladeStyle", ("bladeStyle",)),
    ("handleStyle", ("handleStyle",)),
)
_PRODUCT_NUMBER_FIELDS = (
    ("price", ("price",)),
    ("bladeLengthCm", ("bladeLengthCm", "bladeLength")),
    ("handleLengthCm", ("handleLengthCm", "handleLength")),
)


def _has_text(partial: Mapping[str, Any], *keys: str) -> bool:
    return bool(as_text(first_present(partial, *keys)).strip())


def missing_product_fields(partial: Any, require_images: bool = False) -> List[str]:
    if not isinstance(partial, Mapping):
        partial = {}
    missing = [label for label, keys in _PRODUCT_TEXT_FIELDS if not _has_text(partial, *keys)]
    missing += [
        label for label, keys in _PRODUCT_NUMBER_FIELDS
        if as_number(first_present(partial, *keys)) is None
    ]
    if require_images:
        images = partial.get("images")
        has_list = isinstance(images, (list, tuple)) and any(as_text(i) for i in images)
        if not has_list and not _has_text(partial, "image"):
            missing.append("images")
    return missing


def minimal_article_fields(partial: Any) -> List[str]:
    if not isinstance(partial, Mapping):
        partial = {}
    return [f for f in ("title", "excerpt") if not _has_text(partial, f)]


def missing_article_fields(partial: Any) -> List[str]:
    if not isinstance(partial, Mapping):
        partial = {}
    missing: List[str] = []
    article_type = as_text(partial.get("type"))
    if article_type not in ARTICLE_TYPES:
        missing.append("type")
    missing += minimal_article_fields(partial)

    if article_type in ("news", "blog") and not _has_text(partial, "image"):
        missing.append("image")
    if article_type == "knowledge" and as_text(partial.get("icon")) not in KNOWLEDGE_ICONS:
        missing.append("icon")
    if article_type == "blog":
        missing += [f for f in ("content", "publishDate", "readTime") if not _has_text(partial, f)]
    return missing


def format_missing(fields: List[str]) -> str:
    return "Missing required fields: " + ", ".join(fields)
