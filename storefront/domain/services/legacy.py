"""Conversion between the unified product and the pre-unification shape."""
from __future__ import annotations

from typing import Any, Dict

from storefront.domain.models.product import LegacyProduct, Product


def to_legacy(product: Product) -> LegacyProduct:
    """Drops fields the legacy shape has no room for (type, extra dimensions, specs...)."""
    return LegacyProduct(
        id=product.id,
        title=product.title,
        price=product.price,
        category=product.category,
        image=product.images[0] if product.images else "",
        steel=product.steel,
        handle_material=product.handle_material,
        blade_length=product.blade_length_cm,
        handle_length=product.handle_length_cm,
        blade_style=product.blade_style,
        handle_style=product.handle_style,
    )


def legacy_to_partial(legacy: LegacyProduct) -> Dict[str, Any]:
    """Unified-shaped partial; normalize_product fills everything else."""
    return {
        "id": legacy.id,
        "title": legacy.title,
        "price": legacy.price,
        "category": legacy.category,
        "images": [legacy.image] if legacy.image else [],
        "steel": legacy.steel,
        "handleMaterial": legacy.handle_material,
        "bladeLengthCm": legacy.blade_length,
        "handleLengthCm": legacy.handle_length,
        "bladeStyle": legacy.blade_style,
        "handleStyle": legacy.handle_style,
    }


_LEGACY_KEYS = {"bladeLength": "bladeLengthCm", "handleLength": "handleLengthCm"}


def unify_legacy_keys(partial: Dict[str, Any]) -> Dict[str, Any]:
    """
    Rename legacy keys in a write payload so they override stored values when
    merged over an existing record. Unified keys win when both are sent.
    """
    out = dict(partial)
    for old, new in _LEGACY_KEYS.items():
        if old in out:
            value = out.pop(old)
            out.setdefault(new, value)
    if "image" in out:
        image = out.pop("image")
        if "images" not in out and image:
            out["images"] = [image]
    return out
