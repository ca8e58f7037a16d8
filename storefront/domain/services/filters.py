from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from storefront.domain.models.product import Product

SORT_KEYS = ("price", "title", "category", "maker", "createdAt")
DEFAULT_SORT = "price"

@dataclass(frozen=True)
class ProductQuery:
    """
    Catalogue filters, all combined with AND.
    Empty strings and the literal 'all' mean "no filter" for equality fields,
    None means unbounded for range fields.
    """
    type: Optional[str] = None
    category: Optional[str] = None
    steel: Optional[str] = None
    handle_material: Optional[str] = None
    maker: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_blade_length: Optional[float] = None
    max_blade_length: Optional[float] = None
    sort_by: str = DEFAULT_SORT
    sort_order: str = "asc"

def _active(value: Optional[str]) -> bool:
    return bool(value) and value != "all"

def _in_range(value: float, lo: Optional[float], hi: Optional[float]) -> bool:
    if lo is not None and value < lo:
        return False
    if hi is not None and value > hi:
        return False
    return True

def _made_by(product: Product, who: str) -> bool:
    """Matches email or name of either the creator or the last editor."""
    for maker in (product.created_by, product.updated_by):
        if maker and who in (maker.email, maker.name):
            return True
    return False

def _maker_name(product: Product) -> str:
    maker = product.created_by or product.updated_by
    return maker.name if maker else ""

_SORTERS: dict[str, Callable[[Product], object]] = {
    "price": lambda p: p.price,
    "title": lambda p: p.title,
    "category": lambda p: p.category,
    "maker": _maker_name,
    "createdAt": lambda p: p.created_at,
}

def matches(product: Product, q: ProductQuery) -> bool:
    if _active(q.type) and product.type != q.type:
        return False
    if _active(q.category) and product.category != q.category:
        return False
    if _active(q.steel) and product.steel != q.steel:
        return False
    if _active(q.handle_material) and product.handle_material != q.handle_material:
        return False
    if _active(q.maker) and not _made_by(product, q.maker):
        return False
    if not _in_range(product.price, q.min_price, q.max_price):
        return False
    if not _in_range(product.blade_length_cm, q.min_blade_length, q.max_blade_length):
        return False
    if q.search:
        needle = q.search.lower()
        if needle not in product.title.lower() and needle not in product.description.lower():
            return False
    return True

def sort_products(products: Iterable[Product], sort_by: str = DEFAULT_SORT, sort_order: str = "asc") -> List[Product]:
    # sorted() is stable for reverse=True too, equal keys keep their stored order
    key = _SORTERS.get(sort_by, _SORTERS[DEFAULT_SORT])
    return sorted(products, key=key, reverse=(sort_order == "desc"))

def apply_query(products: Iterable[Product], q: ProductQuery) -> List[Product]:
    """Filter then sort; returns a new list and never mutates the input."""
    return sort_products((p for p in products if matches(p, q)), q.sort_by, q.sort_order)
