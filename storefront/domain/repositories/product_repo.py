# storefront/domain/repositories/product_repo.py

from __future__ import annotations
from typing import Any, List

from storefront.domain.models.product import ID_PREFIXES, Product
from storefront.domain.repositories.collection_repo import CollectionRepo
from storefront.domain.services.normalizer import normalize_product
from storefront.domain.services.validation import missing_product_fields


class ProductRepo(CollectionRepo[Product]):
    """
    Unified knife/tool catalogue backed by the 'products' document.
    Metadata layout: { version, createdAt, totalProducts, productTypes: {knives, tools} }
    """

    collection = "products"
    version = "2.0"
    total_key = "totalProducts"
    counts_key = "productTypes"
    subtype_labels = {"knife": "knives", "tool": "tools"}
    id_prefixes = ID_PREFIXES

    def normalize(self, partial: Any) -> Product:
        return normalize_product(partial)

    def bulk_missing(self, partial: Any) -> List[str]:
        return missing_product_fields(partial)

    async def read_knives(self) -> List[Product]:
        return await self.read_by_type("knife")

    async def read_tools(self) -> List[Product]:
        return await self.read_by_type("tool")

    async def read_by_category(self, category: str) -> List[Product]:
        return await self.read_where(lambda p: p.category == category)
