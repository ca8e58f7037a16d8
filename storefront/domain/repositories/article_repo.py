from __future__ import annotations
from typing import Any, List

from storefront.domain.models.article import ID_PREFIXES, Article
from storefront.domain.repositories.collection_repo import CollectionRepo
from storefront.domain.services.normalizer import normalize_article
from storefront.domain.services.validation import minimal_article_fields


class ArticleRepo(CollectionRepo[Article]):
    """News, knowledge cards and blog posts backed by the 'articles' document."""

    collection = "articles"
    version = "1.0"
    total_key = "totalArticles"
    counts_key = "articleTypes"
    subtype_labels = {"news": "news", "knowledge": "knowledge", "blog": "blog"}
    id_prefixes = ID_PREFIXES

    def normalize(self, partial: Any) -> Article:
        return normalize_article(partial)

    def bulk_missing(self, partial: Any) -> List[str]:
        # Bulk loads only need a title and an excerpt; per-type rules are enforced by the API
        return minimal_article_fields(partial)
