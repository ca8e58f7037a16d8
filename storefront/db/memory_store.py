from __future__ import annotations
import copy
import logging
from typing import Any, Dict, Optional

from storefront.utils.locks import WriteQueue

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    Volatile fallback for environments without persistent disk or KV.
    Documents live in this object only and are gone after a restart, so every
    write logs a warning. Construct one per process and inject it.
    """

    kind = "memory"
    durable = False

    def __init__(self, seed: Optional[Dict[str, Dict[str, Any]]] = None):
        self._documents: Dict[str, Dict[str, Any]] = copy.deepcopy(seed or {})
        self.write_queue = WriteQueue("memory")

    def location(self, collection: str) -> str:
        return "in-memory"

    async def load(self, collection: str) -> Optional[Dict[str, Any]]:
        doc = self._documents.get(collection)
        return copy.deepcopy(doc) if doc is not None else None

    async def save(self, collection: str, document: Dict[str, Any]) -> None:
        self._documents[collection] = copy.deepcopy(document)
        logger.warning(
            "Running without persistent storage: %s changes will be lost on restart.", collection
        )
