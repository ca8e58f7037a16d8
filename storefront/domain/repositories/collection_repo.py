# storefront/domain/repositories/collection_repo.py

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, Tuple, TypeVar
from pydantic import BaseModel

from storefront.utils.ids import generate_id, utc_now_iso

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class CollectionRepo(Generic[T]):
    """
    CRUD over one named collection stored as a single JSON document:
      { "<collection>": [records...], "metadata": {...} }
    Every write reloads the document, applies the change and rewrites it in
    full inside the backend's write queue. Metadata is derived from the record
    set on every write and is never authoritative on its own.
    Subclasses describe the entity (normaliser, id prefixes, metadata layout).
    """

    collection: str = ""
    version: str = "1.0"
    total_key: str = "total"
    counts_key: str = "types"
    subtype_labels: Dict[str, str] = {}     # subtype -> key under counts_key
    id_prefixes: Dict[str, str] = {}

    def __init__(self, store):
        self.store = store

    # ----- Entity hooks ------------------------------------------------------

    def normalize(self, partial: Any) -> T:
        raise NotImplementedError

    def bulk_missing(self, partial: Any) -> List[str]:
        """Missing required fields for the bulk paths; non-empty means skip."""
        raise NotImplementedError

    # ----- Document I/O ------------------------------------------------------

    async def _load(self) -> Tuple[List[T], str]:
        """Records plus the collection creation timestamp."""
        doc = await self.store.load(self.collection)
        if not doc:
            return [], utc_now_iso()
        raw = doc.get(self.collection)
        records = [self.normalize(r) for r in raw if isinstance(r, Mapping)] if isinstance(raw, list) else []
        meta = doc.get("metadata")
        created_at = meta.get("createdAt") if isinstance(meta, Mapping) else None
        return records, str(created_at or utc_now_iso())

    async def _save(self, records: List[T], created_at: str) -> None:
        document = {
            self.collection: [r.model_dump(by_alias=True) for r in records],
            "metadata": self.build_metadata(records, created_at),
        }
        await self.store.save(self.collection, document)

    def build_metadata(self, records: Iterable[T], created_at: str) -> Dict[str, Any]:
        records = list(records)
        counts = {
            label: sum(1 for r in records if getattr(r, "type", None) == subtype)
            for subtype, label in self.subtype_labels.items()
        }
        return {
            "version": self.version,
            "createdAt": created_at,
            self.total_key: len(records),
            self.counts_key: counts,
        }

    # ----- Reads -------------------------------------------------------------

    async def read_all(self) -> List[T]:
        records, _ = await self._load()
        return records

    async def read_by_id(self, record_id: str) -> Optional[T]:
        for r in await self.read_all():
            if r.id == record_id:
                return r
        return None

    async def read_where(self, predicate: Callable[[T], bool]) -> List[T]:
        return [r for r in await self.read_all() if predicate(r)]

    async def read_by_type(self, subtype: str) -> List[T]:
        return await self.read_where(lambda r: r.type == subtype)

    async def read_metadata(self) -> Dict[str, Any]:
        records, created_at = await self._load()
        return self.build_metadata(records, created_at)

    # ----- Writes ------------------------------------------------------------

    def _new_id(self, entity: T) -> str:
        return generate_id(self.id_prefixes.get(entity.type, ""))

    @staticmethod
    def _index_of(records: List[T], record_id: str) -> Optional[int]:
        for i, r in enumerate(records):
            if r.id == record_id:
                return i
        return None

    def _upsert_into(self, records: List[T], partial: Any, now: str) -> T:
        entity = self.normalize(partial)
        if not entity.id.strip():
            entity.id = self._new_id(entity)
        entity.updated_at = now
        idx = self._index_of(records, entity.id)
        if idx is None:
            entity.created_at = now
            records.append(entity)
        else:
            entity.created_at = records[idx].created_at
            records[idx] = entity
        return entity

    async def upsert_one(self, partial: Any) -> T:
        """Insert, or fully replace the record with the same id (createdAt kept)."""
        async with self.store.write_queue.serialized():
            records, created_at = await self._load()
            entity = self._upsert_into(records, partial, utc_now_iso())
            await self._save(records, created_at)
        logger.info("%s upsert id=%s total=%s", self.collection, entity.id, len(records))
        return entity

    async def _commit_batch(self, partials: Iterable[Any], *, skip_existing: bool = False, replace: bool = False) -> int:
        async with self.store.write_queue.serialized():
            existing, created_at = await self._load()
            records: List[T] = [] if replace else existing
            now = utc_now_iso()
            committed = skipped = 0
            for partial in partials:
                missing = self.bulk_missing(partial)
                if missing:
                    skipped += 1
                    logger.debug("%s bulk skip missing=%s", self.collection, missing)
                    continue
                if skip_existing:
                    pid = str((partial or {}).get("id") or "").strip()
                    if pid and self._index_of(records, pid) is not None:
                        skipped += 1
                        continue
                self._upsert_into(records, partial, now)
                committed += 1
            await self._save(records, created_at)
        if skipped:
            logger.warning("%s bulk write skipped %s invalid or duplicate items", self.collection, skipped)
        logger.info("%s bulk write committed=%s total=%s replace=%s", self.collection, committed, len(records), replace)
        return committed

    async def upsert_many(self, partials: Iterable[Any]) -> int:
        """Upsert every valid item in one storage write; invalid items are dropped."""
        return await self._commit_batch(partials)

    async def append_many(self, partials: Iterable[Any]) -> int:
        """Like upsert_many, but items whose id already exists are left alone."""
        return await self._commit_batch(partials, skip_existing=True)

    async def replace_all(self, partials: Iterable[Any]) -> int:
        """The valid items become the whole collection."""
        return await self._commit_batch(partials, replace=True)

    async def update_by_id(self, record_id: str, partial: Any) -> Optional[T]:
        async with self.store.write_queue.serialized():
            records, created_at = await self._load()
            idx = self._index_of(records, record_id)
            if idx is None:
                return None
            existing = records[idx]
            merged = {**existing.model_dump(by_alias=True), **(partial if isinstance(partial, Mapping) else {})}
            merged["id"] = record_id
            entity = self.normalize(merged)
            entity.created_at = existing.created_at
            entity.updated_at = utc_now_iso()
            records[idx] = entity
            await self._save(records, created_at)
        logger.info("%s update id=%s", self.collection, record_id)
        return entity

    async def delete_by_id(self, record_id: str) -> bool:
        async with self.store.write_queue.serialized():
            records, created_at = await self._load()
            idx = self._index_of(records, record_id)
            if idx is None:
                return False
            records.pop(idx)
            await self._save(records, created_at)
        logger.info("%s delete id=%s total=%s", self.collection, record_id, len(records))
        return True
