import logging
import time
from typing import Dict, Iterable

from storefront.db.file_store import FileStore
from storefront.db.kv_store import KVStore

logger = logging.getLogger(__name__)

async def migrate_file_to_kv(
    file_store: FileStore,
    kv_store: KVStore,
    collections: Iterable[str],
) -> Dict[str, int]:
    """
    Copy each collection document from local files into the KV service,
    overwriting whatever the KV key held. Collections without a file are skipped.
    Returns records copied per collection.
    """
    t0 = time.perf_counter()
    copied: Dict[str, int] = {}
    for collection in collections:
        doc = await file_store.load(collection)
        if doc is None:
            logger.info("migrate_kv skip collection=%s (no file)", collection)
            continue
        records = doc.get(collection)
        async with kv_store.write_queue.serialized():
            await kv_store.save(collection, doc)
        copied[collection] = len(records) if isinstance(records, list) else 0
        logger.info("migrate_kv copied collection=%s records=%s", collection, copied[collection])
    logger.info("migrate_kv done collections=%s time=%.3fs", list(copied), time.perf_counter() - t0)
    return copied
