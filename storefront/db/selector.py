"""
Chooses the storage backend once per process.

STORAGE_BACKEND=file|remote-kv|memory pins the choice. With `auto` the order
is: durable file when DATA_DIR is writable, else the remote KV service when it
is configured and reachable, else the volatile in-memory store (with a warning).
"""

from __future__ import annotations
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from storefront.core.config import Settings
from storefront.db.errors import StorageConfigError
from storefront.db.file_store import FileStore
from storefront.db.kv_store import KVStore
from storefront.db.memory_store import MemoryStore

logger = logging.getLogger(__name__)

Store = Union[FileStore, KVStore, MemoryStore]

VOLATILE_WARNING = "No persistent storage available: data is kept in memory and lost on restart."


def disk_writable(data_dir: Path) -> bool:
    """Probe by actually creating (and removing) a file in the data directory."""
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=data_dir, prefix=".probe-"):
            pass
        return True
    except OSError as e:
        logger.info("DATA_DIR %s is not writable: %s", data_dir, e)
        return False


def _flag(value: Any) -> str:
    return "***configured***" if value else "not-set"


@dataclass
class BackendSelection:
    store: Store
    reason: str
    environment: str = "development"
    kv_url_set: bool = False
    kv_token_set: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return self.store.kind

    @property
    def durable(self) -> bool:
        return self.store.durable

    def describe(self, collection: Optional[str] = None) -> Dict[str, Any]:
        """Status for diagnostics; credential values are never included."""
        info: Dict[str, Any] = {
            "environment": self.environment,
            "storageType": self.kind,
            "persistent": self.durable,
            "reason": self.reason,
            "warnings": list(self.warnings),
            "kvConfig": {
                "url": _flag(self.kv_url_set),
                "token": _flag(self.kv_token_set),
            },
        }
        if collection:
            info["dbPath"] = self.store.location(collection)
        return info


def select_backend(
    settings: Settings,
    kv_client: Any = None,
    memory: Optional[MemoryStore] = None,
) -> BackendSelection:
    """
    Resolve the backend for this process. `kv_client` is an already connected
    redis client (or None), `memory` lets callers inject the volatile store.
    """
    data_dir = Path(settings.DATA_DIR).expanduser()
    choice = settings.STORAGE_BACKEND
    common = dict(
        environment=settings.APP_ENV,
        kv_url_set=bool(settings.KV_URL),
        kv_token_set=bool(settings.KV_TOKEN),
    )

    if choice == "file":
        selection = BackendSelection(FileStore(data_dir), reason="configured", **common)
    elif choice == "remote-kv":
        if kv_client is None:
            raise StorageConfigError(
                "STORAGE_BACKEND=remote-kv but the KV service is not configured or unreachable"
            )
        selection = BackendSelection(KVStore(kv_client, settings.KV_KEY_PREFIX), reason="configured", **common)
    elif choice == "memory":
        selection = BackendSelection(memory or MemoryStore(), reason="configured", **common)
        selection.warnings.append(VOLATILE_WARNING)
    elif disk_writable(data_dir):
        selection = BackendSelection(FileStore(data_dir), reason="local disk writable", **common)
    elif kv_client is not None:
        selection = BackendSelection(
            KVStore(kv_client, settings.KV_KEY_PREFIX), reason="no writable disk, KV configured", **common
        )
    else:
        selection = BackendSelection(
            memory or MemoryStore(), reason="no writable disk and no KV service", **common
        )
        selection.warnings.append(VOLATILE_WARNING)
        if settings.kv_configured:
            selection.warnings.append("KV_URL is set but the KV service could not be reached.")

    logger.info(
        "storage backend=%s durable=%s reason=%s kv_url=%s kv_token=%s",
        selection.kind, selection.durable, selection.reason,
        _flag(settings.KV_URL), _flag(settings.KV_TOKEN),
    )
    for warning in selection.warnings:
        logger.warning(warning)
    return selection
