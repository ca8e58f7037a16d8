"""
Local file storage: one JSON document per collection under DATA_DIR.
Reads load the whole document, writes rewrite it atomically.
"""

from __future__ import annotations
import asyncio
import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from storefront.db.errors import StorageError
from storefront.utils.locks import WriteQueue

logger = logging.getLogger(__name__)


class FileStore:
    """Durable backend writing `<collection>.db.json` files."""

    kind = "file"
    durable = True

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        self.write_queue = WriteQueue("file")

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.db.json"

    def location(self, collection: str) -> str:
        return str(self.path_for(collection))

    async def load(self, collection: str) -> Optional[Dict[str, Any]]:
        """Whole document, or None when the collection was never written."""
        return await asyncio.to_thread(self._read, self.path_for(collection))

    async def save(self, collection: str, document: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._write, self.path_for(collection), document)

    @staticmethod
    def _read(path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt document {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected document shape in {path}")
        return data

    @staticmethod
    def _write(path: Path, document: Dict[str, Any]) -> None:
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            # Replace original file atomically
            os.replace(tmp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Cannot write {path}: {e}") from e
        logger.debug("file store wrote %s", path)
