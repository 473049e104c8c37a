import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from clipsync.exceptions import StorageError
from clipsync.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

STORE_FILE_NAME = "storage.json"


class JsonFileStorage(KeyValueStorage):
    """All keys kept in one JSON document, rewritten atomically on each set."""

    def __init__(self, base_dir: Optional[Path] = None):
        if base_dir is None:
            base_dir = Path.home() / ".clipsync"
        self.base_dir = Path(base_dir)
        self.path = self.base_dir / STORE_FILE_NAME
        self._lock = threading.Lock()
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data dir {self.base_dir}: {e}") from e

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupt storage file {self.path}")
        return data

    def _dump(self, data: Dict[str, Any]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=".storage-", suffix=".json", dir=str(self.base_dir))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)
            logger.debug(f"Wrote key {key} to {self.path}")

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)
