from pathlib import Path
from typing import Optional

from clipsync.storage.base import KeyValueStorage

BACKENDS = ("memory", "file", "redis")


def create_storage(backend: str, data_dir: Optional[Path] = None) -> KeyValueStorage:
    if backend == "memory":
        from clipsync.storage.memory import MemoryStorage
        return MemoryStorage()
    elif backend == "file":
        from clipsync.storage.json_file import JsonFileStorage
        return JsonFileStorage(data_dir)
    elif backend == "redis":
        from clipsync.storage.redis_storage import RedisConfig
        return RedisConfig.from_env().create_storage()
    else:
        raise ValueError(f"Storage backend '{backend}' is not supported")
