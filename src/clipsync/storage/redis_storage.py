from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse

import redis

from clipsync.exceptions import StorageError
from clipsync.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)

KEY_PREFIX = "clipsync"


@dataclass(frozen=True)
class RedisConfig:
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    namespace: str = KEY_PREFIX

    @classmethod
    def from_env(cls) -> "RedisConfig":
        uri = os.getenv("REDIS_URI")
        namespace = os.getenv("CLIPSYNC_REDIS_NAMESPACE", cls.namespace)
        if uri:
            return cls.from_uri(uri, namespace=namespace)

        host = os.getenv("REDIS_HOST", cls.host)
        port_raw = os.getenv("REDIS_PORT")
        db_raw = os.getenv("REDIS_DB")
        password = os.getenv("REDIS_PASSWORD") or None

        port = int(port_raw) if port_raw else cls.port
        db = int(db_raw) if db_raw else cls.db

        return cls(host=host, port=port, db=db, password=password, namespace=namespace)

    @classmethod
    def from_uri(cls, uri: str, namespace: str = KEY_PREFIX) -> "RedisConfig":
        parsed = urlparse(uri)
        if parsed.scheme not in {"redis", "rediss"}:
            raise ValueError(
                f"Unsupported Redis URI scheme: {parsed.scheme!r}")

        host = parsed.hostname or cls.host
        port = parsed.port or cls.port
        password = parsed.password or None
        db_fragment = parsed.path.lstrip("/")
        db = int(db_fragment) if db_fragment else cls.db

        return cls(host=host, port=port, db=db, password=password, namespace=namespace)

    def create_storage(self) -> "RedisStorage":
        client = redis.Redis(
            host=self.host,
            port=self.port,
            db=self.db,
            password=self.password,
            decode_responses=True,
        )
        return RedisStorage(client, namespace=self.namespace)


class RedisStorage(KeyValueStorage):
    """
    Key/value storage on Redis.

    Data Structure:
    - <namespace>:clipboardItems -> JSON array of clipboard items (string)
    - <namespace>:settings -> JSON object (string)
    - <namespace>:boards -> JSON array of boards (string)
    """

    def __init__(self, client: "redis.Redis", namespace: str = KEY_PREFIX):
        self.client = client
        self.namespace = namespace
        self._test_connection()

    def _test_connection(self) -> None:
        try:
            self.client.ping()
        except redis.RedisError as e:
            raise StorageError(f"Failed to connect to Redis: {e}") from e

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis read failed for {key}: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value under {key}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        try:
            self.client.set(self._key(key), json.dumps(value))
        except redis.RedisError as e:
            raise StorageError(f"Redis write failed for {key}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis delete failed for {key}: {e}") from e

    def close(self) -> None:
        self.client.close()
