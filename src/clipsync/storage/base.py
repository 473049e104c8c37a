import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from clipsync.exceptions import StorageError

ITEMS_KEY = "clipboardItems"
SETTINGS_KEY = "settings"
BOARDS_KEY = "boards"


class KeyValueStorage(ABC):
    """Synchronous key/value storage holding JSON-compatible values.

    Values are always read and written whole; there is no partial update.
    Implementations raise ``StorageError`` on failure.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "KeyValueStorage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


async def call_storage(func: Callable[..., Any], *args: Any) -> Any:
    """Run a blocking storage call off the event loop.

    Anything other than ``StorageError`` raised by the backend is wrapped so
    callers only ever see the storage error type.
    """
    try:
        return await asyncio.to_thread(func, *args)
    except StorageError:
        raise
    except Exception as e:
        raise StorageError(f"{type(e).__name__}: {e}") from e
