from clipsync.storage.base import (
    BOARDS_KEY,
    ITEMS_KEY,
    SETTINGS_KEY,
    KeyValueStorage,
)
from clipsync.storage.factory import create_storage
from clipsync.storage.memory import MemoryStorage

__all__ = [
    'BOARDS_KEY',
    'ITEMS_KEY',
    'SETTINGS_KEY',
    'KeyValueStorage',
    'MemoryStorage',
    'create_storage',
]
