"""Service layer for ClipSync."""

from .board_service import BoardService
from .dispatcher import CaptureDispatcher
from .item_store import InsertResult, LocalItemStore
from .page_agent import KeyChord, KeyEvent, PageAgent
from .settings_store import SettingsStore

__all__ = [
    "BoardService",
    "CaptureDispatcher",
    "InsertResult",
    "KeyChord",
    "KeyEvent",
    "LocalItemStore",
    "PageAgent",
    "SettingsStore",
]
