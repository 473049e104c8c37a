from clipsync.clipboard.base import ClipboardBackend
from clipsync.clipboard.factory import get_clipboard_backend, get_clipboard_class
from clipsync.clipboard.memory import MemoryClipboard

__all__ = [
    'ClipboardBackend',
    'MemoryClipboard',
    'get_clipboard_backend',
    'get_clipboard_class',
]
