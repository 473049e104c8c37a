"""ClipSync: capture, classify and organize clipboard items."""

from clipsync.capture import create_item
from clipsync.classifier import classify, derive_title
from clipsync.models import Board, ClipboardItem, ContentType, Settings

__version__ = "0.1.0"

__all__ = [
    'Board',
    'ClipboardItem',
    'ContentType',
    'Settings',
    'classify',
    'create_item',
    'derive_title',
]
