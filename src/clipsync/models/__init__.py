from clipsync.models.board import Board
from clipsync.models.clipboard_item import ClipboardItem
from clipsync.models.content_type import ContentType
from clipsync.models.settings import Settings

__all__ = [
    'Board',
    'ClipboardItem',
    'ContentType',
    'Settings',
]
