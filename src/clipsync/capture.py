from typing import Iterable, Optional, Union

from clipsync.classifier import classify, derive_title
from clipsync.exceptions import EmptyContentError
from clipsync.models.clipboard_item import ClipboardItem
from clipsync.models.content_type import ContentType


def create_item(
    content: str,
    *,
    title: Optional[str] = None,
    content_type: Optional[Union[ContentType, str]] = None,
    tags: Optional[Iterable[str]] = None,
    board_id: Optional[str] = None,
    is_pinned: bool = False,
    is_favorite: bool = False,
) -> ClipboardItem:
    """Turn raw captured text into a new ClipboardItem.

    Every capture path (keyboard command, page shortcut, clipboard polling,
    dashboard form) goes through here so the type is decided exactly once.
    """
    if content is None or not str(content).strip():
        raise EmptyContentError("nothing to capture: content is empty")

    content = str(content)
    resolved_type = ContentType(
        content_type) if content_type else classify(content)
    resolved_title = (title or "").strip() or derive_title(content, resolved_type)

    return ClipboardItem(
        title=resolved_title,
        content=content,
        type=resolved_type,
        tags=list(tags or []),
        board_id=board_id,
        is_pinned=is_pinned,
        is_favorite=is_favorite,
    )
