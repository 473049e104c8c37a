from typing import Optional

from clipsync.clipboard.base import ClipboardBackend
from clipsync.exceptions import ClipboardAccessError


class MemoryClipboard(ClipboardBackend):
    """Process-local clipboard for headless runs and tests."""

    def __init__(self, text: str = "", selection: str = ""):
        self.text = text
        self.selection = selection
        self.denied: Optional[str] = None

    def deny(self, reason: str = "permission denied") -> None:
        self.denied = reason

    def allow(self) -> None:
        self.denied = None

    def read_text(self) -> str:
        if self.denied:
            raise ClipboardAccessError(self.denied)
        return self.text

    def write_text(self, text: str) -> None:
        if self.denied:
            raise ClipboardAccessError(self.denied)
        self.text = text

    def read_selection(self) -> str:
        return self.selection
