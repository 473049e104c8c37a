from abc import ABC, abstractmethod

from clipsync.exceptions import ClipboardAccessError


class ClipboardBackend(ABC):
    """Text access to the system clipboard.

    Implementations raise ``ClipboardAccessError`` when the clipboard can't be
    read or written (missing tools, permission denied, busy clipboard).
    """

    @abstractmethod
    def read_text(self) -> str:
        pass

    @abstractmethod
    def write_text(self, text: str) -> None:
        pass

    def read_selection(self) -> str:
        """Currently selected text, where the platform exposes one."""
        raise ClipboardAccessError(
            f"{type(self).__name__} has no selection to read")
