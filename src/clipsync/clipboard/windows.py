import time

import win32clipboard as wc
import win32con

from clipsync.clipboard.base import ClipboardBackend
from clipsync.exceptions import ClipboardAccessError


class WindowsClipboard(ClipboardBackend):

    def _open(self) -> None:
        # another process may hold the clipboard briefly
        for _ in range(3):
            try:
                wc.OpenClipboard()
                return
            except Exception:
                time.sleep(0.05)
        raise ClipboardAccessError("Clipboard is busy")

    def read_text(self) -> str:
        self._open()
        try:
            if not wc.IsClipboardFormatAvailable(win32con.CF_UNICODETEXT):
                return ""
            return wc.GetClipboardData(win32con.CF_UNICODETEXT) or ""
        except Exception as e:
            raise ClipboardAccessError(f"Clipboard read failed: {e}") from e
        finally:
            wc.CloseClipboard()

    def write_text(self, text: str) -> None:
        self._open()
        try:
            wc.EmptyClipboard()
            wc.SetClipboardData(win32con.CF_UNICODETEXT, text)
        except Exception as e:
            raise ClipboardAccessError(f"Clipboard write failed: {e}") from e
        finally:
            wc.CloseClipboard()
