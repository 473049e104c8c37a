from clipsync.clipboard.base import ClipboardBackend
from clipsync.exceptions import ClipboardAccessError

try:
    from AppKit import NSPasteboard, NSPasteboardTypeString
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False


class MacOSClipboard(ClipboardBackend):

    def _pasteboard(self):
        if not HAS_APPKIT:
            raise ClipboardAccessError("AppKit is not available (install pyobjc)")
        return NSPasteboard.generalPasteboard()

    def read_text(self) -> str:
        pasteboard = self._pasteboard()
        if NSPasteboardTypeString not in (pasteboard.types() or []):
            return ""
        text = pasteboard.stringForType_(NSPasteboardTypeString)
        return str(text) if text else ""

    def write_text(self, text: str) -> None:
        pasteboard = self._pasteboard()
        pasteboard.clearContents()
        if not pasteboard.setString_forType_(text, NSPasteboardTypeString):
            raise ClipboardAccessError("NSPasteboard refused the string")
