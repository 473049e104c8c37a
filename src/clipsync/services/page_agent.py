import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from clipsync.clipboard.base import ClipboardBackend
from clipsync.exceptions import ClipboardAccessError, MessagingError
from clipsync.messaging import BACKGROUND, PAGE, UNKNOWN_ACTION, MessageBus
from clipsync.models.settings import Settings
from clipsync.services.notifications import LogNotifier, Notification, Notifier
from clipsync.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False


@dataclass(frozen=True)
class KeyChord:
    """Ctrl or Cmd plus optional Shift/Alt plus one key."""

    key: str = "C"
    shift: bool = True
    alt: bool = False

    @classmethod
    def parse(cls, spec: str) -> "KeyChord":
        parts = [part.strip().lower() for part in spec.split("+") if part.strip()]
        if not parts:
            raise ValueError(f"Empty shortcut: {spec!r}")
        *modifiers, key = parts
        unknown = set(modifiers) - {"ctrl", "cmd", "meta", "mod", "shift", "alt"}
        if unknown:
            raise ValueError(f"Unknown modifier(s) in {spec!r}: {sorted(unknown)}")
        if not set(modifiers) & {"ctrl", "cmd", "meta", "mod"}:
            raise ValueError(f"Shortcut {spec!r} needs Ctrl or Cmd")
        return cls(key=key.upper(), shift="shift" in modifiers, alt="alt" in modifiers)

    def matches(self, event: KeyEvent) -> bool:
        return (
            (event.ctrl or event.meta)
            and event.shift == self.shift
            and event.alt == self.alt
            and event.key.upper() == self.key
        )


class PageAgent:
    """Page context: selection and clipboard access, local shortcut, clipboard watch."""

    def __init__(
        self,
        bus: MessageBus,
        clipboard: ClipboardBackend,
        settings_store: SettingsStore,
        notifier: Optional[Notifier] = None,
        shortcut: Optional[KeyChord] = None,
        selection_source: Optional[Callable[[], str]] = None,
    ) -> None:
        self.bus = bus
        self.clipboard = clipboard
        self.settings_store = settings_store
        self.notifier = notifier or LogNotifier()
        self.shortcut = shortcut or KeyChord()
        self.selection_source = selection_source or clipboard.read_selection
        self._last_seen: Optional[str] = None
        self._poll_task: Optional[asyncio.Task] = None
        bus.register(PAGE, self.handle_message)

    async def handle_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        action = message.get("action")
        if action == "getSelectedText":
            return {"text": await self.selected_text()}
        if action == "copyToClipboard":
            try:
                await self.write_clipboard(str(message.get("text", "")))
            except ClipboardAccessError as e:
                return {"success": False, "error": str(e)}
            return {"success": True}
        return dict(UNKNOWN_ACTION)

    async def selected_text(self) -> str:
        try:
            return await asyncio.to_thread(self.selection_source) or ""
        except ClipboardAccessError as e:
            logger.debug(f"No selection available: {e}")
            return ""

    async def write_clipboard(self, text: str) -> None:
        await asyncio.to_thread(self.clipboard.write_text, text)
        # our own write must not come back as a new capture
        self._last_seen = text

    async def handle_key(self, event: KeyEvent) -> bool:
        if not self.shortcut.matches(event):
            return False
        await self.quick_capture()
        return True

    async def _save(self, text: str) -> bool:
        try:
            reply = await self.bus.send(
                BACKGROUND, {"action": "addClipboardItem", "item": {"content": text}})
        except MessagingError as e:
            logger.error(f"Could not reach background context: {e}")
            return False
        if not reply.get("success"):
            logger.error(f"Capture rejected: {reply.get('error')}")
            return False
        return True

    async def quick_capture(self) -> bool:
        selected = await self.selected_text()
        if not selected.strip():
            return False

        if not await self._save(selected):
            return False

        try:
            await self.write_clipboard(selected)
        except ClipboardAccessError as e:
            logger.warning(f"Saved selection but could not copy it: {e}")

        self.notifier.notify(Notification(title="ClipSync", message="Copied to ClipSync!"))
        return True

    async def poll_once(self) -> bool:
        """Read the clipboard once; returns True when new content was saved.

        The first successful read only records a baseline.
        """
        try:
            text = await asyncio.to_thread(self.clipboard.read_text)
        except ClipboardAccessError as e:
            logger.debug(f"Clipboard monitoring not available: {e}")
            return False

        if self._last_seen is None:
            self._last_seen = text
            return False
        if text == self._last_seen:
            return False
        self._last_seen = text
        if not text.strip():
            return False

        settings = await self.settings_store.get()
        if not settings.auto_save_clipboard:
            return False
        return await self._save(text)

    async def _poll_loop(self) -> None:
        interval = Settings().poll_interval_seconds
        while True:
            try:
                interval = (await self.settings_store.get()).poll_interval_seconds
                await self.poll_once()
            except Exception as e:
                logger.error(f"Clipboard watch error: {e}")
            await asyncio.sleep(interval)

    def start(self) -> None:
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())

    async def stop(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None
