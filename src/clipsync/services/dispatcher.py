import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from clipsync.capture import create_item
from clipsync.exceptions import ClipSyncError, MessagingError, StorageError
from clipsync.messaging import BACKGROUND, PAGE, UNKNOWN_ACTION, MessageBus
from clipsync.models.clipboard_item import ClipboardItem
from clipsync.models.settings import Settings
from clipsync.services.board_service import BoardService
from clipsync.services.item_store import InsertResult, LocalItemStore
from clipsync.services.notifications import LogNotifier, Notification, Notifier
from clipsync.services.settings_store import SettingsStore
from clipsync.services.sync import SyncProvider

logger = logging.getLogger(__name__)

OPEN_POPUP = "open-popup"
QUICK_COPY = "quick-copy"


class CaptureDispatcher:
    """Background context: owns captures, the item store and the sync hooks."""

    def __init__(
        self,
        item_store: LocalItemStore,
        settings_store: SettingsStore,
        bus: MessageBus,
        sync_provider: Optional[SyncProvider] = None,
        notifier: Optional[Notifier] = None,
        popup_opener: Optional[Callable[[], None]] = None,
        board_service: Optional[BoardService] = None,
    ) -> None:
        self.item_store = item_store
        self.settings_store = settings_store
        self.bus = bus
        self.sync_provider = sync_provider
        self.notifier = notifier or LogNotifier()
        self.popup_opener = popup_opener
        self.board_service = board_service
        self._sync_task: Optional[asyncio.Task] = None
        self._handlers = {
            "addClipboardItem": self._on_add_item,
            "getClipboardItems": self._on_get_items,
            "getSettings": self._on_get_settings,
            "updateSettings": self._on_update_settings,
            "deleteClipboardItem": self._on_delete_item,
            "updateClipboardItem": self._on_update_item,
            "copyClipboardItem": self._on_copy_item,
        }
        bus.register(BACKGROUND, self.handle_message)

    async def handle_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        handler = self._handlers.get(message.get("action"))
        if handler is None:
            return dict(UNKNOWN_ACTION)
        return await handler(message)

    async def _on_add_item(self, message: Dict[str, Any]) -> Dict[str, Any]:
        fields = message.get("item") or {}
        try:
            item = create_item(
                fields.get("content", ""),
                title=fields.get("title"),
                content_type=fields.get("type"),
                tags=fields.get("tags"),
                board_id=fields.get("boardId"),
                is_pinned=bool(fields.get("isPinned", False)),
                is_favorite=bool(fields.get("isFavorite", False)),
            )
            await self.add_item(item)
        except (ClipSyncError, ValueError) as e:
            logger.error(f"Error adding clipboard item: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True}

    async def _on_get_items(self, message: Dict[str, Any]) -> Dict[str, Any]:
        items = await self.item_store.list()
        return {"items": [item.to_storage() for item in items]}

    async def _on_get_settings(self, message: Dict[str, Any]) -> Dict[str, Any]:
        return {"settings": (await self.settings_store.get()).to_storage()}

    async def _on_update_settings(self, message: Dict[str, Any]) -> Dict[str, Any]:
        try:
            settings = await self.update_settings(**(message.get("settings") or {}))
        except (ValidationError, ValueError, StorageError) as e:
            return {"success": False, "error": str(e)}
        return {"success": True, "settings": settings.to_storage()}

    async def _on_delete_item(self, message: Dict[str, Any]) -> Dict[str, Any]:
        try:
            await self.item_store.delete(str(message.get("id")))
        except ClipSyncError as e:
            return {"success": False, "error": str(e)}
        return {"success": True}

    async def _on_update_item(self, message: Dict[str, Any]) -> Dict[str, Any]:
        try:
            item = await self.update_item(
                str(message.get("id")), **(message.get("changes") or {}))
        except (ClipSyncError, ValueError) as e:
            return {"success": False, "error": str(e)}
        return {"success": True, "item": item.to_storage()}

    async def _on_copy_item(self, message: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return await self.copy_item(str(message.get("id")))
        except ClipSyncError as e:
            return {"success": False, "error": str(e)}

    async def _check_board(self, board_id: Optional[str]) -> None:
        if board_id and self.board_service is not None:
            # raises BoardNotFoundError
            await self.board_service.get(board_id)

    async def add_item(self, item: ClipboardItem) -> InsertResult:
        await self._check_board(item.board_id)
        result = await self.item_store.insert(item)
        settings = await self.settings_store.get()
        if settings.auto_sync:
            await self._push(item)
        return result

    async def update_item(self, item_id: str, **changes: Any) -> ClipboardItem:
        for key in ("board_id", "boardId"):
            if key in changes:
                await self._check_board(changes[key])
        return await self.item_store.update(item_id, **changes)

    async def copy_item(self, item_id: str) -> Dict[str, Any]:
        """Put a saved item's content back on the clipboard."""
        item = await self.item_store.get(item_id)
        reply = await self.bus.send(PAGE, {"action": "copyToClipboard", "text": item.content})
        if reply.get("success"):
            self.notifier.notify(Notification(title="ClipSync", message="Copied!"))
        else:
            logger.warning(f"Could not copy item {item_id}: {reply.get('error')}")
        return reply

    async def _push(self, item: ClipboardItem) -> None:
        if self.sync_provider is None:
            logger.debug(f"Auto-sync on but no sync provider; item {item.id} stays local")
            return
        try:
            await self.sync_provider.push(item)
        except Exception as e:
            logger.error(f"Error syncing item {item.id}: {e}")

    async def update_settings(self, **changes: Any) -> Settings:
        settings = await self.settings_store.update(**changes)
        evicted = await self.item_store.evict_overflow(settings.max_items)
        if evicted:
            logger.info(f"maxItems lowered to {settings.max_items}, evicted {len(evicted)} item(s)")
        return settings

    async def handle_command(self, command: str) -> Optional[ClipboardItem]:
        if command == OPEN_POPUP:
            if self.popup_opener is not None:
                self.popup_opener()
            else:
                logger.info("open-popup requested but no popup is attached")
            return None
        if command == QUICK_COPY:
            return await self.quick_copy()
        logger.warning(f"Unknown command: {command}")
        return None

    async def quick_copy(self) -> Optional[ClipboardItem]:
        """Save the active page's selection and put it on the clipboard."""
        try:
            reply = await self.bus.send(PAGE, {"action": "getSelectedText"})
            selected = reply.get("text") or ""
            if not selected.strip():
                return None

            item = create_item(selected)
            await self.add_item(item)

            copied = await self.bus.send(PAGE, {"action": "copyToClipboard", "text": selected})
            if not copied.get("success"):
                logger.warning(f"Saved but could not copy to clipboard: {copied.get('error')}")

            self.notifier.notify(Notification(
                title="ClipSync", message="Text copied and saved to ClipSync!"))
            return item
        except (MessagingError, StorageError) as e:
            logger.error(f"Error in quick copy: {e}")
            return None

    async def sync_once(self) -> None:
        settings = await self.settings_store.get()
        if not settings.auto_sync:
            return
        if self.sync_provider is None:
            logger.debug("Periodic sync tick, no sync provider configured")
            return
        items = await self.item_store.list()
        await self.sync_provider.sync(items)

    async def _sync_loop(self) -> None:
        interval = Settings().sync_interval_seconds
        while True:
            try:
                interval = (await self.settings_store.get()).sync_interval_seconds
            except StorageError as e:
                logger.error(f"Could not read sync interval: {e}")
            await asyncio.sleep(interval)
            try:
                await self.sync_once()
            except Exception as e:
                logger.error(f"Error in periodic sync: {e}")

    def start(self) -> None:
        if self._sync_task is None or self._sync_task.done():
            self._sync_task = asyncio.get_running_loop().create_task(self._sync_loop())

    async def stop(self) -> None:
        if self._sync_task is not None:
            self._sync_task.cancel()
            try:
                await self._sync_task
            except asyncio.CancelledError:
                pass
            self._sync_task = None
