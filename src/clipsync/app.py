import logging
from typing import Callable, Optional

from clipsync.clipboard import ClipboardBackend, get_clipboard_backend
from clipsync.config import AppConfig
from clipsync.messaging import MessageBus
from clipsync.services.board_service import BoardService
from clipsync.services.dispatcher import CaptureDispatcher
from clipsync.services.item_store import LocalItemStore
from clipsync.services.notifications import Notifier
from clipsync.services.page_agent import KeyChord, PageAgent
from clipsync.services.settings_store import SettingsStore
from clipsync.services.sync import SyncProvider
from clipsync.storage import KeyValueStorage, create_storage

logger = logging.getLogger(__name__)


class ClipSyncApp:
    """Wires the storage, the background and page contexts and the stores together."""

    def __init__(
        self,
        storage: KeyValueStorage,
        clipboard: ClipboardBackend,
        *,
        sync_provider: Optional[SyncProvider] = None,
        notifier: Optional[Notifier] = None,
        shortcut: Optional[KeyChord] = None,
        popup_opener: Optional[Callable[[], None]] = None,
    ) -> None:
        self.storage = storage
        self.bus = MessageBus()
        self.settings_store = SettingsStore(storage)
        self.item_store = LocalItemStore(storage, self.settings_store)
        self.board_service = BoardService(storage, self.item_store)
        self.dispatcher = CaptureDispatcher(
            self.item_store,
            self.settings_store,
            self.bus,
            sync_provider=sync_provider,
            notifier=notifier,
            popup_opener=popup_opener,
            board_service=self.board_service,
        )
        self.page_agent = PageAgent(
            self.bus,
            clipboard,
            self.settings_store,
            notifier=notifier,
            shortcut=shortcut,
        )
        self.running = False

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> "ClipSyncApp":
        storage = create_storage(config.storage, config.data_dir)
        return cls(
            storage,
            get_clipboard_backend(),
            shortcut=KeyChord.parse(config.shortcut),
            **kwargs,
        )

    async def initialize(self) -> None:
        await self.settings_store.initialize()
        await self.item_store.initialize()
        await self.board_service.ensure_default()

    async def start(self, watch_clipboard: bool = True) -> None:
        if self.running:
            return
        await self.initialize()
        self.dispatcher.start()
        if watch_clipboard:
            self.page_agent.start()
        self.running = True
        logger.info("ClipSync started")

    async def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        await self.page_agent.stop()
        await self.dispatcher.stop()
        await self.bus.close()
        self.storage.close()
        logger.info("ClipSync stopped")
