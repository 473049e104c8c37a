from typing import List

import pytest

from clipsync.app import ClipSyncApp
from clipsync.clipboard import MemoryClipboard
from clipsync.services.item_store import LocalItemStore
from clipsync.services.notifications import Notification
from clipsync.services.settings_store import SettingsStore
from clipsync.storage import MemoryStorage


class RecordingNotifier:
    def __init__(self):
        self.shown: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.shown.append(notification)


class RecordingSyncProvider:
    def __init__(self, fail: bool = False):
        self.pushed = []
        self.synced = []
        self.fail = fail

    async def push(self, item):
        if self.fail:
            raise RuntimeError("remote unavailable")
        self.pushed.append(item)

    async def sync(self, items):
        self.synced.append(list(items))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def settings_store(storage):
    return SettingsStore(storage)


@pytest.fixture
def item_store(storage, settings_store):
    return LocalItemStore(storage, settings_store)


@pytest.fixture
def clipboard():
    return MemoryClipboard()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def sync_provider():
    return RecordingSyncProvider()


@pytest.fixture
def app(storage, clipboard, notifier, sync_provider):
    return ClipSyncApp(
        storage,
        clipboard,
        notifier=notifier,
        sync_provider=sync_provider,
    )
