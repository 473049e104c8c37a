import pytest
from pydantic import ValidationError

from clipsync.capture import create_item
from clipsync.services.item_store import LocalItemStore
from clipsync.services.settings_store import SettingsStore
from clipsync.storage import SETTINGS_KEY, MemoryStorage


@pytest.mark.asyncio
async def test_initialize_writes_defaults_once(storage, settings_store):
    settings = await settings_store.initialize()
    assert storage.get(SETTINGS_KEY)["maxItems"] == settings.max_items == 1000

    await settings_store.update(maxItems=5)
    assert (await settings_store.initialize()).max_items == 5


@pytest.mark.asyncio
async def test_short_intervals_are_accepted():
    storage = MemoryStorage({SETTINGS_KEY: {"autoSync": True, "maxItems": 10, "syncInterval": 500}})
    settings_store = SettingsStore(storage)
    item_store = LocalItemStore(storage, settings_store)

    await settings_store.initialize()
    result = await item_store.insert(create_item("hello"))

    assert result.item.content == "hello"
    assert (await settings_store.get()).sync_interval == 500


@pytest.mark.asyncio
async def test_unreadable_fields_fall_back_to_defaults():
    storage = MemoryStorage({SETTINGS_KEY: {
        "maxItems": "lots", "autoSaveClipboard": True, "clipboardPollInterval": -5, "theme": "dark"}})

    settings = await SettingsStore(storage).get()

    assert settings.max_items == 1000
    assert settings.clipboard_poll_interval == 2000
    assert settings.auto_save_clipboard is True


@pytest.mark.asyncio
async def test_non_object_settings_use_defaults():
    settings = await SettingsStore(MemoryStorage({SETTINGS_KEY: ["nope"]})).get()
    assert settings.max_items == 1000


@pytest.mark.asyncio
async def test_update_accepts_aliases_and_field_names(settings_store):
    assert (await settings_store.update(autoSync=False)).auto_sync is False
    assert (await settings_store.update(max_items=7)).max_items == 7
    with pytest.raises(ValueError):
        await settings_store.update(theme="dark")
    with pytest.raises(ValidationError):
        await settings_store.update(syncInterval=0)


@pytest.mark.asyncio
async def test_reset(settings_store):
    await settings_store.update(maxItems=3)
    assert (await settings_store.reset()).max_items == 1000
