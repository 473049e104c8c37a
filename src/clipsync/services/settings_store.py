import asyncio
import logging
from typing import Any, Dict

from pydantic import ValidationError

from clipsync.models.settings import Settings
from clipsync.storage.base import SETTINGS_KEY, KeyValueStorage, call_storage

logger = logging.getLogger(__name__)

_FIELD_BY_ALIAS = {
    (field.alias or name): name for name, field in Settings.model_fields.items()
}


def _normalize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in changes.items():
        name = _FIELD_BY_ALIAS.get(key, key)
        if name not in Settings.model_fields:
            raise ValueError(f"Unknown setting: {key}")
        normalized[name] = value
    return normalized


def _read_settings(raw: Any) -> Settings:
    """Stored settings with unreadable fields replaced by their defaults."""
    if not isinstance(raw, dict):
        logger.warning(f"Stored settings are not an object, using defaults: {raw!r}")
        return Settings()
    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        bad = {_FIELD_BY_ALIAS.get(str(err["loc"][0]), str(err["loc"][0]))
               for err in e.errors() if err["loc"]}
        logger.warning(f"Ignoring unreadable settings {sorted(bad)}, using defaults for them")
        kept = {key: value for key, value in raw.items()
                if _FIELD_BY_ALIAS.get(key, key) not in bad}
        return Settings.model_validate(kept)


class SettingsStore:

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self._lock = asyncio.Lock()

    async def initialize(self) -> Settings:
        async with self._lock:
            raw = await call_storage(self.storage.get, SETTINGS_KEY)
            if raw is None:
                settings = Settings()
                await call_storage(self.storage.set, SETTINGS_KEY, settings.to_storage())
                logger.info("Initialized default settings")
                return settings
            return _read_settings(raw)

    async def get(self) -> Settings:
        raw = await call_storage(self.storage.get, SETTINGS_KEY)
        if not raw:
            return Settings()
        return _read_settings(raw)

    async def update(self, **changes: Any) -> Settings:
        normalized = _normalize_changes(changes)
        async with self._lock:
            current = await self.get()
            merged = {**current.model_dump(), **normalized}
            settings = Settings.model_validate(merged)
            await call_storage(self.storage.set, SETTINGS_KEY, settings.to_storage())
        logger.info(f"Settings updated: {sorted(normalized)}")
        return settings

    async def reset(self) -> Settings:
        async with self._lock:
            settings = Settings()
            await call_storage(self.storage.set, SETTINGS_KEY, settings.to_storage())
        return settings
