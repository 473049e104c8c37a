"""Bounded, most-recent-first list of clipboard items.

The whole list lives under one storage key and is rewritten on every change.
All read-modify-write cycles go through ``LocalItemStore._mutate`` under a
single lock, so concurrent inserts can no longer overwrite each other.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from pydantic import ValidationError

from clipsync.classifier import derive_title
from clipsync.exceptions import EmptyContentError, ItemNotFoundError, StorageError
from clipsync.models.clipboard_item import ClipboardItem, utcnow
from clipsync.services.settings_store import SettingsStore
from clipsync.storage.base import ITEMS_KEY, KeyValueStorage, call_storage

logger = logging.getLogger(__name__)

T = TypeVar("T")

UPDATABLE_FIELDS = {
    "title": "title",
    "content": "content",
    "type": "type",
    "tags": "tags",
    "board_id": "board_id",
    "boardId": "board_id",
    "is_pinned": "is_pinned",
    "isPinned": "is_pinned",
    "is_favorite": "is_favorite",
    "isFavorite": "is_favorite",
}


@dataclass(frozen=True)
class InsertResult:
    item: ClipboardItem
    evicted: List[ClipboardItem] = field(default_factory=list)


def _truncate(items: List[ClipboardItem], max_items: int) -> List[ClipboardItem]:
    if len(items) <= max_items:
        return []
    evicted = items[max_items:]
    del items[max_items:]
    return evicted


def _find_index(items: List[ClipboardItem], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise ItemNotFoundError(item_id)


class LocalItemStore:

    def __init__(self, storage: KeyValueStorage, settings_store: SettingsStore):
        self.storage = storage
        self.settings_store = settings_store
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        async with self._lock:
            raw = await call_storage(self.storage.get, ITEMS_KEY)
            if raw is None:
                await call_storage(self.storage.set, ITEMS_KEY, [])

    async def _load(self, strict: bool = False) -> List[ClipboardItem]:
        """Read the stored list.

        Unreadable entries are skipped for reads. With ``strict`` they raise
        ``StorageError`` instead, since writing the list back would drop them.
        """
        raw = await call_storage(self.storage.get, ITEMS_KEY) or []
        items: List[ClipboardItem] = []
        for entry in raw:
            try:
                items.append(ClipboardItem.from_storage(entry))
            except ValidationError as e:
                if strict:
                    raise StorageError(
                        f"Stored clipboard items contain an unreadable entry, refusing to overwrite: {e}"
                    ) from e
                logger.warning(f"Skipping unreadable clipboard item: {e}")
        return items

    async def _save(self, items: List[ClipboardItem]) -> None:
        await call_storage(
            self.storage.set, ITEMS_KEY, [item.to_storage() for item in items])

    async def _mutate(self, mutation: Callable[[List[ClipboardItem]], T]) -> T:
        async with self._lock:
            items = await self._load(strict=True)
            result = mutation(items)
            await self._save(items)
            return result

    async def insert(self, item: ClipboardItem) -> InsertResult:
        settings = await self.settings_store.get()

        def prepend(items: List[ClipboardItem]) -> List[ClipboardItem]:
            items.insert(0, item)
            return _truncate(items, settings.max_items)

        evicted = await self._mutate(prepend)
        if evicted:
            logger.info(
                f"Evicted {len(evicted)} oldest item(s), limit is {settings.max_items}")
        logger.debug(f"Inserted clipboard item {item.id} ({item.type.value})")
        return InsertResult(item=item, evicted=evicted)

    async def evict_overflow(self, max_items: Optional[int] = None) -> List[ClipboardItem]:
        if max_items is None:
            max_items = (await self.settings_store.get()).max_items
        return await self._mutate(lambda items: _truncate(items, max_items))

    async def list(self) -> List[ClipboardItem]:
        return await self._load()

    async def count(self) -> int:
        return len(await self._load())

    async def get(self, item_id: str) -> ClipboardItem:
        items = await self._load()
        return items[_find_index(items, item_id)]

    async def update(self, item_id: str, **changes: Any) -> ClipboardItem:
        normalized: Dict[str, Any] = {}
        for key, value in changes.items():
            if key not in UPDATABLE_FIELDS:
                raise ValueError(f"Field cannot be updated: {key}")
            normalized[UPDATABLE_FIELDS[key]] = value

        if "content" in normalized and not str(normalized["content"] or "").strip():
            raise EmptyContentError("content must not be empty")

        def apply(items: List[ClipboardItem]) -> ClipboardItem:
            index = _find_index(items, item_id)
            data = items[index].model_dump()
            data.update(normalized)
            data["updated_at"] = utcnow()
            updated = ClipboardItem.model_validate(data)
            if not updated.title.strip():
                updated = updated.model_copy(
                    update={"title": derive_title(updated.content, updated.type)})
            items[index] = updated
            return updated

        return await self._mutate(apply)

    async def toggle_pin(self, item_id: str, value: Optional[bool] = None) -> ClipboardItem:
        if value is None:
            value = not (await self.get(item_id)).is_pinned
        return await self.update(item_id, is_pinned=value)

    async def toggle_favorite(self, item_id: str, value: Optional[bool] = None) -> ClipboardItem:
        if value is None:
            value = not (await self.get(item_id)).is_favorite
        return await self.update(item_id, is_favorite=value)

    async def delete(self, item_id: str) -> ClipboardItem:
        def remove(items: List[ClipboardItem]) -> ClipboardItem:
            return items.pop(_find_index(items, item_id))

        return await self._mutate(remove)

    async def delete_many(self, item_ids: Iterable[str]) -> int:
        targets = set(item_ids)
        if not targets:
            return 0

        def remove(items: List[ClipboardItem]) -> int:
            kept = [item for item in items if item.id not in targets]
            removed = len(items) - len(kept)
            items[:] = kept
            return removed

        return await self._mutate(remove)

    async def clear(self) -> int:
        def remove_all(items: List[ClipboardItem]) -> int:
            removed = len(items)
            items.clear()
            return removed

        return await self._mutate(remove_all)

    async def reassign_board(self, from_board_id: str, to_board_id: Optional[str]) -> int:
        def move(items: List[ClipboardItem]) -> int:
            moved = 0
            for index, item in enumerate(items):
                if item.board_id == from_board_id:
                    items[index] = item.model_copy(
                        update={"board_id": to_board_id, "updated_at": utcnow()})
                    moved += 1
            return moved

        return await self._mutate(move)
