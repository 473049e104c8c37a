from typing import List, Protocol, runtime_checkable

from clipsync.models.clipboard_item import ClipboardItem


@runtime_checkable
class SyncProvider(Protocol):
    """Remote sync collaborator.

    No implementation ships with clipsync; the wire contract is up to whoever
    provides one. ``push`` is called after each local insert when ``autoSync``
    is on, ``sync`` on every periodic tick with a snapshot of the local store.
    """

    async def push(self, item: ClipboardItem) -> None:
        ...

    async def sync(self, items: List[ClipboardItem]) -> None:
        ...
