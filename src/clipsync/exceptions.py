class ClipSyncError(Exception):
    pass


class StorageError(ClipSyncError):
    """Reading or writing the local key/value storage failed."""


class ClipboardAccessError(ClipSyncError):
    """The system clipboard or selection could not be read or written."""


class EmptyContentError(ClipSyncError, ValueError):
    """Captured text was empty or whitespace only."""


class ItemNotFoundError(ClipSyncError, KeyError):
    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Clipboard item not found: {self.item_id}"


class BoardNotFoundError(ClipSyncError, KeyError):
    def __init__(self, board_id: str):
        super().__init__(board_id)
        self.board_id = board_id

    def __str__(self) -> str:
        return f"Board not found: {self.board_id}"


class DefaultBoardError(ClipSyncError):
    """The default board cannot be deleted."""


class MessagingError(ClipSyncError):
    """A message could not be delivered to the target context."""
