import asyncio
import logging
from typing import Any, Dict, List, Optional

from clipsync.exceptions import BoardNotFoundError, DefaultBoardError
from clipsync.models.board import DEFAULT_BOARD_COLOR, DEFAULT_BOARD_NAME, Board
from clipsync.services.item_store import LocalItemStore
from clipsync.storage.base import BOARDS_KEY, KeyValueStorage, call_storage

logger = logging.getLogger(__name__)


class BoardService:

    def __init__(self, storage: KeyValueStorage, item_store: LocalItemStore):
        self.storage = storage
        self.item_store = item_store
        self._lock = asyncio.Lock()

    async def _load(self) -> List[Board]:
        raw = await call_storage(self.storage.get, BOARDS_KEY) or []
        return [Board.from_storage(entry) for entry in raw]

    async def _save(self, boards: List[Board]) -> None:
        await call_storage(
            self.storage.set, BOARDS_KEY, [board.to_storage() for board in boards])

    @staticmethod
    def _find(boards: List[Board], board_id: str) -> int:
        for index, board in enumerate(boards):
            if board.id == board_id:
                return index
        raise BoardNotFoundError(board_id)

    async def ensure_default(self) -> Board:
        async with self._lock:
            boards = await self._load()
            for board in boards:
                if board.is_default:
                    return board
            default = Board(
                name=DEFAULT_BOARD_NAME, color=DEFAULT_BOARD_COLOR, is_default=True)
            boards.insert(0, default)
            await self._save(boards)
            logger.info(f"Created default board {default.id}")
            return default

    async def get_default(self) -> Board:
        for board in await self._load():
            if board.is_default:
                return board
        return await self.ensure_default()

    async def list(self) -> List[Board]:
        return await self._load()

    async def get(self, board_id: str) -> Board:
        boards = await self._load()
        return boards[self._find(boards, board_id)]

    async def create(
        self,
        name: str,
        *,
        color: str = DEFAULT_BOARD_COLOR,
        description: Optional[str] = None,
    ) -> Board:
        board = Board(name=name, color=color, description=description)
        async with self._lock:
            boards = await self._load()
            boards.append(board)
            await self._save(boards)
        logger.info(f"Created board {board.id} ({board.name})")
        return board

    async def update(self, board_id: str, **changes: Any) -> Board:
        allowed = {"name", "color", "description"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Board fields cannot be updated: {sorted(unknown)}")

        async with self._lock:
            boards = await self._load()
            index = self._find(boards, board_id)
            data = boards[index].model_dump()
            data.update(changes)
            updated = Board.model_validate(data)
            boards[index] = updated
            await self._save(boards)
        return updated

    async def delete(self, board_id: str) -> int:
        """Delete a board and move its items to the default board.

        Returns the number of items moved. The default board itself cannot be
        deleted.
        """
        default = await self.ensure_default()
        async with self._lock:
            boards = await self._load()
            index = self._find(boards, board_id)
            if boards[index].is_default:
                raise DefaultBoardError("The default board cannot be deleted")

            moved = await self.item_store.reassign_board(board_id, default.id)
            boards.pop(index)
            await self._save(boards)

        logger.info(f"Deleted board {board_id}, moved {moved} item(s) to {default.id}")
        return moved

    async def counts(self) -> Dict[str, int]:
        default = await self.get_default()
        counts = {board.id: 0 for board in await self._load()}
        for item in await self.item_store.list():
            board_id = item.board_id or default.id
            counts[board_id] = counts.get(board_id, 0) + 1
        return counts
