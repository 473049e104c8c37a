import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from clipsync.api.schemas import (
    BoardCreate,
    BoardUpdate,
    BulkDelete,
    FlagUpdate,
    ItemCreate,
    ItemUpdate,
)
from clipsync.app import ClipSyncApp
from clipsync.capture import create_item
from clipsync.exceptions import (
    BoardNotFoundError,
    ClipSyncError,
    DefaultBoardError,
    EmptyContentError,
    ItemNotFoundError,
    StorageError,
)
from clipsync.messaging import BACKGROUND
from clipsync.models.clipboard_item import ClipboardItem, utcnow
from clipsync.services.search import (
    SearchFilters,
    display_order,
    filter_items,
    format_time_ago,
    suggest,
    tag_counts,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ItemNotFoundError, 404),
    (BoardNotFoundError, 404),
    (DefaultBoardError, 409),
    (EmptyContentError, 400),
    (StorageError, 503),
)


def _search_result(item: ClipboardItem) -> Dict[str, Any]:
    return {**item.to_storage(), "timeAgo": format_time_ago(item.created_at)}


def _paginate(items: List[Any], page: int, page_size: int) -> List[Any]:
    if page_size <= 0:
        return items
    start = (page - 1) * page_size
    return items[start:start + page_size]


def create_app(clipsync: ClipSyncApp) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await clipsync.initialize()
        yield

    app = FastAPI(title="ClipSync", lifespan=lifespan)
    app.state.clipsync = clipsync

    @app.exception_handler(ClipSyncError)
    async def clipsync_error(request: Request, exc: ClipSyncError):
        status = 500
        for error_type, code in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                status = code
                break
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status, content={"error": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.get("/health")
    async def health():
        return {"status": "ok", "items": await clipsync.item_store.count()}

    @app.post("/message")
    async def message(payload: Dict[str, Any] = Body(...)):
        return await clipsync.bus.send(BACKGROUND, payload)

    @app.post("/commands/{command}")
    async def command(command: str):
        item = await clipsync.dispatcher.handle_command(command)
        return {"item": item.to_storage() if item else None}

    @app.get("/items")
    async def list_items(
        board_id: Optional[str] = Query(default=None, alias="boardId"),
        page: int = Query(default=1, ge=1),
        page_size: int = Query(default=0, ge=0, alias="pageSize"),
    ):
        items = await clipsync.item_store.list()
        if board_id:
            items = [item for item in items if item.board_id == board_id]
        ordered = display_order(items)
        return {
            "items": [item.to_storage() for item in _paginate(ordered, page, page_size)],
            "total": len(ordered),
        }

    @app.post("/items", status_code=201)
    async def create(payload: ItemCreate):
        item = create_item(
            payload.content,
            title=payload.title,
            content_type=payload.type,
            tags=payload.tags,
            board_id=payload.board_id,
            is_pinned=payload.is_pinned,
            is_favorite=payload.is_favorite,
        )
        result = await clipsync.dispatcher.add_item(item)
        return {
            "item": result.item.to_storage(),
            "evicted": [evicted.id for evicted in result.evicted],
        }

    @app.post("/items/delete")
    async def delete_many(payload: BulkDelete):
        return {"deleted": await clipsync.item_store.delete_many(payload.ids)}

    @app.get("/items/{item_id}")
    async def get_item(item_id: str):
        return (await clipsync.item_store.get(item_id)).to_storage()

    @app.patch("/items/{item_id}")
    async def update_item(item_id: str, payload: ItemUpdate):
        changes = payload.model_dump(exclude_unset=True)
        item = await clipsync.dispatcher.update_item(item_id, **changes)
        return item.to_storage()

    @app.post("/items/{item_id}/pin")
    async def pin_item(item_id: str, payload: FlagUpdate = Body(default=FlagUpdate())):
        item = await clipsync.item_store.toggle_pin(item_id, payload.value)
        return item.to_storage()

    @app.post("/items/{item_id}/favorite")
    async def favorite_item(item_id: str, payload: FlagUpdate = Body(default=FlagUpdate())):
        item = await clipsync.item_store.toggle_favorite(item_id, payload.value)
        return item.to_storage()

    @app.post("/items/{item_id}/copy")
    async def copy_item(item_id: str):
        return await clipsync.dispatcher.copy_item(item_id)

    @app.delete("/items/{item_id}")
    async def delete_item(item_id: str):
        await clipsync.item_store.delete(item_id)
        return {"ok": True}

    @app.get("/search")
    async def search(
        q: str = "",
        content_type: str = Query(default="all", alias="type"),
        tags: List[str] = Query(default=[]),
        date_range: str = Query(default="all", alias="dateRange"),
        board: str = "all",
        favorite: bool = False,
        pinned: bool = False,
    ):
        filters = SearchFilters(
            query=q,
            type=content_type,
            tags=tags,
            date_range=date_range,
            board=board,
            is_favorite=favorite,
            is_pinned=pinned,
        )
        found = display_order(filter_items(await clipsync.item_store.list(), filters))
        return {"items": [_search_result(item) for item in found], "total": len(found)}

    @app.get("/search/suggestions")
    async def suggestions(
        q: str = "",
        recent: List[str] = Query(default=[]),
        limit: int = Query(default=8, ge=1),
    ):
        items = await clipsync.item_store.list()
        found = suggest(
            q,
            recent_searches=recent,
            popular_tags=tag_counts(items),
            recent_items=items,
            max_suggestions=limit,
        )
        return {"suggestions": [
            {"id": s.id, "type": s.kind, "text": s.text, "subtitle": s.subtitle, "count": s.count}
            for s in found
        ]}

    @app.get("/tags")
    async def tags():
        counts = tag_counts(await clipsync.item_store.list())
        return {"tags": [{"name": tag.name, "count": tag.count} for tag in counts]}

    @app.get("/boards")
    async def list_boards():
        boards = await clipsync.board_service.list()
        return {
            "boards": [board.to_storage() for board in boards],
            "counts": await clipsync.board_service.counts(),
        }

    @app.post("/boards", status_code=201)
    async def create_board(payload: BoardCreate):
        options = payload.model_dump(exclude_none=True, exclude={"name"})
        board = await clipsync.board_service.create(payload.name, **options)
        return board.to_storage()

    @app.patch("/boards/{board_id}")
    async def update_board(board_id: str, payload: BoardUpdate):
        board = await clipsync.board_service.update(
            board_id, **payload.model_dump(exclude_unset=True))
        return board.to_storage()

    @app.delete("/boards/{board_id}")
    async def delete_board(board_id: str):
        return {"moved": await clipsync.board_service.delete(board_id)}

    @app.get("/export")
    async def export():
        return {
            "exported_at": utcnow().isoformat(),
            "items": [item.to_storage() for item in await clipsync.item_store.list()],
            "boards": [board.to_storage() for board in await clipsync.board_service.list()],
        }

    @app.get("/settings")
    async def get_settings():
        return (await clipsync.settings_store.get()).to_storage()

    @app.put("/settings")
    async def put_settings(changes: Dict[str, Any] = Body(...)):
        settings = await clipsync.dispatcher.update_settings(**changes)
        return settings.to_storage()

    return app
