import pytest
from pydantic import ValidationError

from clipsync.capture import create_item
from clipsync.exceptions import BoardNotFoundError, DefaultBoardError
from clipsync.models.board import DEFAULT_BOARD_NAME
from clipsync.services.board_service import BoardService


@pytest.fixture
def boards(storage, item_store):
    return BoardService(storage, item_store)


@pytest.mark.asyncio
async def test_default_board_created_once(boards):
    first = await boards.ensure_default()
    second = await boards.ensure_default()

    assert first.id == second.id
    assert first.is_default
    assert first.name == DEFAULT_BOARD_NAME
    assert len(await boards.list()) == 1


@pytest.mark.asyncio
async def test_delete_moves_items_to_default(boards, item_store):
    default = await boards.ensure_default()
    work = await boards.create("Work", color="#ef4444")
    for n in range(3):
        await item_store.insert(create_item(f"work {n}", board_id=work.id))
    await item_store.insert(create_item("loose"))
    before = await item_store.count()

    moved = await boards.delete(work.id)

    assert moved == 3
    assert await item_store.count() == before
    items = await item_store.list()
    assert all(item.board_id != work.id for item in items)
    assert sum(1 for item in items if item.board_id == default.id) == 3
    with pytest.raises(BoardNotFoundError):
        await boards.get(work.id)


@pytest.mark.asyncio
async def test_default_board_cannot_be_deleted(boards):
    default = await boards.ensure_default()
    with pytest.raises(DefaultBoardError):
        await boards.delete(default.id)


@pytest.mark.asyncio
async def test_update_board(boards):
    board = await boards.create("Ideas")
    updated = await boards.update(board.id, name="Big ideas", description="later")
    assert updated.name == "Big ideas"
    assert updated.description == "later"

    with pytest.raises(ValueError):
        await boards.update(board.id, is_default=True)
    with pytest.raises(ValidationError):
        await boards.update(board.id, color="red")


@pytest.mark.asyncio
async def test_blank_board_name_rejected(boards):
    with pytest.raises(ValidationError):
        await boards.create("   ")


@pytest.mark.asyncio
async def test_counts_put_unassigned_items_on_default(boards, item_store):
    default = await boards.ensure_default()
    snippets = await boards.create("Snippets")
    await item_store.insert(create_item("const a = 1", board_id=snippets.id))
    await item_store.insert(create_item("loose"))

    counts = await boards.counts()
    assert counts == {default.id: 1, snippets.id: 1}
