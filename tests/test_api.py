import pytest
from fastapi.testclient import TestClient

from clipsync.api.app import create_app


@pytest.fixture
def client(app):
    with TestClient(create_app(app)) as client:
        yield client


def add(client, content, **fields):
    response = client.post("/items", json={"content": content, **fields})
    assert response.status_code == 201
    return response.json()["item"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "items": 0}


def test_create_classifies_and_lists_pinned_first(client):
    link = add(client, "https://www.example.com/path")
    note = add(client, "remember the milk", isPinned=True)

    assert link["type"] == "link"
    assert link["title"] == "example.com"

    body = client.get("/items").json()
    assert body["total"] == 2
    assert [item["id"] for item in body["items"]] == [note["id"], link["id"]]


def test_blank_content_rejected(client):
    response = client.post("/items", json={"content": "  "})
    assert response.status_code == 400
    assert "error" in response.json()

    response = client.post("/items", json={})
    assert response.status_code == 400
    assert "error" in response.json()
    assert client.patch("/items/x", json={"isPinned": "maybe"}).status_code == 400


def test_item_lifecycle(client):
    item = add(client, "draft")

    response = client.patch(f"/items/{item['id']}", json={"tags": ["work"], "title": "Draft"})
    assert response.json()["tags"] == ["work"]
    assert response.json()["title"] == "Draft"

    assert client.post(f"/items/{item['id']}/pin").json()["isPinned"] is True
    assert client.post(f"/items/{item['id']}/favorite", json={"value": True}).json()["isFavorite"] is True

    assert client.delete(f"/items/{item['id']}").json() == {"ok": True}
    assert client.get(f"/items/{item['id']}").status_code == 404


def test_bulk_delete(client):
    ids = [add(client, f"clip {n}")["id"] for n in range(3)]
    assert client.post("/items/delete", json={"ids": ids[:2]}).json() == {"deleted": 2}
    assert client.get("/items").json()["total"] == 1


def test_search_and_tags(client):
    add(client, "const x = 1", tags=["js"])
    add(client, "shopping list", tags=["home", "js"])

    found = client.get("/search", params={"q": "const"}).json()
    assert [item["type"] for item in found["items"]] == ["code"]

    by_type = client.get("/search", params={"type": "text"}).json()
    assert by_type["total"] == 1

    assert client.get("/search", params={"dateRange": "forever"}).status_code == 400

    assert client.get("/tags").json()["tags"][0] == {"name": "js", "count": 2}

    suggestions = client.get("/search/suggestions", params={"q": "js"}).json()["suggestions"]
    assert suggestions[0]["type"] == "tag"


def test_boards(client):
    boards = client.get("/boards").json()["boards"]
    assert [b["name"] for b in boards] == ["General"]
    default_id = boards[0]["id"]

    board = client.post("/boards", json={"name": "Work", "color": "#10b981"}).json()
    add(client, "report", boardId=board["id"])

    assert client.get("/items", params={"boardId": board["id"]}).json()["total"] == 1
    assert client.patch(f"/boards/{board['id']}", json={"name": "Job"}).json()["name"] == "Job"

    assert client.delete(f"/boards/{board['id']}").json() == {"moved": 1}
    assert client.get("/items", params={"boardId": default_id}).json()["total"] == 1
    assert client.delete(f"/boards/{default_id}").status_code == 409
    assert client.delete("/boards/b_missing").status_code == 404


def test_settings(client):
    assert client.get("/settings").json()["maxItems"] == 1000

    for n in range(3):
        add(client, f"clip {n}")
    updated = client.put("/settings", json={"maxItems": 1, "autoSaveClipboard": True}).json()

    assert updated["maxItems"] == 1
    assert updated["autoSaveClipboard"] is True
    assert client.get("/items").json()["total"] == 1
    assert client.put("/settings", json={"maxItems": 0}).status_code == 400


def test_message_endpoint(client):
    reply = client.post("/message", json={"action": "addClipboardItem", "item": {"content": "hi"}})
    assert reply.json() == {"success": True}
    assert client.post("/message", json={"action": "nope"}).json() == {"error": "Unknown action"}


def test_quick_copy_command(client, clipboard):
    clipboard.selection = "SELECT 1"
    body = client.post("/commands/quick-copy").json()
    assert body["item"]["type"] == "code"
    assert clipboard.text == "SELECT 1"


def test_unknown_board_rejected(client):
    response = client.post("/items", json={"content": "x", "boardId": "b_nope"})
    assert response.status_code == 404
    assert client.get("/items").json()["total"] == 0

    item = add(client, "x")
    assert client.patch(f"/items/{item['id']}", json={"boardId": "b_nope"}).status_code == 404
    assert client.get(f"/items/{item['id']}").json()["boardId"] is None


def test_copy_item_back_to_clipboard(client, clipboard):
    item = add(client, "paste me")

    assert client.post(f"/items/{item['id']}/copy").json() == {"success": True}
    assert clipboard.text == "paste me"

    clipboard.deny("no access")
    assert client.post(f"/items/{item['id']}/copy").json() == {"success": False, "error": "no access"}
    assert client.post("/items/missing/copy").status_code == 404


def test_export(client):
    item = add(client, "keep me")

    body = client.get("/export").json()

    assert set(body) == {"exported_at", "items", "boards"}
    assert [i["id"] for i in body["items"]] == [item["id"]]
    assert [b["name"] for b in body["boards"]] == ["General"]
    assert body["exported_at"].startswith("20")


def test_search_results_have_relative_time(client):
    add(client, "fresh")
    found = client.get("/search", params={"q": "fresh"}).json()["items"]
    assert found[0]["timeAgo"] == "Just now"
