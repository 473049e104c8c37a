import pytest

from clipsync.messaging import PAGE
from clipsync.services.page_agent import KeyChord, KeyEvent


def test_default_chord_is_ctrl_shift_c():
    chord = KeyChord.parse("Ctrl+Shift+C")
    assert chord == KeyChord()
    assert chord.matches(KeyEvent("c", ctrl=True, shift=True))
    assert chord.matches(KeyEvent("C", meta=True, shift=True))
    assert not chord.matches(KeyEvent("C", shift=True))
    assert not chord.matches(KeyEvent("C", ctrl=True))
    assert not chord.matches(KeyEvent("C", ctrl=True, shift=True, alt=True))


@pytest.mark.parametrize("spec", ["", "Shift+C", "Ctrl+Hyper+C"])
def test_bad_chords_rejected(spec):
    with pytest.raises(ValueError):
        KeyChord.parse(spec)


@pytest.mark.asyncio
async def test_selection_and_copy_messages(app, clipboard):
    clipboard.selection = "picked"

    assert await app.bus.send(PAGE, {"action": "getSelectedText"}) == {"text": "picked"}
    assert await app.bus.send(PAGE, {"action": "copyToClipboard", "text": "x"}) == {"success": True}
    assert clipboard.text == "x"

    clipboard.deny("blocked")
    reply = await app.bus.send(PAGE, {"action": "copyToClipboard", "text": "y"})
    assert reply == {"success": False, "error": "blocked"}
    assert await app.bus.send(PAGE, {"action": "scroll"}) == {"error": "Unknown action"}
    await app.bus.close()


@pytest.mark.asyncio
async def test_shortcut_captures_selection(app, clipboard, notifier):
    clipboard.selection = "import os"

    handled = await app.page_agent.handle_key(KeyEvent("C", ctrl=True, shift=True))

    assert handled is True
    items = await app.item_store.list()
    assert items[0].content == "import os"
    assert items[0].type.value == "code"
    assert clipboard.text == "import os"
    assert notifier.shown[-1].message == "Copied to ClipSync!"
    await app.bus.close()


@pytest.mark.asyncio
async def test_other_keys_ignored(app, clipboard):
    clipboard.selection = "something"
    assert await app.page_agent.handle_key(KeyEvent("V", ctrl=True, shift=True)) is False
    assert await app.item_store.count() == 0


@pytest.mark.asyncio
async def test_shortcut_without_selection(app, notifier):
    assert await app.page_agent.quick_capture() is False
    assert notifier.shown == []


@pytest.mark.asyncio
async def test_poll_needs_auto_save(app, clipboard):
    clipboard.text = "before"
    assert await app.page_agent.poll_once() is False

    clipboard.text = "after"
    assert await app.page_agent.poll_once() is False
    assert await app.item_store.count() == 0


@pytest.mark.asyncio
async def test_poll_saves_changes_after_baseline(app, clipboard):
    await app.settings_store.update(autoSaveClipboard=True)
    clipboard.text = "already there"
    assert await app.page_agent.poll_once() is False

    clipboard.text = "fresh copy"
    assert await app.page_agent.poll_once() is True
    assert await app.page_agent.poll_once() is False

    clipboard.text = "   "
    assert await app.page_agent.poll_once() is False

    assert [item.content for item in await app.item_store.list()] == ["fresh copy"]
    await app.bus.close()


@pytest.mark.asyncio
async def test_poll_tolerates_denied_clipboard(app, clipboard):
    await app.settings_store.update(autoSaveClipboard=True)
    clipboard.deny()
    assert await app.page_agent.poll_once() is False

    clipboard.allow()
    clipboard.text = "baseline"
    assert await app.page_agent.poll_once() is False
    await app.bus.close()


@pytest.mark.asyncio
async def test_own_clipboard_writes_not_captured_again(app, clipboard):
    await app.settings_store.update(autoSaveClipboard=True)
    assert await app.page_agent.poll_once() is False

    clipboard.selection = "quick"
    await app.page_agent.quick_capture()

    assert await app.page_agent.poll_once() is False
    assert await app.item_store.count() == 1
    await app.bus.close()
