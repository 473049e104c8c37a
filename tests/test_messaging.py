import asyncio

import pytest

from clipsync.exceptions import MessagingError
from clipsync.messaging import BACKGROUND, PAGE, MessageBus


async def echo(message):
    return {"echo": message["action"]}


@pytest.mark.asyncio
async def test_send_returns_handler_reply():
    bus = MessageBus()
    bus.register(BACKGROUND, echo)

    assert await bus.send(BACKGROUND, {"action": "ping"}) == {"echo": "ping"}
    await bus.close()


@pytest.mark.asyncio
async def test_messages_are_handled_one_at_a_time():
    bus = MessageBus()
    active = []
    overlap = []

    async def slow(message):
        active.append(message["action"])
        if len(active) > 1:
            overlap.append(list(active))
        await asyncio.sleep(0.01)
        active.remove(message["action"])
        return {"done": message["action"]}

    bus.register(BACKGROUND, slow)
    replies = await asyncio.gather(*(bus.send(BACKGROUND, {"action": f"a{n}"}) for n in range(5)))

    assert [r["done"] for r in replies] == [f"a{n}" for n in range(5)]
    assert overlap == []
    await bus.close()


@pytest.mark.asyncio
async def test_handler_errors_become_error_replies():
    bus = MessageBus()

    async def broken(message):
        raise RuntimeError("boom")

    bus.register(PAGE, broken)
    assert await bus.send(PAGE, {"action": "getSelectedText"}) == {"error": "boom"}
    await bus.close()


@pytest.mark.asyncio
async def test_invalid_message_and_unknown_target():
    bus = MessageBus()
    bus.register(BACKGROUND, echo)

    assert await bus.send(BACKGROUND, {"type": "nope"}) == {"error": "Invalid message"}
    with pytest.raises(MessagingError):
        await bus.send(PAGE, {"action": "ping"})
    await bus.close()


def test_duplicate_registration_rejected():
    bus = MessageBus()
    bus.register(BACKGROUND, echo)
    with pytest.raises(MessagingError):
        bus.register(BACKGROUND, echo)
    assert bus.contexts() == [BACKGROUND]


@pytest.mark.asyncio
async def test_timeout_raises():
    bus = MessageBus()

    async def never(message):
        await asyncio.sleep(10)

    bus.register(PAGE, never)
    with pytest.raises(MessagingError):
        await bus.send(PAGE, {"action": "getSelectedText"}, timeout=0.01)
    await bus.close()


@pytest.mark.asyncio
async def test_closed_bus_refuses_sends():
    bus = MessageBus()
    bus.register(BACKGROUND, echo)
    await bus.close()
    with pytest.raises(MessagingError):
        await bus.send(BACKGROUND, {"action": "ping"})
