"""In-process request/response channel between isolated contexts.

Each registered context owns an inbox served by exactly one task, so its
handler runs one message at a time to completion. Senders get a future that
resolves with the handler's response; there is no ordering guarantee between
different contexts.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from clipsync.exceptions import MessagingError

logger = logging.getLogger(__name__)

BACKGROUND = "background"
PAGE = "page"

UNKNOWN_ACTION = {"error": "Unknown action"}

MessageHandler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


@dataclass
class _Envelope:
    message: Dict[str, Any]
    reply: asyncio.Future


@dataclass
class _Context:
    name: str
    handler: MessageHandler
    inbox: asyncio.Queue = field(default_factory=asyncio.Queue)
    worker: Optional[asyncio.Task] = None


class MessageBus:

    def __init__(self) -> None:
        self._contexts: Dict[str, _Context] = {}
        self._closed = False

    def register(self, name: str, handler: MessageHandler) -> None:
        if name in self._contexts:
            raise MessagingError(f"Context already registered: {name}")
        self._contexts[name] = _Context(name=name, handler=handler)
        logger.debug(f"Registered message context {name}")

    def contexts(self):
        return list(self._contexts)

    def _ensure_worker(self, context: _Context) -> None:
        if context.worker is None or context.worker.done():
            context.worker = asyncio.get_running_loop().create_task(
                self._serve(context), name=f"clipsync-{context.name}")

    async def _serve(self, context: _Context) -> None:
        while True:
            envelope: _Envelope = await context.inbox.get()
            try:
                response = await context.handler(envelope.message)
            except Exception as e:
                logger.error(f"Error handling {envelope.message.get('action')!r} in {context.name}: {e}")
                response = {"error": str(e)}
            if not envelope.reply.done():
                envelope.reply.set_result(response)

    async def send(
        self,
        target: str,
        message: Dict[str, Any],
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        if self._closed:
            raise MessagingError("Message bus is closed")
        context = self._contexts.get(target)
        if context is None:
            raise MessagingError(f"No context registered as {target!r}")
        if not isinstance(message, dict) or not isinstance(message.get("action"), str):
            return {"error": "Invalid message"}

        self._ensure_worker(context)
        reply = asyncio.get_running_loop().create_future()
        await context.inbox.put(_Envelope(message=message, reply=reply))
        try:
            return await asyncio.wait_for(reply, timeout)
        except asyncio.TimeoutError as e:
            raise MessagingError(
                f"No reply from {target} for {message['action']!r} within {timeout}s") from e

    async def close(self) -> None:
        self._closed = True
        for context in self._contexts.values():
            if context.worker is not None:
                context.worker.cancel()
                try:
                    await context.worker
                except asyncio.CancelledError:
                    pass
                context.worker = None
            while not context.inbox.empty():
                envelope = context.inbox.get_nowait()
                if not envelope.reply.done():
                    envelope.reply.set_exception(
                        MessagingError(f"{context.name} closed before replying"))
