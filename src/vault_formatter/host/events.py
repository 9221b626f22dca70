from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Awaitable, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

ACTIVE_DOCUMENT_CHANGED = "active-document-changed"
SHUTDOWN_REQUESTED = "shutdown-requested"

EventHandler = Callable[..., Union[Awaitable[None], None]]

_ref_ids = count(1)


@dataclass(frozen=True, slots=True)
class EventRef:
    name: str
    handler: EventHandler = field(compare=False)
    ref_id: int = field(default_factory=lambda: next(_ref_ids))


class EventBus:
    """
    In-process host event bus.

    Handlers run in registration order; coroutine handlers are awaited. A failing
    handler is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventRef]] = {}

    def on(self, name: str, handler: EventHandler) -> EventRef:
        ref = EventRef(name=name, handler=handler)
        self._handlers.setdefault(name, []).append(ref)
        return ref

    def offref(self, ref: EventRef) -> None:
        refs = self._handlers.get(ref.name)
        if not refs:
            return
        self._handlers[ref.name] = [r for r in refs if r.ref_id != ref.ref_id]

    def handler_count(self, name: str) -> int:
        return len(self._handlers.get(name, ()))

    async def emit(self, name: str, *args: Any) -> None:
        for ref in list(self._handlers.get(name, ())):
            try:
                result = ref.handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Event handler failed. event=%s", name)


class EventManager:
    """Tracks the handlers one plugin instance registered so they can be removed together."""

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._refs: List[EventRef] = []

    def on_active_document_changed(self, handler: Callable[[Any], Awaitable[None]]) -> None:
        self._refs.append(self._bus.on(ACTIVE_DOCUMENT_CHANGED, handler))
        logger.debug("Added '%s' event listener", ACTIVE_DOCUMENT_CHANGED)

    def on_shutdown_requested(self, handler: Callable[[], Awaitable[None]]) -> None:
        self._refs.append(self._bus.on(SHUTDOWN_REQUESTED, handler))
        logger.debug("Added '%s' event listener", SHUTDOWN_REQUESTED)

    def clear_events(self) -> None:
        for ref in self._refs:
            self._bus.offref(ref)
        self._refs = []
        logger.debug("All event listeners cleared")
