"""Simple synchronous in-process event dispatcher."""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import Any, Protocol

import structlog

logger = structlog.get_logger(__name__)


class EventHandler(Protocol):
    """Anything with a single ``handle(event)`` method."""

    def handle(self, event: Any) -> None: ...


class EventDispatcher:
    """Publish/subscribe registry for domain events.

    Handlers are keyed by the event type identifier and called synchronously
    in registration order. A failing handler is not caught: the exception
    reaches the caller of ``notify`` and later handlers are skipped.
    """

    def __init__(self) -> None:
        self._handlers: dict[Hashable, list[EventHandler]] = {}
        self._lock = threading.RLock()

    @property
    def event_handlers(self) -> dict[Hashable, list[EventHandler]]:
        """Snapshot of the registry; changing it does not touch the dispatcher."""
        with self._lock:
            return {
                event_type: list(handlers)
                for event_type, handlers in self._handlers.items()
            }

    def register(self, event_type: Hashable, handler: EventHandler) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "event.registered",
            event_type=str(event_type),
            handler_name=type(handler).__name__,
        )

    def unregister(self, event_type: Hashable, handler: EventHandler) -> None:
        """Remove one registration of *handler*, matched by identity.

        The key stays in the registry even when its list becomes empty.
        """
        with self._lock:
            handlers = self._handlers.get(event_type)
            if handlers is None:
                return
            for index, registered in enumerate(handlers):
                if registered is handler:
                    del handlers[index]
                    break
            else:
                return
        logger.debug(
            "event.unregistered",
            event_type=str(event_type),
            handler_name=type(handler).__name__,
        )

    def unregister_all(self) -> None:
        with self._lock:
            self._handlers.clear()
        logger.debug("event.unregistered_all")

    def notify(self, event: Any) -> None:
        event_type = event.event_type
        with self._lock:
            handlers = list(self._handlers.get(event_type, ()))

        if not handlers:
            return

        logger.debug(
            "event.notify",
            event_type=str(event_type),
            listeners=len(handlers),
        )
        for handler in handlers:
            handler.handle(event)
