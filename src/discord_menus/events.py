"""Publish/subscribe channel for interaction, warning and error notifications."""

import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Awaitable[None] | None]


class EventType(str, Enum):
    """Notifications published on an EventChannel."""

    MENU_CLICKED = "MENU_CLICKED"
    BUTTON_CLICKED = "BUTTON_CLICKED"
    ERROR = "ERROR"
    WARN = "WARN"


class ErrorCode(str, Enum):
    """Payload of ERROR notifications."""

    POST_ERROR = "POST_ERROR"
    DELETE_ERROR = "DELETE_ERROR"


class WarnCode(str, Enum):
    """Payload of WARN notifications."""

    NO_MENU_PROVIDED = "NO_MENU_PROVIDED"
    NO_BUTTON_PROVIDED = "NO_BUTTON_PROVIDED"


class EventChannel:
    """Ordered publish/subscribe channel.

    One channel is created per dispatcher and handed by reference to every
    interaction and message object it builds, so failures from outbound calls
    surface where the caller subscribed.

    Listeners may be plain callables or coroutine functions. They run in
    registration order; an exception in one listener is logged and does not
    prevent the others from running.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[Listener]] = defaultdict(list)
        self._once: dict[EventType, list[Listener]] = defaultdict(list)

    def on(self, event: EventType | str, listener: Listener | None = None) -> Any:
        """Register a listener.

        Can be called directly or used as a decorator::

            @channel.on(EventType.BUTTON_CLICKED)
            async def clicked(button): ...
        """
        event = EventType(event)

        if listener is None:

            def decorator(func: Listener) -> Listener:
                self._listeners[event].append(func)
                return func

            return decorator

        self._listeners[event].append(listener)
        return listener

    def once(self, event: EventType | str, listener: Listener) -> Listener:
        """Register a listener that is removed after its first call."""
        event = EventType(event)
        self.on(event, listener)
        self._once[event].append(listener)
        return listener

    def off(self, event: EventType | str, listener: Listener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        event = EventType(event)
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)
            once = self._once.get(event, [])
            if listener in once:
                once.remove(listener)
            return True
        return False

    def listeners(self, event: EventType | str) -> list[Listener]:
        """Snapshot of listeners registered for an event."""
        return list(self._listeners.get(EventType(event), []))

    async def emit(self, event: EventType | str, *args: Any) -> int:
        """Publish an event to every listener.

        Returns:
            Number of listeners invoked
        """
        event = EventType(event)
        listeners = self.listeners(event)

        if not listeners:
            if event is EventType.ERROR:
                logger.warning("Unhandled %s event: %s", event.value, _describe(args))
            return 0

        for listener in listeners:
            if listener in self._once.get(event, []):
                self.off(event, listener)
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Listener %r failed for %s", listener, event.value)

        return len(listeners)


def _describe(args: tuple[Any, ...]) -> str:
    return ", ".join(a.value if isinstance(a, Enum) else repr(a) for a in args)
