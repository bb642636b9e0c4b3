"""
Event Bus

Named-event dispatch between subscription sources, stores and network
modules. Handlers run synchronously in registration order; a failing handler
is logged and never blocks the remaining handlers or future events.
"""

import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List

from walletstore.utils.console import print_debug, print_error


class EventBus:
    """Synchronous publish/subscribe hub keyed by event name."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = defaultdict(list)
        self._lock = threading.RLock()

    def subscribe(self, event: str, handler: Callable) -> None:
        """Register ``handler(payload)`` for ``event``"""
        if not event:
            raise ValueError("Event name is required")
        with self._lock:
            if handler not in self._handlers[event]:
                self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: Callable) -> None:
        with self._lock:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

    def has_handlers(self, event: str) -> bool:
        with self._lock:
            return bool(self._handlers.get(event))

    def dispatch(self, event: str, payload: Any = None) -> int:
        """
        Deliver ``payload`` to every handler of ``event``.

        Returns the number of handlers that completed without raising.
        """
        with self._lock:
            handlers = list(self._handlers.get(event, []))

        if not handlers:
            print_debug(f"No handlers for {event}")
            return 0

        delivered = 0
        for handler in handlers:
            try:
                handler(payload)
                delivered += 1
            except Exception as e:
                print_error(f"⚠️  Handler error for {event}: {e}")
        return delivered
