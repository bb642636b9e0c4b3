# walletstore/network/module.py
"""
Base class for request-dispatch network modules.

A module declares the remote ``collection`` it talks to and a ``mutations``
map from local trigger event to handler method name. Binding the module to an
event bus wires those triggers; a handler calls :meth:`send`, which issues the
request and, on success, dispatches a follow-up event carrying the server
response for stores to consume.
"""

from typing import Any, Callable, Dict, List, Optional

import requests

from walletstore.network.transport import HttpTransport, TransportError
from walletstore.utils.console import print_error


class NetworkModule:
    namespace: str = ""
    collection: str = ""
    mutations: Dict[str, str] = {}

    def __init__(self, transport: Optional[HttpTransport] = None, bus=None):
        if not self.collection:
            raise ValueError(f"{type(self).__name__} must declare a collection")
        self.transport = transport or HttpTransport()
        self.bus = bus
        self.error_callbacks: List[Callable] = []
        self._dispatchers: Dict[str, Callable] = {}
        if bus is not None:
            self.bind(bus)

    def bind(self, bus) -> None:
        """Subscribe every declared trigger event to its handler"""
        self.bus = bus
        for event, method_name in self.mutations.items():
            handler = getattr(self, method_name, None)
            if handler is None:
                raise ValueError(f"{type(self).__name__} has no handler '{method_name}' for {event}")
            # Reuse one dispatcher per event so rebinding never subscribes twice
            if event not in self._dispatchers:
                self._dispatchers[event] = self._wrap(handler)
            bus.subscribe(event, self._dispatchers[event])

    @staticmethod
    def _wrap(handler: Callable) -> Callable:
        def dispatch(payload):
            if isinstance(payload, dict):
                return handler(**payload)
            return handler(payload)
        return dispatch

    def on_error(self, callback: Callable) -> None:
        """Register ``callback(action, payload, error)`` for failed requests"""
        self.error_callbacks.append(callback)

    def _trigger_error(self, action: str, payload: Dict, error: Exception) -> None:
        for callback in self.error_callbacks:
            try:
                callback(action, payload, error)
            except Exception as e:
                print_error(f"⚠️  {self.namespace} error callback failed: {e}")

    def send(self, action: str, payload: Dict, follow_up_event: Optional[str] = None) -> Any:
        """
        Issue ``action`` (e.g. ``create``) against this module's collection.

        Returns the server response, or None when the request failed; failures
        go to the error callbacks and are not retried.
        """
        method = getattr(self.transport, action, None)
        if method is None:
            raise ValueError(f"Unsupported action '{action}'")

        try:
            response = method(self.collection, payload)
        except (requests.exceptions.RequestException, TransportError, ValueError) as e:
            print_error(f"❌ {self.namespace} {action} failed: {e}")
            self._trigger_error(action, payload, e)
            return None

        if follow_up_event and self.bus is not None:
            self.bus.dispatch(follow_up_event, response)
        return response
