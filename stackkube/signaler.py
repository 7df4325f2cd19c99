"""Single-shot notification through events and callbacks."""

from __future__ import annotations

import threading
from typing import Callable


class Signaler:
    """Fires once: runs registered callbacks and sets every handed-out event."""

    def __init__(self) -> None:
        self._callbacks: dict[int, Callable[[], None]] = {}
        self._events: list[threading.Event] = []
        self._lock = threading.Lock()
        self._triggered = False
        self._next_index = 0

    def register(self, callback: Callable[[], None]) -> int:
        """Register ``callback`` and return its handle.

        If the signaler already fired, the callback runs at once and -1 is returned.
        """
        with self._lock:
            if not self._triggered:
                handle = self._next_index
                self._next_index += 1
                self._callbacks[handle] = callback
                return handle
        callback()
        return -1

    def unregister(self, handle: int) -> None:
        """Forget the callback registered under ``handle``."""
        with self._lock:
            self._callbacks.pop(handle, None)

    def channel(self) -> threading.Event:
        """Return an event that is set when the signaler fires."""
        event = threading.Event()
        with self._lock:
            if self._triggered:
                event.set()
            else:
                self._events.append(event)
        return event

    def signal(self) -> None:
        """Fire the signaler; later calls do nothing."""
        with self._lock:
            if self._triggered:
                return
            self._triggered = True
            callbacks = list(self._callbacks.values())
            for event in self._events:
                event.set()
        # Callbacks run without the lock since they may unregister themselves.
        for callback in callbacks:
            callback()

    def triggered(self) -> bool:
        """Tell whether the signaler has fired."""
        return self._triggered