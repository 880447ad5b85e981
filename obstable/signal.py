"""
obstable Signal - Synchronous Change Notifier
=============================================

A minimal publish/subscribe primitive used as the notifier of every container.

Listeners are plain callables. ``fire()`` invokes every listener registered at
the moment of the call, in subscription order, before returning. Listeners may
subscribe, disconnect or fire again from inside a callback; the listener list is
copied before dispatch so such changes only affect later fires.

Exceptions raised by a listener propagate to whoever called ``fire()``.
"""

from typing import Any, Callable, List

from .errors import UsageError


class Connection:
    """Handle returned by ``Signal.subscribe`` that can detach its listener."""

    __slots__ = ("_signal", "_listener", "_connected")

    def __init__(self, signal: "Signal", listener: Callable[..., Any]):
        self._signal = signal
        self._listener = listener
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected and self._signal.has_listener(self._listener)

    def disconnect(self) -> None:
        if self._connected:
            self._signal.remove_listener(self._listener)
            self._connected = False

    def __repr__(self) -> str:
        state = "connected" if self.connected else "disconnected"
        return f"Connection({self._listener!r}, {state})"


class Signal:
    """
    Synchronous notifier with ordered listeners.

    Usage:
        changed = Signal()
        connection = changed.subscribe(lambda: print("changed"))
        changed.fire()           # prints "changed"
        connection.disconnect()
        changed.destroy()
    """

    def __init__(self) -> None:
        self._listeners: List[Callable[..., Any]] = []
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def add_listener(self, listener: Callable[..., Any]) -> None:
        if self._destroyed:
            raise UsageError("Cannot subscribe to a destroyed signal")
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[..., Any]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def has_listener(self, listener: Callable[..., Any]) -> bool:
        return listener in self._listeners

    def subscribe(self, listener: Callable[..., Any]) -> Connection:
        """Register ``listener`` and return a ``Connection`` that can remove it."""
        self.add_listener(listener)
        return Connection(self, listener)

    def fire(self, *args: Any) -> None:
        """Call every current listener with ``args``."""
        # Copy to avoid modification during iteration
        for listener in list(self._listeners):
            listener(*args)

    def disconnect_all(self) -> None:
        self._listeners.clear()

    def destroy(self) -> None:
        """Drop all listeners; further ``fire()`` calls are no-ops."""
        self.disconnect_all()
        self._destroyed = True

    def __len__(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"Signal(listeners={len(self._listeners)})"
