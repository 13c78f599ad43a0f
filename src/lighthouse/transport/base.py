"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`lighthouse.protocol` so the protocol remains
transport-agnostic: a transport moves opaque byte buffers, one buffer per
logical message, and knows nothing about what is inside them.
"""

from __future__ import annotations

import inspect
import logging
import threading
import weakref
from abc import ABC, abstractmethod
from typing import Callable, List

from ..errors import (
    TransportClosed,
    TransportConnectionError,
    TransportError,
)


logger = logging.getLogger(__name__)


def _reference(callback):
    """ Return a weak reference to *callback*. Bound methods need special
        handling: a plain weak reference to one dies immediately, since the
        bound method object is created anew on every attribute access.
    """

    if inspect.ismethod(callback):
        return weakref.WeakMethod(callback)
    return weakref.ref(callback)


class Transport(ABC):
    """ Minimal contract for a wire-level transport. Inbound messages are
        delivered, in receive order, from a background thread owned by the
        transport to every callback registered with :func:`on_receive`.

        Callbacks are held by weak reference; the transport does not keep
        its listeners alive. A listener that has been garbage collected is
        quietly dropped.
    """

    def __init__(self, url: str):
        self.url = url
        self._receivers: List[weakref.ref] = []
        self._closers: List[weakref.ref] = []
        self._callbacks_lock = threading.Lock()
        self._close_reported = False

    @abstractmethod
    def open(self) -> None:
        """ Establish the underlying connection/socket. Raises
            :class:`TransportConnectionError` on failure.
        """

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def send(self, data: bytes) -> None:
        """ Send one message. Raises :class:`TransportError` on failure,
            :class:`TransportClosed` if the transport is not open.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def on_receive(self, callback: Callable[[bytes], None]) -> None:
        """ Register a callback invoked with the bytes of every inbound
            message.
        """

        if not callable(callback):
            raise TypeError("callback must be callable")

        with self._callbacks_lock:
            self._receivers.append(_reference(callback))

    def on_close(self, callback: Callable[[], None]) -> None:
        """ Register a callback invoked, at most once, when the transport is
            closed by the remote end or fails. It is not invoked for a close
            requested locally via :func:`close`.
        """

        if not callable(callback):
            raise TypeError("callback must be callable")

        with self._callbacks_lock:
            self._closers.append(_reference(callback))

    # --- for use by subclasses ---

    def _live(self, references: List[weakref.ref]) -> List[Callable]:

        with self._callbacks_lock:
            callbacks = []
            invalid = []

            for reference in references:
                callback = reference()
                if callback is None:
                    invalid.append(reference)
                else:
                    callbacks.append(callback)

            for reference in invalid:
                references.remove(reference)

        return callbacks

    def _received(self, data: bytes) -> None:
        """Hand an inbound message to every receive callback."""

        for callback in self._live(self._receivers):
            try:
                callback(data)
            except Exception:
                logger.exception("%s: receive callback failed", self.url)

    def _lost(self) -> None:
        """Report an unrequested close to every close callback, once."""

        with self._callbacks_lock:
            if self._close_reported:
                return
            self._close_reported = True

        for callback in self._live(self._closers):
            try:
                callback()
            except Exception:
                logger.exception("%s: close callback failed", self.url)

    def _closing(self) -> None:
        """Mark a locally requested close; close callbacks will not fire."""

        with self._callbacks_lock:
            self._close_reported = True

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<{type(self).__name__} {self.url} {state}>"


__all__ = [
    "Transport",
    "TransportClosed",
    "TransportConnectionError",
    "TransportError",
]
