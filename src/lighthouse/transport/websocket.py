"""WebSocket transport.

This is how the public Lighthouse server is reached: one binary WebSocket
frame per message. The synchronous client from the ``websockets`` package
is used; a background thread reads inbound frames and hands them to the
registered receive callbacks.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import websockets.exceptions
import websockets.sync.client

from .base import Transport, TransportClosed, TransportConnectionError, TransportError


logger = logging.getLogger(__name__)


class WebSocketTransport(Transport):
    """ Exchange messages via a WebSocket connection to *url*, which should
        use the ws:// or wss:// scheme. The *open_timeout* is in seconds.
    """

    open_timeout = 10

    def __init__(self, url: str, open_timeout: Optional[float] = None):
        super().__init__(url)

        if open_timeout is not None:
            self.open_timeout = open_timeout

        self.websocket = None
        self._send_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self.shutdown = False

    @property
    def is_open(self) -> bool:
        return self.websocket is not None and not self.shutdown

    def open(self) -> None:
        if self.websocket is not None:
            raise TransportError(f"{self.url}: already opened")

        try:
            websocket = websockets.sync.client.connect(
                self.url,
                open_timeout=self.open_timeout,
                max_size=None,
            )
        except (OSError, TimeoutError, websockets.exceptions.WebSocketException) as exc:
            raise TransportConnectionError(f"{self.url}: {exc}") from exc

        self.websocket = websocket
        self._thread = threading.Thread(target=self.run, name=f"WebSocketTransport {self.url}", daemon=True)
        self._thread.start()

    def close(self) -> None:
        if self.websocket is None or self.shutdown:
            return

        self._closing()
        self.shutdown = True
        self.websocket.close()

        if self._thread is not threading.current_thread():
            self._thread.join()

    def send(self, data: bytes) -> None:
        if not self.is_open:
            raise TransportClosed(f"{self.url}: transport is not open")

        try:
            with self._send_lock:
                self.websocket.send(bytes(data))
        except websockets.exceptions.ConnectionClosed as exc:
            raise TransportClosed(f"{self.url}: {exc}") from exc
        except (OSError, RuntimeError) as exc:
            raise TransportError(f"{self.url}: {exc}") from exc

    def run(self) -> None:
        try:
            for message in self.websocket:
                if isinstance(message, str):
                    logger.warning("%s: ignoring text message (%d characters)", self.url, len(message))
                    continue
                self._received(message)
        except websockets.exceptions.ConnectionClosedError as exc:
            if not self.shutdown:
                logger.error("%s: connection lost: %s", self.url, exc)
        except OSError:
            if not self.shutdown:
                logger.exception("%s: receive failure", self.url)

        # The iteration above only ends when the connection is gone.

        if not self.shutdown:
            self.shutdown = True
            self._lost()
