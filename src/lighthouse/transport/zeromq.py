"""ZeroMQ transport.

A DEALER socket connected to a single server. Each Lighthouse message is
sent as a single-frame ZeroMQ message; on receipt, any leading frames
(such as the empty delimiter a REQ-compatible ROUTER inserts) are joined
with the message body.

ZeroMQ sockets are not thread-safe. All socket operations happen on one
background thread; callers hand outbound messages to that thread via a
queue, and wake it up via an inproc PAIR socket.
"""

from __future__ import annotations

import atexit
import concurrent.futures
import logging
import queue
import threading
from typing import Optional

import zmq

from .base import Transport, TransportClosed, TransportConnectionError, TransportError


logger = logging.getLogger(__name__)
zmq_context = zmq.Context()


class ZmqTransport(Transport):
    """Exchange messages via a ZeroMQ DEALER socket."""

    poll_interval = 0.1

    def __init__(self, url: str):
        super().__init__(url)

        self.socket: Optional[zmq.Socket] = None
        self._outbox: queue.SimpleQueue = queue.SimpleQueue()
        self._signal_rx: Optional[zmq.Socket] = None
        self._signal_tx: Optional[zmq.Socket] = None
        self._signal_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self.shutdown = False

    @property
    def is_open(self) -> bool:
        return self._thread is not None and not self.shutdown

    def open(self) -> None:
        if self._thread is not None:
            raise TransportError(f"{self.url}: already opened")

        identity = f"lighthouse.transport.ZmqTransport.{id(self)}".encode()

        try:
            socket = zmq_context.socket(zmq.DEALER)
            socket.setsockopt(zmq.LINGER, 0)
            socket.identity = identity
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"{self.url}: {exc}") from exc

        try:
            socket.connect(self.url)
        except zmq.ZMQError as exc:
            socket.close()
            raise TransportConnectionError(f"{self.url}: {exc}") from exc

        internal = f"inproc://lighthouse.transport.ZmqTransport:signal:{id(self)}"
        signal_rx = None
        signal_tx = None

        try:
            signal_rx = zmq_context.socket(zmq.PAIR)
            signal_rx.bind(internal)
            signal_tx = zmq_context.socket(zmq.PAIR)
            signal_tx.connect(internal)
        except zmq.ZMQError as exc:
            for leftover in (signal_tx, signal_rx, socket):
                if leftover is not None:
                    leftover.close()
            raise TransportConnectionError(f"{self.url}: {exc}") from exc

        self._signal_rx = signal_rx
        self._signal_tx = signal_tx

        self.socket = socket
        self._thread = threading.Thread(target=self.run, name=f"ZmqTransport {self.url}", daemon=True)
        self._thread.start()

    def close(self) -> None:
        if self._thread is None or self.shutdown:
            return

        self._closing()

        with self._signal_lock:
            self.shutdown = True
            if self._signal_tx is not None:
                self._signal_tx.send(b"")

        if self._thread is not threading.current_thread():
            self._thread.join()

    def send(self, data: bytes) -> None:
        """ Queue *data* for the socket thread, and block until it has been
            handed to ZeroMQ. Any failure is raised here, in the caller's
            thread.

            A receive callback runs on the socket thread itself; a send from
            there goes straight to the socket, since nothing else would ever
            service the queue.
        """

        if threading.current_thread() is self._thread:
            if not self.is_open:
                raise TransportClosed(f"{self.url}: transport is not open")

            try:
                self.socket.send(bytes(data))
            except zmq.ZMQError as exc:
                raise TransportError(f"{self.url}: {exc}") from exc
            return

        future: concurrent.futures.Future = concurrent.futures.Future()

        # The PAIR socket is shared by every sending thread; the lock also
        # keeps a send from slipping in after the socket thread has drained
        # the outbox for the last time.

        with self._signal_lock:
            if not self.is_open or self._signal_tx is None:
                raise TransportClosed(f"{self.url}: transport is not open")

            self._outbox.put((bytes(data), future))
            self._signal_tx.send(b"")

        future.result()

    # --- internal ---

    def _handle_outgoing(self) -> None:
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            data, future = self._outbox.get(block=False)
        except queue.Empty:
            # A wakeup from close(), no message attached.
            return

        try:
            self.socket.send(data)
        except zmq.ZMQError as exc:
            future.set_exception(TransportError(f"{self.url}: {exc}"))
        else:
            future.set_result(None)

    def _handle_incoming(self) -> None:
        parts = self.socket.recv_multipart()
        self._received(b"".join(parts))

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        try:
            while not self.shutdown:
                for active, _flag in poller.poll(self.poll_interval * 1000):
                    if active == self._signal_rx:
                        self._handle_outgoing()
                    elif active == self.socket:
                        self._handle_incoming()
        except zmq.ZMQError:
            logger.exception("%s: socket failure, closing", self.url)
            with self._signal_lock:
                self.shutdown = True
            self._lost()
        finally:
            with self._signal_lock:
                self._signal_tx.close()
                self._signal_tx = None

                while True:
                    try:
                        _data, future = self._outbox.get(block=False)
                    except queue.Empty:
                        break
                    future.set_exception(TransportClosed(f"{self.url}: transport closed"))

            self._signal_rx.close()
            self.socket.close()


def _cleanup() -> None:
    # Sockets left open by a transport nobody closed would otherwise block
    # interpreter exit.
    zmq_context.destroy(linger=0)


atexit.register(_cleanup)
