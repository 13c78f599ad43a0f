""" Bookkeeping for in-flight requests. The :class:`Registry` ties a request
    id to the sink that should receive any responses bearing that id. This
    is the only place in the client where mutual exclusion is required for
    correct delivery; the :class:`lighthouse.connection.Connection` owns
    exactly one :class:`Registry`.
"""

import enum
import logging
import threading

from .errors import DuplicateRequestId


logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    """ How many responses a registered request expects. A SINGLE entry is
        removed when its one response is delivered; a STREAMING entry stays
        until it is cancelled.
    """

    SINGLE = 'single'
    STREAMING = 'streaming'


class Delivery(enum.Enum):
    """The outcome of :func:`Registry.dispatch`."""

    DELIVERED = 'delivered'
    UNHANDLED = 'unhandled'


class Entry:
    """ A single registration: the *request_id*, the delivery *mode*, and
        the *sink* that is invoked with each delivered message.
    """

    __slots__ = ('request_id', 'mode', 'sink')

    def __init__(self, request_id, mode, sink):
        self.request_id = request_id
        self.mode = Mode(mode)
        self.sink = sink


    def __repr__(self):
        return 'Entry(%r, %s, %r)' % (self.request_id, self.mode.name, self.sink)


# end of class Entry



class Registry:
    """ Map in-flight request ids to delivery sinks. A sink is any callable
        accepting a single argument, the delivered message.

        All operations hold the same re-entrant lock, including the sink
        invocation itself; a sink can therefore rely on never being invoked
        again once :func:`cancel` has returned, and a sink may safely call
        back into the registry. Sinks should be quick, they are invoked on
        the inbound dispatch path.

        :ivar lock: The re-entrant lock described above. An owner that
            needs its own bookkeeping to be atomic with registration must
            use this lock rather than a second one; taking two locks in
            opposite orders on the send and dispatch paths deadlocks as
            soon as a sink issues a request of its own.
    """

    def __init__(self):
        self._entries = dict()
        self.lock = threading.RLock()


    def __contains__(self, request_id):
        with self.lock:
            return request_id in self._entries


    def __len__(self):
        with self.lock:
            return len(self._entries)


    def register(self, request_id, mode, sink):
        """ Register a new *sink* for the given *request_id*. Raises
            :class:`DuplicateRequestId` if the id is already registered.
        """

        if callable(sink):
            pass
        else:
            raise TypeError('sink must be callable')

        entry = Entry(request_id, mode, sink)

        with self.lock:
            if request_id in self._entries:
                raise DuplicateRequestId('request id already registered: ' + repr(request_id))

            self._entries[request_id] = entry

        return entry


    def dispatch(self, request_id, message):
        """ Deliver *message* to the sink registered for *request_id*.
            Returns :data:`Delivery.UNHANDLED` if there is no such sink,
            otherwise :data:`Delivery.DELIVERED`. A SINGLE entry is removed
            as part of the same atomic step as its delivery.

            An exception raised by the sink is logged; it does not escape
            from this method, and does not change the return value.
        """

        with self.lock:
            try:
                entry = self._entries[request_id]
            except KeyError:
                return Delivery.UNHANDLED

            if entry.mode is Mode.SINGLE:
                del self._entries[request_id]

            try:
                entry.sink(message)
            except Exception:
                logger.warning('sink for request %r raised an exception', request_id, exc_info=True)

        return Delivery.DELIVERED


    def cancel(self, request_id):
        """ Remove the entry for *request_id*, if any. Cancelling an unknown
            or already-removed id is a no-op. Returns True if an entry was
            removed.
        """

        with self.lock:
            try:
                del self._entries[request_id]
            except KeyError:
                return False

        return True


    def clear(self):
        """ Remove every entry, returning the removed :class:`Entry`
            instances in registration order.
        """

        with self.lock:
            entries = list(self._entries.values())
            self._entries.clear()

        return entries


# end of class Registry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
