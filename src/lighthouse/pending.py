""" Delivery sinks for responses. A :class:`PendingRequest` collects the one
    response to a single request; a :class:`Stream` collects every response
    to a stream request, and presents them to the caller as an iterator.

    The :class:`PendingRequest` itself, and the :ivar:`Stream.sink`, are
    registered with a :class:`lighthouse.registry.Registry`, which invokes
    them with each delivered message. Both have an abort() method that the
    :class:`lighthouse.connection.Connection` invokes when no further
    responses will arrive.
"""

import queue
import threading

from .errors import RequestTimeout


class PendingRequest:
    """ Client-side helper that provides response synchronization for a
        single request. The caller blocks in :func:`wait` until the response
        arrives or the request is aborted.
    """

    def __init__(self):
        self.request_id = None
        self.response = None
        self.error = None
        self.rep_event = threading.Event()


    def __call__(self, response):
        """ Locally store the response and signal any callers blocking via
            :func:`wait` to proceed.
        """

        self.response = response
        self.rep_event.set()


    def abort(self, error):
        """ No response is forthcoming; any callers blocking via :func:`wait`
            will have *error* raised.
        """

        self.error = error
        self.rep_event.set()


    def poll(self):
        """ Return True if the request is complete, otherwise return False.
        """

        return self.rep_event.is_set()


    def wait(self, timeout=None):
        """ Block until the request has been handled, and return the
            response. If the request was aborted the abort error is raised;
            if *timeout* seconds elapse first, :class:`RequestTimeout` is
            raised. A *timeout* of None waits indefinitely.
        """

        if self.rep_event.wait(timeout):
            pass
        else:
            raise RequestTimeout('no response to request %r in %.2f sec' % (self.request_id, timeout))

        if self.error is not None:
            raise self.error

        return self.response


# end of class PendingRequest



class _Inbox:
    """ The part of a :class:`Stream` that is registered as the sink. It is
        kept separate so that the registry does not hold a reference to the
        :class:`Stream` itself, which would keep an abandoned stream from
        ever being garbage collected.
    """

    end = object()

    def __init__(self):
        self.error = None
        self.queue = queue.SimpleQueue()


    def __call__(self, response):
        self.queue.put(response)


    def abort(self, error):
        """ The connection is gone. Any consumer blocked waiting for the next
            response is woken, and iteration ends once the responses already
            received have been consumed.
        """

        self.error = error
        self.queue.put(self.end)


# end of class _Inbox



class Stream:
    """ An unbounded iterator over the responses to a stream request, in the
        order they were received. Each call to next() blocks until another
        response arrives; iteration ends when the stream is closed, or when
        the connection goes away.

        The :ivar:`sink` is what gets registered to receive responses.
        Closing the stream, by calling :func:`close`, by leaving a ``with``
        block, or by letting the :class:`Stream` be garbage collected,
        invokes the cancel callable provided to :func:`bind` exactly once.
        Responses that arrive afterwards are never seen by the consumer.
    """

    def __init__(self):
        self.request_id = None
        self.closed = False
        self.sink = _Inbox()
        self._cancel = None
        self._close_lock = threading.Lock()


    def __del__(self):
        # Nothing to do if __init__ never completed.
        if hasattr(self, '_close_lock'):
            self.close()


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


    def __iter__(self):
        return self


    def __next__(self):
        return self.get()


    def __repr__(self):
        if self.closed:
            state = 'closed'
        else:
            state = 'open'

        return '<Stream %r %s>' % (self.request_id, state)


    @property
    def error(self):
        """ The :class:`lighthouse.errors.ConnectionClosed` instance if the
            stream ended because the connection went away, otherwise None.
        """

        return self.sink.error


    def bind(self, request_id, cancel):
        """ Associate this stream with its *request_id*, and the *cancel*
            callable that withdraws the registration.
        """

        self.request_id = request_id
        self._cancel = cancel


    def close(self):
        """ Stop the stream. This is idempotent; only the first call has
            any effect.
        """

        with self._close_lock:
            if self.closed:
                return
            self.closed = True

        if self._cancel is not None:
            self._cancel()

        # Wake a consumer blocked in another thread.
        self.sink.queue.put(_Inbox.end)


    def get(self, timeout=None):
        """ Return the next response, waiting up to *timeout* seconds for it
            to arrive; None waits indefinitely. Raises :class:`StopIteration`
            if the stream has ended, :class:`RequestTimeout` if the *timeout*
            expires.
        """

        if self.closed:
            raise StopIteration

        try:
            response = self.sink.queue.get(timeout=timeout)
        except queue.Empty:
            raise RequestTimeout('no response to stream %r in %.2f sec' % (self.request_id, timeout))

        if response is _Inbox.end or self.closed:
            # Leave the marker in place for any other consumers.
            self.sink.queue.put(_Inbox.end)
            raise StopIteration

        return response


# end of class Stream


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
