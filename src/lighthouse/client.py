""" The :class:`Lighthouse` class is the principal entry point for anyone
    talking to a Lighthouse server. It wraps a
    :class:`lighthouse.connection.Connection` with blocking request/response
    calls, iterable streams, and shortcuts for each verb.
"""

import functools

from . import config
from .connection import Connection
from .errors import InvalidVerbForSingleRequest, RemoteError, RequestTimeout
from .pending import PendingRequest, Stream
from .protocol.message import FramePayload, InputEvent, Verb
from .registry import Mode


class Lighthouse:
    """ A client session with a Lighthouse server. The *credential* is used
        for every request; if it is not specified, one is built from the
        LIGHTHOUSE_USER and LIGHTHOUSE_TOKEN environment variables. The
        *url* and *transport* arguments are passed to the
        :class:`lighthouse.connection.Connection`.

        The session is not connected until :func:`connect` is invoked, or
        the instance is used as a context manager::

            with Lighthouse(credential) as lighthouse:
                lighthouse.send_frame(frame)
    """

    def __init__(self, credential=None, url=None, transport=None):

        if credential is None:
            credential = config.credential()

        self.credential = credential
        self.connection = Connection(url, credential, transport)


    def __enter__(self):
        self.connect()
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


    def __repr__(self):
        return '<Lighthouse %s %r>' % (self.credential.username, self.connection)


    def connect(self):
        self.connection.connect()


    def close(self):
        self.connection.close()


    def perform(self, verb, path, payload=None, timeout=None):
        """ Send a single request, and block until the response arrives. The
            :class:`lighthouse.protocol.message.ServerMessage` is returned;
            if the response is an error, :class:`RemoteError` is raised
            instead. If the connection is closed before the response arrives,
            :class:`lighthouse.errors.ConnectionClosed` is raised.

            There is no deadline unless *timeout* is specified, in seconds;
            if it expires, the request is abandoned and
            :class:`lighthouse.errors.RequestTimeout` is raised.

            A stream request can produce many responses; use :func:`stream`
            for those.
        """

        verb = Verb(verb)

        if verb.streaming:
            raise InvalidVerbForSingleRequest('use stream() for ' + verb.value + ' requests')

        pending = PendingRequest()
        request_id = self.connection.send(verb, path, payload, mode=Mode.SINGLE, sink=pending)
        pending.request_id = request_id

        try:
            response = pending.wait(timeout)
        except RequestTimeout:
            if self.connection.cancel(request_id):
                raise

            # The registration was already gone: the response, or an abort
            # from close(), beat the cancellation and is imminent.
            response = pending.wait()

        if response.failed:
            raise RemoteError(response.payload.code, response.payload.message)

        return response


    def stream(self, path, payload=None):
        """ Request a stream of responses for the resource at *path*. The
            returned :class:`lighthouse.pending.Stream` is an iterator over
            the responses, in the order they arrive; it does not block until
            the first element is requested. Error payloads are yielded like
            any other response.

            Close the stream, or leave the ``with`` block using it, to stop
            receiving responses::

                with lighthouse.stream(path) as stream:
                    for message in stream:
                        ...
        """

        stream = Stream()
        request_id = self.connection.send(Verb.STREAM, path, payload, mode=Mode.STREAMING, sink=stream.sink)
        stream.bind(request_id, functools.partial(self.connection.cancel, request_id))

        return stream


    def stop(self, path):
        """ Ask the server to stop streaming the resource at *path*. This does
            not wait for, or check, the server's response. Returns the request
            id of the stop request.
        """

        return self.connection.send(Verb.STOP, path)


    # Verb shortcuts.

    def get(self, path, payload=None, timeout=None):
        return self.perform(Verb.GET, path, payload, timeout)


    def put(self, path, payload=None, timeout=None):
        return self.perform(Verb.PUT, path, payload, timeout)


    def post(self, path, payload=None, timeout=None):
        return self.perform(Verb.POST, path, payload, timeout)


    def create(self, path, payload=None, timeout=None):
        return self.perform(Verb.CREATE, path, payload, timeout)


    def delete(self, path, payload=None, timeout=None):
        return self.perform(Verb.DELETE, path, payload, timeout)


    def mkdir(self, path, payload=None, timeout=None):
        return self.perform(Verb.MKDIR, path, payload, timeout)


    def list(self, path, payload=None, timeout=None):
        return self.perform(Verb.LIST, path, payload, timeout)


    def link(self, path, payload=None, timeout=None):
        return self.perform(Verb.LINK, path, payload, timeout)


    def unlink(self, path, payload=None, timeout=None):
        return self.perform(Verb.UNLINK, path, payload, timeout)


    # The user's own display.

    @property
    def model(self):
        """ The path to the user's display model: user/<username>/model.
        """

        return ('user', self.credential.username, 'model')


    def send_frame(self, frame, timeout=None):
        """ Display *frame*, a :class:`lighthouse.frame.Frame` or its raw
            bytes, on the user's model.
        """

        return self.put(self.model, FramePayload(frame), timeout)


    def stream_model(self):
        """ Stream the user's model. This yields any frames displayed on it,
            and any input events from clients viewing it.
        """

        return self.stream(self.model)


# end of class Lighthouse



def input_events(stream):
    """ Iterate over only the :class:`InputEvent` payloads in *stream*.
    """

    for message in stream:
        if isinstance(message.payload, InputEvent):
            yield message.payload



def frames(stream):
    """ Iterate over only the :class:`lighthouse.frame.Frame` instances
        displayed, as seen in *stream*.
    """

    for message in stream:
        if isinstance(message.payload, FramePayload):
            yield message.payload.frame


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
