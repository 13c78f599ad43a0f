"""MessagePack codec for protocol messages.

Every message is a single MessagePack map. Requests carry the full envelope:

    {"REID": int, "VERB": str, "PATH": [str, ...],
     "AUTH": {"USER": str, "TOKEN": str}, "PAYL": payload}

Responses carry only the request id and the payload:

    {"REID": int, "PAYL": payload}

A payload is nil, or a map whose "KIND" entry selects the variant. Payloads
of a kind this module does not recognize decode to :class:`Other` so that
new server-side payload kinds do not break older clients.
"""

from __future__ import annotations

from typing import Any, Dict

import msgspec

from ..errors import DecodeError, EncodeError
from .. import frame as framemodule
from . import fields
from .message import (
    Ack,
    ClientMessage,
    Credential,
    ErrorPayload,
    FramePayload,
    InputEvent,
    Other,
    Payload,
    ServerMessage,
    Verb,
)


_encoder = msgspec.msgpack.Encoder()
_decoder = msgspec.msgpack.Decoder()
_KNOWN_KINDS = frozenset((fields.FRAME, fields.INPUT, fields.ACK, fields.ERROR))


def encode(message) -> bytes:
    """ Serialize a :class:`ClientMessage` or :class:`ServerMessage` to
        bytes. Raises :class:`EncodeError` if the message cannot be
        represented on the wire.
    """

    if isinstance(message, ClientMessage):
        structure = _client_to_wire(message)
    elif isinstance(message, ServerMessage):
        structure = _server_to_wire(message)
    else:
        raise EncodeError(f"cannot encode {type(message).__name__}")

    try:
        return _encoder.encode(structure)
    except (TypeError, ValueError, OverflowError) as exc:
        raise EncodeError(f"cannot encode {message!r}: {exc}") from exc


def decode(data: bytes) -> ServerMessage:
    """Deserialize bytes -> ServerMessage"""

    structure = _unpack(data)
    return ServerMessage(_request_id(structure), _payload_from_wire(structure.get(fields.PAYLOAD)))


def decode_client(data: bytes) -> ClientMessage:
    """ Deserialize bytes -> ClientMessage. The client never receives a
        request; this is the counterpart to :func:`encode` for anything
        acting as a server, such as a test fixture.
    """

    structure = _unpack(data)
    request_id = _request_id(structure)

    try:
        verb = Verb(structure[fields.VERB])
        path = structure[fields.PATH]
        auth = structure[fields.AUTH]
        credential = Credential(auth[fields.USER], auth[fields.TOKEN])
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"malformed request envelope: {exc!r}") from exc

    if not isinstance(path, list):
        raise DecodeError(f"request path is not a list: {path!r}")

    payload = _payload_from_wire(structure.get(fields.PAYLOAD))

    try:
        return ClientMessage(request_id, verb, path, credential, payload)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"malformed request: {exc}") from exc


# --- internal ---

def _unpack(data: bytes) -> Dict[str, Any]:

    try:
        structure = _decoder.decode(data)
    except (msgspec.DecodeError, TypeError, ValueError) as exc:
        raise DecodeError(f"not a MessagePack message: {exc}") from exc

    if not isinstance(structure, dict):
        raise DecodeError(f"message is not a map: {type(structure).__name__}")

    return structure


def _request_id(structure: Dict[str, Any]) -> int:

    try:
        request_id = structure[fields.REQUEST_ID]
    except KeyError:
        raise DecodeError("message has no request id") from None

    if isinstance(request_id, bool) or not isinstance(request_id, int):
        raise DecodeError(f"request id is not an integer: {request_id!r}")

    return request_id


def _check_request_id(request_id) -> int:

    if isinstance(request_id, bool) or not isinstance(request_id, int):
        raise EncodeError(f"request id is not an integer: {request_id!r}")

    if request_id < fields.REQUEST_ID_MIN or request_id > fields.REQUEST_ID_MAX:
        raise EncodeError(f"request id out of range: {request_id}")

    return request_id


def _client_to_wire(message: ClientMessage) -> Dict[str, Any]:

    credential = message.credential
    if not isinstance(credential, Credential):
        raise EncodeError(f"a request requires a Credential, not {credential!r}")

    return {
        fields.REQUEST_ID: _check_request_id(message.request_id),
        fields.VERB: message.verb.value,
        fields.PATH: list(message.path),
        fields.AUTH: {
            fields.USER: credential.username,
            fields.TOKEN: credential.token,
        },
        fields.PAYLOAD: _payload_to_wire(message.payload),
    }


def _server_to_wire(message: ServerMessage) -> Dict[str, Any]:
    return {
        fields.REQUEST_ID: _check_request_id(message.request_id),
        fields.PAYLOAD: _payload_to_wire(message.payload),
    }


def _payload_to_wire(payload: Payload) -> Any:

    if isinstance(payload, Other):
        raw = payload.raw
        kind = raw.get(fields.KIND) if isinstance(raw, dict) else None
        if isinstance(kind, str) and kind in _KNOWN_KINDS:
            # It would decode as the variant it is masquerading as.
            raise EncodeError(f"Other payload carries a known kind: {kind!r}")
        return raw

    if isinstance(payload, FramePayload):
        return {fields.KIND: fields.FRAME, fields.FRAME_DATA: bytes(payload.frame)}

    if isinstance(payload, InputEvent):
        return {
            fields.KIND: fields.INPUT,
            fields.INPUT_SOURCE: payload.source,
            fields.INPUT_KEY: payload.key,
            fields.INPUT_BUTTON: payload.button,
            fields.INPUT_DOWN: payload.down,
        }

    if isinstance(payload, Ack):
        return {fields.KIND: fields.ACK}

    if isinstance(payload, ErrorPayload):
        return {
            fields.KIND: fields.ERROR,
            fields.ERROR_CODE: payload.code,
            fields.ERROR_MESSAGE: payload.message,
        }

    raise EncodeError(f"not a payload: {payload!r}")


def _payload_from_wire(value: Any) -> Payload:

    if not isinstance(value, dict):
        return Other(value)

    kind = value.get(fields.KIND)

    try:
        if kind == fields.FRAME:
            data = value[fields.FRAME_DATA]
            if not isinstance(data, bytes):
                raise TypeError(f"frame data is {type(data).__name__}, not bytes")
            return FramePayload(framemodule.Frame(data=data))

        if kind == fields.INPUT:
            down = value[fields.INPUT_DOWN]
            if not isinstance(down, bool):
                raise TypeError(f"input state is not a boolean: {down!r}")
            key = value.get(fields.INPUT_KEY)
            button = value.get(fields.INPUT_BUTTON)
            for number in (key, button):
                if number is not None and (isinstance(number, bool) or not isinstance(number, int)):
                    raise TypeError(f"input key/button is not an integer: {number!r}")
            return InputEvent(value[fields.INPUT_SOURCE], key, button, down)

        if kind == fields.ACK:
            return Ack()

        if kind == fields.ERROR:
            code = value[fields.ERROR_CODE]
            message = value.get(fields.ERROR_MESSAGE, "")
            if isinstance(code, bool) or not isinstance(code, int):
                raise TypeError(f"error code is not an integer: {code!r}")
            if not isinstance(message, str):
                raise TypeError(f"error message is not a string: {message!r}")
            return ErrorPayload(code, message)

    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"malformed {kind} payload: {exc!r}") from exc

    return Other(value)
