"""
Lighthouse Protocol Layer
=========================

This package defines the messages exchanged with a Lighthouse server and
their binary representation. It has no knowledge of how bytes move between
client and server.

The protocol layer MUST NOT depend on any transport implementation
(e.g. WebSocket, ZeroMQ, etc).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Client (lighthouse.client)
    High-level semantic API
    - perform()
    - stream()
    - put() / post() / create() / delete() / mkdir() ...

    │
    ▼
Connection (lighthouse.connection)
    Request ids, registration, dispatch of responses
    - send()
    - connect() / close()

    │
    ▼
Codec (codec.py)
    Maps ClientMessage / ServerMessage <-> MessagePack bytes

    │
    ▼
Message Model (message.py)
    Protocol data structures
    - Verb
    - Payload variants
    - ClientMessage / ServerMessage
    Defines semantic meaning only

    │
    ▼
Field Vocabulary (fields.py)
    Canonical names for envelope and payload keys

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Transport Layer (lighthouse.transport)
    Moves bytes
    - WebSocket
    - ZeroMQ

---------------------------------------------------------------------
"""

from . import fields
from . import message
from . import codec

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
    normalize_path,
)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
