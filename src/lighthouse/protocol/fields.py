"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Message envelope
REQUEST_ID = "REID"
VERB = "VERB"
PATH = "PATH"
AUTH = "AUTH"
PAYLOAD = "PAYL"

# Credential
USER = "USER"
TOKEN = "TOKEN"

# Payload variants; KIND selects which of the remaining keys are present.
KIND = "KIND"

FRAME = "FRAME"
FRAME_DATA = "DATA"

INPUT = "INPUT"
INPUT_SOURCE = "SRC"
INPUT_KEY = "KEY"
INPUT_BUTTON = "BTN"
INPUT_DOWN = "DWN"

ACK = "ACK"

ERROR = "ERROR"
ERROR_CODE = "CODE"
ERROR_MESSAGE = "MSG"

# Request ids are signed 64-bit integers on the wire.
REQUEST_ID_MIN = -(2 ** 63)
REQUEST_ID_MAX = 2 ** 63 - 1
