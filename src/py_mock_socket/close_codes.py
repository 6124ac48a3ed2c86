"""Standard WebSocket close codes (RFC 6455, section 7.4.1).

When either side of a connection closes, the close event carries a
numeric **code** explaining why.  The ranges are:

    - **1000-1015** — defined by the protocol itself.
    - **3000-3999** — registered with IANA for libraries and frameworks.
    - **4000-4999** — free for private use by applications.

Codes 1005, 1006 and 1015 are reserved: they describe what a socket
*observed* and must never be sent by an endpoint.
"""

from enum import IntEnum


class CloseCode(IntEnum):
    """Symbolic names for the protocol-defined close codes."""

    NORMAL = 1000
    GOING_AWAY = 1001
    PROTOCOL_ERROR = 1002
    UNSUPPORTED = 1003
    NO_STATUS = 1005
    ABNORMAL = 1006
    UNSUPPORTED_DATA = 1007
    POLICY_VIOLATION = 1008
    TOO_LARGE = 1009
    MISSING_EXTENSION = 1010
    INTERNAL_ERROR = 1011
    SERVICE_RESTART = 1012
    TRY_AGAIN_LATER = 1013
    BAD_GATEWAY = 1014
    TLS_HANDSHAKE = 1015


RESERVED_CODES: frozenset[CloseCode] = frozenset(
    {CloseCode.NO_STATUS, CloseCode.ABNORMAL, CloseCode.TLS_HANDSHAKE},
)
"""Codes that only describe an observed failure and are never sent."""

APPLICATION_CODE_MIN = 3000
APPLICATION_CODE_MAX = 4999


def is_sendable(code: int) -> bool:
    """Return True if an endpoint may pass *code* to ``close()``.

    Browsers only accept 1000 or a code in the application range.
    """
    return code == CloseCode.NORMAL or APPLICATION_CODE_MIN <= code <= APPLICATION_CODE_MAX
