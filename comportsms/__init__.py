"""
comportsms - Python library for sending and reading SMS through AT-command modems.
"""

from .version import __version__
from .modem import SMSModem
from .core import PortSession, SerialTransport, MockTransport
from .features import SMSManager
from .parsers import MessageParser

from .types import (
    PortSettings,
    ShortMessage,
    ShortMessageCollection,
    SMSStatus,
    DeleteFlag,
)

from .exceptions import (
    SMSModemError,
    TransportError,
    TransportConfigurationError,
    TransportIOError,
    ProtocolError,
    NoDataError,
    IncompleteResponseError,
    ArgumentError,
    PortClosedError,
)

__all__ = [
    "__version__",
    "SMSModem",
    "PortSession",
    "SerialTransport",
    "MockTransport",
    "SMSManager",
    "MessageParser",
    "PortSettings",
    "ShortMessage",
    "ShortMessageCollection",
    "SMSStatus",
    "DeleteFlag",
    "SMSModemError",
    "TransportError",
    "TransportConfigurationError",
    "TransportIOError",
    "ProtocolError",
    "NoDataError",
    "IncompleteResponseError",
    "ArgumentError",
    "PortClosedError",
]
