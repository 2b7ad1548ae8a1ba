"""
Data types and structures for comportsms.

Provides type-safe representations of modem data.
"""

from dataclasses import dataclass
from enum import IntEnum, Enum

import serial


@dataclass
class PortSettings:
    """
    Serial line parameters for a modem session.

    Parity, stop bits and encoding are fixed for text-mode SMS traffic.
    Timeouts are in seconds.
    """
    port: str
    baudrate: int = 9600
    bytesize: int = 8
    read_timeout: float = 0.3
    write_timeout: float = 0.3
    parity: str = serial.PARITY_NONE
    stopbits: float = serial.STOPBITS_ONE
    encoding: str = "iso-8859-1"


@dataclass(frozen=True)
class ShortMessage:
    """
    One record of an AT+CMGL listing.

    All fields are taken verbatim from the modem response; the index is
    kept as the reported string.
    """
    index: str      # Storage index as reported (e.g., "1")
    status: str     # Message status (e.g., "REC UNREAD")
    sender: str     # Originating address (e.g., "+31628870634")
    alphabet: str   # Alphabet/charset field, often empty
    timestamp: str  # Service centre timestamp (YY/MM/DD,HH:MM:SS+TZ)
    body: str       # Line following the header


class ShortMessageCollection(list):
    """
    Ordered messages as they appeared in a listing response.

    Duplicate indices are preserved.
    """

    def __repr__(self) -> str:
        return f"ShortMessageCollection({list.__repr__(self)})"


class SMSStatus(Enum):
    """Text mode SMS status filters for AT+CMGL."""
    REC_UNREAD = "REC UNREAD"      # Received unread
    REC_READ = "REC READ"          # Received read
    STO_UNSENT = "STO UNSENT"      # Stored unsent
    STO_SENT = "STO SENT"          # Stored sent
    ALL = "ALL"                    # All messages


class DeleteFlag(IntEnum):
    """<delflag> values for AT+CMGD."""
    INDEX = 0               # Delete the message at the given index
    ALL_READ = 1            # Delete all read messages
    READ_AND_SENT = 2       # Delete read and sent messages
    READ_SENT_UNSENT = 3    # Delete read, sent and unsent messages
    ALL = 4                 # Delete all messages
