"""
Core modem infrastructure.

Provides low-level building blocks for modem communication:
- Transport: Serial communication abstraction
- ResponseWaker: Data-arrival wake signal
- Protocol: Response assembly and AT command execution
- PortSession: Coordination of all core components for one port
"""

from .transport import Transport, SerialTransport, MockTransport, DataReceivedHandler
from .waker import ResponseWaker
from .protocol import (
    ResponseAssembler,
    CommandExecutor,
    SUCCESS_TERMINATOR,
    PROMPT_TERMINATOR,
    FAILURE_TERMINATOR,
    MESSAGE_TERMINATOR,
)
from .session import PortSession

__all__ = [
    "Transport",
    "SerialTransport",
    "MockTransport",
    "DataReceivedHandler",
    "ResponseWaker",
    "ResponseAssembler",
    "CommandExecutor",
    "SUCCESS_TERMINATOR",
    "PROMPT_TERMINATOR",
    "FAILURE_TERMINATOR",
    "MESSAGE_TERMINATOR",
    "PortSession",
]
