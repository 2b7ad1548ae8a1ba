"""
Exceptions for comportsms.

Provides detailed error information for debugging modem communication issues.
"""

from typing import Optional


class SMSModemError(Exception):
    """
    Base exception for SMS modem errors.

    All comportsms exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        response: Optional[str] = None
    ) -> None:
        """
        Initialize exception with context.

        Args:
            message: Error description
            command: AT command that caused the error (if applicable)
            response: Raw modem response accumulated so far (if applicable)
        """
        self.message = message
        self.command = command
        self.response = response
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with context."""
        parts = [super().__str__()]

        if self.command:
            parts.append(f"Command: {self.command!r}")

        if self.response:
            parts.append(f"Response: {self.response!r}")

        return " | ".join(parts)


class TransportError(SMSModemError):
    """
    Raised when the transport layer fails.

    Serial port errors are wrapped into one of the subclasses below and
    propagated unchanged by every layer above the transport.
    """
    pass


class TransportConfigurationError(TransportError, ValueError):
    """
    Raised when line parameters are rejected.

    This indicates:
    - Invalid port name
    - Baud rate or data bits out of range
    """
    pass


class TransportIOError(TransportError):
    """
    Raised when an I/O operation on the port fails.

    This indicates:
    - Port cannot be opened (missing, busy, already open, access denied)
    - Read, write or close failure
    - Device disconnected
    """
    pass


class ProtocolError(SMSModemError):
    """
    Raised when the modem did not answer with a success terminator.

    Workflows surface every failed step as this type (or a subclass), so
    callers only need to catch ProtocolError to detect a failed exchange.
    """
    pass


class NoDataError(ProtocolError):
    """
    Raised when a wait times out before any byte was received.

    This typically indicates:
    - Modem is not connected or powered
    - Wrong port or line parameters
    """
    pass


class IncompleteResponseError(ProtocolError):
    """
    Raised when a wait times out after a partial response.

    The bytes received so far are available as ``response``.
    """
    pass


class ArgumentError(SMSModemError, ValueError):
    """
    Raised when a required argument is missing.
    """
    pass


class PortClosedError(SMSModemError):
    """
    Raised when executing a command on a session that is not open.
    """
    pass
