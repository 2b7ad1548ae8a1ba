"""
Port session coordinating transport, wake signal and command execution.

This is the foundation the SMS workflows build upon.
"""

import logging
from typing import Optional

from .transport import Transport, SerialTransport
from .waker import ResponseWaker
from .protocol import CommandExecutor
from ..exceptions import PortClosedError, TransportIOError
from ..types import PortSettings

logger = logging.getLogger(__name__)


class PortSession:
    """
    One open modem port.

    Owns its transport binding, its wake signal and its executor; several
    sessions can coexist on different ports. A session only opens and
    closes on explicit calls, and commands may only run while it is open.

    Closing the session while a command is outstanding is not supported;
    the caller must let the command finish first.
    """

    def __init__(self, transport: Optional[Transport] = None) -> None:
        """
        Initialize a closed session.

        Args:
            transport: Transport to drive (a SerialTransport if omitted)
        """
        self.transport = transport if transport is not None else SerialTransport()
        self.waker = ResponseWaker()
        self.executor = CommandExecutor(self.transport, self.waker)
        self.settings: Optional[PortSettings] = None

        self._open = False

    def open(
        self,
        port: str,
        baudrate: int = 9600,
        bytesize: int = 8,
        read_timeout: float = 0.3,
        write_timeout: float = 0.3
    ) -> None:
        """
        Configure and open the port.

        Line parameters are fixed to no parity, one stop bit and ISO-8859-1.
        DTR and RTS are asserted once the port is open.

        Args:
            port: Serial port path (e.g., /dev/ttyUSB0, COM1)
            baudrate: Baud rate
            bytesize: Data bits
            read_timeout: Port read timeout in seconds
            write_timeout: Port write timeout in seconds

        Raises:
            TransportConfigurationError: If a line parameter is rejected
            TransportIOError: If the port cannot be opened or is already open
        """
        if self._open or self.transport.is_open():
            raise TransportIOError("Port is already open.")

        settings = PortSettings(
            port=port,
            baudrate=baudrate,
            bytesize=bytesize,
            read_timeout=read_timeout,
            write_timeout=write_timeout
        )

        self.transport.configure(settings)
        self.transport.set_data_received_handler(self.waker.notify)
        self.transport.open()

        try:
            self.transport.set_control_lines(dtr=True, rts=True)
        except Exception:
            # Release the port so a later open() can succeed
            try:
                self.transport.close()
            except TransportIOError as e:
                logger.warning(f"Failed to release port {port} after open error: {e}")
            raise

        self.settings = settings
        self._open = True
        logger.info(f"Port {port} open at {baudrate} baud")

    def close(self) -> None:
        """
        Close the port.

        The session is unusable afterwards even if the transport fails to
        close.

        Raises:
            TransportIOError: If the transport reports an error while closing
        """
        logger.info("Closing port session")
        self._open = False
        self.transport.set_data_received_handler(None)
        self.transport.close()
        logger.info("Port session closed")

    @property
    def is_open(self) -> bool:
        """Check if the session is open."""
        return self._open

    def execute(self, command: str, timeout: float) -> str:
        """
        Execute a command that must succeed.

        See CommandExecutor.execute().

        Raises:
            PortClosedError: If the session is not open
        """
        self._require_open(command)
        return self.executor.execute(command, timeout)

    def transact(self, command: str, timeout: float) -> str:
        """
        Execute a command and return the response whatever its terminator.

        See CommandExecutor.transact().

        Raises:
            PortClosedError: If the session is not open
        """
        self._require_open(command)
        return self.executor.transact(command, timeout)

    def _require_open(self, command: str) -> None:
        if not self._open:
            raise PortClosedError("Port is not open", command=command)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *exc):
        """Context manager exit."""
        if self._open:
            self.close()

    def __repr__(self) -> str:
        status = "open" if self._open else "closed"
        port = self.settings.port if self.settings else None
        return f"<PortSession port={port} status={status}>"
