"""
Main SMSModem class.

User-facing API that coordinates the port session and the SMS manager.
"""

import logging
from typing import Optional

from .core import PortSession, Transport
from .features import SMSManager

logger = logging.getLogger(__name__)


class SMSModem:
    """
    Main interface for SMS modem control.

    Example usage with context manager:

    .. code-block:: python

        with SMSModem(port="/dev/ttyUSB0") as modem:
            print(f"{modem.sms.count_messages()} message(s) stored")

            for msg in modem.sms.list_messages():
                print(f"[{msg.index}] {msg.sender}: {msg.body}")

            modem.sms.send_message("+31628870634", "Hello World!")

    Example usage with manual lifecycle management:

    .. code-block:: python

        modem = SMSModem()
        modem.open("/dev/ttyUSB0", baudrate=9600)
        # ... use modem ...
        modem.close()
    """

    def __init__(
        self,
        port: Optional[str] = None,
        transport: Optional[Transport] = None,
        baudrate: int = 9600,
        bytesize: int = 8,
        read_timeout: float = 0.3,
        write_timeout: float = 0.3
    ) -> None:
        """
        Initialize SMSModem.

        Args:
            port: Serial port path (e.g., "/dev/ttyUSB0"). Opened on context
                manager entry when given.
            transport: Custom transport instance (for testing). A
                SerialTransport is created if omitted.
            baudrate: Serial port baud rate (default: 9600)
            bytesize: Data bits (default: 8)
            read_timeout: Port read timeout in seconds (default: 0.3)
            write_timeout: Port write timeout in seconds (default: 0.3)

        Example:

        .. code-block:: python

            # Using custom transport (for testing)
            from comportsms.core import MockTransport
            modem = SMSModem(port="COM2", transport=MockTransport())
        """
        self.port = port
        self.baudrate = baudrate
        self.bytesize = bytesize
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

        self._session = PortSession(transport)
        self.sms = SMSManager(self._session)

        logger.info("Initialized SMSModem")

    def open(self, port: Optional[str] = None, **line_params) -> None:
        """
        Open the modem port.

        Args:
            port: Serial port path; defaults to the one given at construction
            **line_params: Overrides for baudrate, bytesize, read_timeout,
                write_timeout

        Raises:
            ValueError: If no port is known
            TransportConfigurationError: If a line parameter is rejected
            TransportIOError: If the port cannot be opened
        """
        port = port or self.port
        if port is None:
            raise ValueError("A serial port must be provided")

        params = {
            "baudrate": self.baudrate,
            "bytesize": self.bytesize,
            "read_timeout": self.read_timeout,
            "write_timeout": self.write_timeout,
        }
        params.update(line_params)

        self._session.open(port, **params)
        self.port = port

    def close(self) -> None:
        """
        Close the modem port.

        Raises:
            TransportIOError: If the port reports an error while closing
        """
        self._session.close()
        logger.info("Modem closed")

    def send_raw_at(self, cmd: str, timeout: float = 1.0) -> str:
        """
        Send a raw AT command.

        For commands not covered by the SMS manager.

        Args:
            cmd: AT command (e.g., "AT+CSQ")
            timeout: Per-wait timeout in seconds

        Returns:
            Raw response text including terminator

        Raises:
            ProtocolError: If the modem does not answer with OK or a prompt

        Example:

        .. code-block:: python

            response = modem.send_raw_at("AT+CSQ")
        """
        return self._session.execute(cmd, timeout)

    @property
    def port_is_open(self) -> bool:
        """Check if the modem port is open."""
        return self._session.is_open

    @property
    def session(self) -> PortSession:
        return self._session

    def __enter__(self):
        """
        Context manager entry.

        Opens the port if it is not open yet.
        """
        if not self.port_is_open:
            self.open()
        return self

    def __exit__(self, *exc):
        """
        Context manager exit.

        Closes the port.
        """
        if self.port_is_open:
            self.close()

    def __repr__(self) -> str:
        """String representation of modem."""
        status = "open" if self.port_is_open else "closed"
        return f"<SMSModem port={self.port} status={status}>"
