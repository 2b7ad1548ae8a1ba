"""
Transport layer abstraction for modem communication.

Provides abstractions for serial communication with dependency injection support.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Optional, Union

import serial
from serial import SerialException

from ..exceptions import TransportConfigurationError, TransportIOError
from ..types import PortSettings

logger = logging.getLogger(__name__)

# Type alias for data-arrival handlers
DataReceivedHandler = Callable[[], None]


class Transport(ABC):
    """
    Abstract base class for modem transport.

    Text is exchanged as ``str``; the transport owns the byte encoding.
    Registered data-received handlers are invoked from a context other than
    the caller's and must only signal, never read.
    """

    @abstractmethod
    def configure(self, settings: PortSettings) -> None:
        """
        Apply line parameters.

        Raises:
            TransportConfigurationError: If a parameter is rejected
        """
        pass

    @abstractmethod
    def open(self) -> None:
        """
        Open the port.

        Raises:
            TransportIOError: If the port cannot be opened
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Close the port.

        Raises:
            TransportIOError: If closing fails
        """
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if transport is open."""
        pass

    @abstractmethod
    def write(self, text: str) -> None:
        """
        Write text to the transport.

        Raises:
            TransportIOError: If write fails
        """
        pass

    @abstractmethod
    def read_available(self) -> str:
        """
        Drain everything currently received without blocking.

        Returns:
            Received text, empty if nothing is buffered
        """
        pass

    @abstractmethod
    def discard_input_buffer(self) -> None:
        """Drop received but unread data."""
        pass

    @abstractmethod
    def discard_output_buffer(self) -> None:
        """Drop written but untransmitted data."""
        pass

    @abstractmethod
    def set_control_lines(self, dtr: bool, rts: bool) -> None:
        """Set the DTR and RTS hardware lines."""
        pass

    @abstractmethod
    def set_data_received_handler(self, handler: Optional[DataReceivedHandler]) -> None:
        """
        Register the data-arrival handler, or remove it with None.

        Args:
            handler: Callable invoked whenever new bytes may be available
        """
        pass


class SerialTransport(Transport):
    """
    Serial port transport implementation.

    pyserial has no data-received event, so a watcher thread polls
    ``in_waiting`` while the port is open and invokes the handler whenever
    received bytes are buffered.
    """

    def __init__(self, poll_interval: float = 0.01) -> None:
        """
        Initialize serial transport.

        The port is created closed; call configure() and open().

        Args:
            poll_interval: Seconds between watcher polls
        """
        self.poll_interval = poll_interval
        self.encoding = "iso-8859-1"

        self._serial = serial.Serial()
        self._handler: Optional[DataReceivedHandler] = None
        self._handler_lock = threading.Lock()

        # Watcher thread management
        self._watcher: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def port(self) -> Optional[str]:
        return self._serial.port

    def configure(self, settings: PortSettings) -> None:
        """
        Apply line parameters to the underlying serial port.

        pyserial reapplies settings to a live port immediately, so the port
        must be closed.
        """
        if self._serial.is_open:
            raise TransportIOError(f"Cannot reconfigure open serial port {self.port}")

        try:
            self._serial.port = settings.port
            self._serial.baudrate = settings.baudrate
            self._serial.bytesize = settings.bytesize
            self._serial.parity = settings.parity
            self._serial.stopbits = settings.stopbits
            self._serial.timeout = settings.read_timeout
            self._serial.write_timeout = settings.write_timeout
        except ValueError as e:
            logger.error(f"Invalid line parameters for {settings.port}: {e}")
            raise TransportConfigurationError(
                f"Invalid line parameters for {settings.port}: {e}"
            ) from e
        except SerialException as e:
            logger.error(f"Failed to configure serial port {settings.port}: {e}")
            raise TransportIOError(
                f"Failed to configure serial port {settings.port}: {e}"
            ) from e

        self.encoding = settings.encoding
        logger.debug(f"Configured {settings}")

    def open(self) -> None:
        """Open the serial port and start the watcher thread."""
        try:
            self._serial.open()
        except SerialException as e:
            logger.error(f"Failed to open serial port {self.port}: {e}")
            raise TransportIOError(f"Failed to open serial port {self.port}: {e}") from e

        self._stop_event.clear()
        self._watcher = threading.Thread(
            target=self._watch_loop,
            daemon=True,
            name="SerialWatcherThread"
        )
        self._watcher.start()
        logger.info(f"Opened serial port {self.port} at {self._serial.baudrate} baud")

    def close(self) -> None:
        """Stop the watcher thread and close the serial port."""
        self._stop_event.set()
        if self._watcher:
            self._watcher.join(timeout=1.0)
            if self._watcher.is_alive():
                logger.warning("Watcher thread did not terminate in time")
            self._watcher = None

        try:
            self._serial.close()
        except SerialException as e:
            logger.error(f"Failed to close serial port {self.port}: {e}")
            raise TransportIOError(f"Failed to close serial port {self.port}: {e}") from e

        logger.info(f"Closed serial port {self.port}")

    def is_open(self) -> bool:
        """Check if serial port is open."""
        return self._serial.is_open

    def write(self, text: str) -> None:
        """Write text to serial port."""
        data = text.encode(self.encoding, errors="replace")
        try:
            written = self._serial.write(data)
            logger.debug(f"Wrote {written} bytes: {data}")
        except SerialException as e:
            logger.error(f"Serial write failed: {e}")
            raise TransportIOError(f"Serial write failed: {e}") from e

    def read_available(self) -> str:
        """Read whatever the driver has buffered."""
        try:
            waiting = self._serial.in_waiting
            data = self._serial.read(waiting) if waiting else b""
        except SerialException as e:
            logger.error(f"Serial read failed: {e}")
            raise TransportIOError(f"Serial read failed: {e}") from e

        if data:
            logger.debug(f"Read {len(data)} bytes: {data}")

        return data.decode(self.encoding, errors="replace")

    def discard_input_buffer(self) -> None:
        """Clear the serial input buffer."""
        try:
            self._serial.reset_input_buffer()
        except SerialException as e:
            logger.error(f"Failed to reset input buffer: {e}")
            raise TransportIOError(f"Failed to reset input buffer: {e}") from e

    def discard_output_buffer(self) -> None:
        """Clear the serial output buffer."""
        try:
            self._serial.reset_output_buffer()
        except SerialException as e:
            logger.error(f"Failed to reset output buffer: {e}")
            raise TransportIOError(f"Failed to reset output buffer: {e}") from e

    def set_control_lines(self, dtr: bool, rts: bool) -> None:
        """Assert or release DTR and RTS."""
        try:
            self._serial.dtr = dtr
            self._serial.rts = rts
        except (SerialException, OSError) as e:
            logger.error(f"Failed to set control lines: {e}")
            raise TransportIOError(f"Failed to set control lines: {e}") from e

        logger.debug(f"Control lines set: DTR={dtr}, RTS={rts}")

    def set_data_received_handler(self, handler: Optional[DataReceivedHandler]) -> None:
        """Register or remove the data-arrival handler."""
        with self._handler_lock:
            self._handler = handler

    def _watch_loop(self) -> None:
        """
        Poll the driver for received bytes.

        Fires the handler on every poll that finds buffered input; the
        handler is expected to be idempotent.
        """
        logger.debug("Watcher thread started")

        while not self._stop_event.is_set():
            try:
                waiting = self._serial.in_waiting
            except (SerialException, OSError) as e:
                logger.error(f"Watcher stopped, serial device unavailable: {e}")
                break

            if waiting:
                self._dispatch_data_received()

            self._stop_event.wait(self.poll_interval)

        logger.debug("Watcher thread stopped")

    def _dispatch_data_received(self) -> None:
        with self._handler_lock:
            handler = self._handler

        if handler is None:
            return

        try:
            handler()
        except Exception as e:
            logger.error(f"Data received handler failed: {e}", exc_info=True)


class MockTransport(Transport):
    """
    Mock transport for testing.

    Simulates modem responses without requiring hardware. Each write pops the
    next scripted response; its chunks are delivered one per notification,
    as if they had arrived in separate bursts.
    """

    def __init__(self) -> None:
        """Initialize mock transport."""
        self.settings: Optional[PortSettings] = None
        self.dtr = False
        self.rts = False
        self.written: list[str] = []

        # Exceptions to raise from open()/close(), for error propagation tests
        self.open_error: Optional[Exception] = None
        self.close_error: Optional[Exception] = None

        self._open = False
        self._handler: Optional[DataReceivedHandler] = None
        self._response_queue: Deque[list[str]] = deque()
        self._input_chunks: Deque[str] = deque()
        self._lock = threading.Lock()
        logger.info("Initialized MockTransport")

    def add_response(self, response: Union[str, list[str]]) -> None:
        """
        Queue a response to be delivered after the next write.

        Args:
            response: Full response text, or list of chunks
                (e.g., ["\\r\\nO", "K\\r\\n"])
        """
        chunks = [response] if isinstance(response, str) else list(response)
        with self._lock:
            self._response_queue.append(chunks)
            logger.debug(f"Added mock response: {chunks}")

    def inject(self, text: str) -> None:
        """Deliver unsolicited data immediately, outside any command."""
        with self._lock:
            self._input_chunks.append(text)
        self._notify()

    def configure(self, settings: PortSettings) -> None:
        """Record settings, rejecting values pyserial would reject."""
        if self._open:
            raise TransportIOError("Cannot reconfigure open MockTransport")
        if settings.bytesize not in (5, 6, 7, 8):
            raise TransportConfigurationError(f"Not a valid byte size: {settings.bytesize!r}")
        if settings.baudrate <= 0:
            raise TransportConfigurationError(f"Not a valid baudrate: {settings.baudrate!r}")
        self.settings = settings

    def open(self) -> None:
        """Simulate opening the port."""
        if self.open_error is not None:
            raise self.open_error
        if self._open:
            raise TransportIOError("Port is already open.")
        self._open = True
        logger.info("Opened MockTransport")

    def close(self) -> None:
        """Close mock transport."""
        if self.close_error is not None:
            raise self.close_error
        self._open = False
        logger.info("Closed MockTransport")

    def is_open(self) -> bool:
        """Check if mock transport is open."""
        return self._open

    def write(self, text: str) -> None:
        """Record the write and start delivering the next scripted response."""
        if not self._open:
            raise TransportIOError("MockTransport is closed")

        logger.debug(f"Mock write: {text!r}")
        with self._lock:
            self.written.append(text)
            if self._response_queue:
                self._input_chunks.extend(self._response_queue.popleft())
            pending = bool(self._input_chunks)

        if pending:
            self._notify()

    def read_available(self) -> str:
        """Return one chunk, announcing the next one if any remain."""
        with self._lock:
            chunk = self._input_chunks.popleft() if self._input_chunks else ""
            more = bool(self._input_chunks)

        if more:
            self._notify()

        logger.debug(f"Mock read: {chunk!r}")
        return chunk

    def discard_input_buffer(self) -> None:
        """Clear undelivered input."""
        with self._lock:
            self._input_chunks.clear()

    def discard_output_buffer(self) -> None:
        """Nothing is buffered on the output side."""
        pass

    def set_control_lines(self, dtr: bool, rts: bool) -> None:
        self.dtr = dtr
        self.rts = rts

    def set_data_received_handler(self, handler: Optional[DataReceivedHandler]) -> None:
        self._handler = handler

    @property
    def has_handler(self) -> bool:
        return self._handler is not None

    def clear_responses(self) -> None:
        """Clear all queued responses (useful for testing)."""
        with self._lock:
            self._response_queue.clear()
            logger.debug("Cleared mock response queue")

    def _notify(self) -> None:
        handler = self._handler
        if handler is not None:
            handler()
