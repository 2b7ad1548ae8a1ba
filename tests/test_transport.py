"""
Tests for transport layer.
"""

import threading
from unittest import mock

import pytest
import serial
from serial import SerialException

from comportsms.core import MockTransport, PortSession, SerialTransport
from comportsms.exceptions import TransportConfigurationError, TransportIOError
from comportsms.features import SMSManager
from comportsms.types import PortSettings


class FakeSerial:
    """
    Stand-in for serial.Serial.

    Replies to each written command from a script, appending the reply to
    the receive buffer the way a modem would.
    """

    def __init__(self):
        self.port = None
        self.bytesize = 8
        self.parity = serial.PARITY_NONE
        self.stopbits = serial.STOPBITS_ONE
        self.timeout = None
        self.write_timeout = None
        self.is_open = False
        self.dtr = False
        self.rts = False
        self.replies = []
        self.tx = bytearray()
        self.rx = bytearray()
        self._baudrate = 9600
        self._lock = threading.Lock()

    @property
    def baudrate(self):
        return self._baudrate

    @baudrate.setter
    def baudrate(self, value):
        if value <= 0:
            raise ValueError(f"Not a valid baudrate: {value!r}")
        self._baudrate = value

    @property
    def in_waiting(self):
        if not self.is_open:
            raise SerialException("Attempting to use a port that is not open")
        with self._lock:
            return len(self.rx)

    def open(self):
        if self.is_open:
            raise SerialException("Port is already open.")
        self.is_open = True

    def close(self):
        self.is_open = False

    def write(self, data):
        if not self.is_open:
            raise SerialException("Attempting to use a port that is not open")
        self.tx.extend(data)
        with self._lock:
            if self.replies:
                self.rx.extend(self.replies.pop(0))
        return len(data)

    def read(self, size=1):
        with self._lock:
            data = bytes(self.rx[:size])
            del self.rx[:size]
        return data

    def reset_input_buffer(self):
        with self._lock:
            self.rx.clear()

    def reset_output_buffer(self):
        pass


class NoModemLinesSerial(FakeSerial):
    """Port whose driver rejects DTR/RTS, like a pty or a 3-wire adapter."""

    @property
    def dtr(self):
        return False

    @dtr.setter
    def dtr(self, value):
        if self.is_open:
            raise OSError(25, "Inappropriate ioctl for device")

    @property
    def rts(self):
        return False

    @rts.setter
    def rts(self, value):
        if self.is_open:
            raise OSError(25, "Inappropriate ioctl for device")


@pytest.fixture
def fake_serial():
    fake = FakeSerial()
    with mock.patch.object(serial, "Serial", return_value=fake):
        yield fake


@pytest.fixture
def serial_transport(fake_serial):
    transport = SerialTransport(poll_interval=0.005)
    yield transport
    if transport.is_open():
        transport.close()


class TestMockTransport:
    """Test the scripted mock transport."""

    def test_write_records_command(self):
        transport = MockTransport()
        transport.open()

        transport.write("AT\r")

        assert transport.written == ["AT\r"]

    def test_write_when_closed(self):
        transport = MockTransport()

        with pytest.raises(TransportIOError):
            transport.write("AT\r")

    def test_chunks_delivered_one_per_notification(self):
        transport = MockTransport()
        notifications = []
        transport.set_data_received_handler(lambda: notifications.append(1))
        transport.open()
        transport.add_response(["\r\nO", "K\r\n"])

        transport.write("AT\r")
        assert len(notifications) == 1

        assert transport.read_available() == "\r\nO"
        assert len(notifications) == 2
        assert transport.read_available() == "K\r\n"
        assert transport.read_available() == ""

    def test_no_response_no_notification(self):
        transport = MockTransport()
        notifications = []
        transport.set_data_received_handler(lambda: notifications.append(1))
        transport.open()

        transport.write("AT\r")

        assert notifications == []
        assert transport.read_available() == ""

    def test_discard_input_buffer(self):
        transport = MockTransport()
        transport.inject("\r\nRING\r\n")

        transport.discard_input_buffer()

        assert transport.read_available() == ""

    def test_clear_responses(self):
        transport = MockTransport()
        transport.open()
        transport.add_response("\r\nOK\r\n")

        transport.clear_responses()
        transport.write("AT\r")

        assert transport.read_available() == ""

    def test_rejects_invalid_bytesize(self):
        transport = MockTransport()

        with pytest.raises(TransportConfigurationError):
            transport.configure(PortSettings(port="COM2", bytesize=65535))


class TestSerialTransport:
    """Test the pyserial-backed transport."""

    def test_configure(self, serial_transport, fake_serial):
        serial_transport.configure(PortSettings(
            port="/dev/ttyUSB0",
            baudrate=115200,
            bytesize=8,
            read_timeout=0.5,
            write_timeout=0.7
        ))

        assert fake_serial.port == "/dev/ttyUSB0"
        assert fake_serial.baudrate == 115200
        assert fake_serial.parity == serial.PARITY_NONE
        assert fake_serial.stopbits == serial.STOPBITS_ONE
        assert fake_serial.timeout == 0.5
        assert fake_serial.write_timeout == 0.7
        assert serial_transport.encoding == "iso-8859-1"

    def test_configure_invalid_baudrate(self, serial_transport):
        with pytest.raises(TransportConfigurationError) as exc_info:
            serial_transport.configure(PortSettings(port="COM2", baudrate=-1))

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_open_failure(self, serial_transport, fake_serial):
        fake_serial.open = mock.Mock(side_effect=SerialException("could not open port"))

        with pytest.raises(TransportIOError):
            serial_transport.open()

    def test_open_twice(self, serial_transport):
        serial_transport.open()

        with pytest.raises(TransportIOError):
            serial_transport.open()

    def test_configure_rejected_while_open(self, serial_transport, fake_serial):
        serial_transport.open()

        with pytest.raises(TransportIOError):
            serial_transport.configure(PortSettings(port="COM2", baudrate=115200, bytesize=7))

        assert fake_serial.baudrate == 9600
        assert fake_serial.bytesize == 8

    def test_control_lines_os_error_wrapped(self):
        fake = NoModemLinesSerial()
        with mock.patch.object(serial, "Serial", return_value=fake):
            transport = SerialTransport(poll_interval=0.005)
        transport.open()

        try:
            with pytest.raises(TransportIOError) as exc_info:
                transport.set_control_lines(dtr=True, rts=True)
        finally:
            transport.close()

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_write_encodes_latin1(self, serial_transport, fake_serial):
        serial_transport.open()

        serial_transport.write("Café \x1a\r")

        assert bytes(fake_serial.tx) == b"Caf\xe9 \x1a\r"

    def test_read_available(self, serial_transport, fake_serial):
        serial_transport.open()
        fake_serial.rx.extend(b"\r\n+CMGL: 1\r\n")

        assert serial_transport.read_available() == "\r\n+CMGL: 1\r\n"
        assert serial_transport.read_available() == ""

    def test_control_lines(self, serial_transport, fake_serial):
        serial_transport.open()

        serial_transport.set_control_lines(dtr=True, rts=True)

        assert fake_serial.dtr is True
        assert fake_serial.rts is True

    def test_watcher_notifies_on_data(self, serial_transport, fake_serial):
        arrived = threading.Event()
        serial_transport.set_data_received_handler(arrived.set)
        serial_transport.open()

        fake_serial.rx.extend(b"\r\nRING\r\n")

        assert arrived.wait(2.0) is True

    def test_close_stops_watcher(self, serial_transport, fake_serial):
        serial_transport.open()

        serial_transport.close()

        assert fake_serial.is_open is False
        assert serial_transport.is_open() is False

    def test_session_over_serial(self, serial_transport, fake_serial):
        """Test a full workflow through the watcher thread."""
        fake_serial.replies = [
            b"\r\nOK\r\n",
            b"\r\nOK\r\n",
            b'\r\n+CPMS: "SM",4,20,"SM",0,20,"ME",186,1000\r\n\r\nOK\r\n',
        ]
        session = PortSession(serial_transport)
        session.open("/dev/ttyUSB0", 9600, 8, 0.3, 0.3)

        try:
            assert SMSManager(session).count_messages() == 4
        finally:
            session.close()

        assert bytes(fake_serial.tx) == b"AT\rAT+CMGF=1\rAT+CPMS?\r"
        assert fake_serial.dtr is True
        assert fake_serial.rts is True

    def test_session_reopen_keeps_live_settings(self, serial_transport, fake_serial):
        session = PortSession(serial_transport)
        session.open("/dev/ttyUSB0", 9600, 8, 0.3, 0.3)

        try:
            with pytest.raises(TransportIOError, match="already open"):
                session.open("/dev/ttyUSB0", 115200, 8, 0.3, 0.3)

            assert fake_serial.baudrate == 9600
            assert session.settings.baudrate == 9600
            assert session.is_open is True
        finally:
            session.close()

    def test_session_releases_port_when_control_lines_fail(self):
        fake = NoModemLinesSerial()
        with mock.patch.object(serial, "Serial", return_value=fake):
            transport = SerialTransport(poll_interval=0.005)
        session = PortSession(transport)

        with pytest.raises(TransportIOError):
            session.open("/dev/pts/3", 9600, 8, 0.3, 0.3)

        assert session.is_open is False
        assert transport.is_open() is False
        assert transport._watcher is None

        # The port is free again, so a retry reaches the driver
        with pytest.raises(TransportIOError, match="control lines"):
            session.open("/dev/pts/3", 9600, 8, 0.3, 0.3)
        assert transport.is_open() is False
