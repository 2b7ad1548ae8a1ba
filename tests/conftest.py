"""
Pytest configuration and fixtures.

Provides shared test fixtures for comportsms tests.
"""

import pytest
import logging

from comportsms.core import MockTransport, PortSession
from comportsms.features import SMSManager


# Enable logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def mock_transport():
    """
    Create a MockTransport instance for testing.

    Example:
        def test_something(mock_transport):
            mock_transport.add_response("\\r\\nOK\\r\\n")
            # ... test code ...
    """
    transport = MockTransport()
    yield transport
    if transport.is_open():
        transport.close()


@pytest.fixture
def session(mock_transport):
    """
    Create an open PortSession on a MockTransport.

    Example:
        def test_at_command(session, mock_transport):
            mock_transport.add_response("\\r\\n+CSQ: 24,99\\r\\n\\r\\nOK\\r\\n")
            response = session.execute("AT+CSQ", 0.3)
    """
    port_session = PortSession(mock_transport)
    port_session.open("COM2", 9600, 8, 0.3, 0.3)
    yield port_session
    if port_session.is_open:
        port_session.close()


@pytest.fixture
def manager(session):
    """Create an SMSManager on the open session."""
    return SMSManager(session)


@pytest.fixture
def cmgl_response():
    """Mock response for AT+CMGL="ALL" with two messages."""
    return (
        '\r\n+CMGL: 1,"REC UNREAD","+31628870634",,"11/01/09,10:26:26+04"\r\n'
        "This is text message 1\r\n"
        '+CMGL: 2,"REC UNREAD","+31628870634",,"11/01/09,10:26:49+04"\r\n'
        "This is text message 2\r\n"
        "\r\nOK\r\n"
    )


@pytest.fixture
def cpms_response():
    """Mock response for AT+CPMS?"""
    return '\r\n+CPMS: "SM",4,20,"SM",0,20,"ME",186,1000\r\n\r\nOK\r\n'
