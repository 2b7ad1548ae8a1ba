"""
Tests for the command line interface.
"""

import pytest

from comportsms import SMSModem
from comportsms.cli import SMSCLI, build_parser


@pytest.fixture
def cli(mock_transport):
    modem = SMSModem(transport=mock_transport)
    return SMSCLI(port="COM2", modem=modem)


def run(cli, *argv):
    return cli.run(build_parser().parse_args(["COM2", *argv]))


def test_count(cli, mock_transport, cpms_response, capsys):
    mock_transport.add_response("\r\nOK\r\n")
    mock_transport.add_response("\r\nOK\r\n")
    mock_transport.add_response(cpms_response)

    assert run(cli, "count") == 0
    assert capsys.readouterr().out.strip() == "4"
    assert mock_transport.is_open() is False


def test_list(cli, mock_transport, cmgl_response, capsys):
    for _ in range(4):
        mock_transport.add_response("\r\nOK\r\n")
    mock_transport.add_response(cmgl_response)

    assert run(cli, "list", "--status", "REC UNREAD") == 0

    out = capsys.readouterr().out
    assert "This is text message 2" in out
    assert "2 message(s)" in out
    assert mock_transport.written[-1] == 'AT+CMGL="REC UNREAD"\r'


def test_send_rejected(cli, mock_transport, capsys):
    mock_transport.add_response("\r\nOK\r\n")
    mock_transport.add_response("\r\nOK\r\n")
    mock_transport.add_response("\r\n> ")
    mock_transport.add_response("\r\nERROR\r\n")

    assert run(cli, "send", "+31628870634", "Hello World!") == 1
    assert "rejected" in capsys.readouterr().out


def test_delete(cli, mock_transport):
    for _ in range(3):
        mock_transport.add_response("\r\nOK\r\n")

    assert run(cli, "delete", "3", "--flag", "1") == 0
    assert mock_transport.written[-1] == "AT+CMGD=3,1\r"


def test_protocol_error_exit_code(cli, mock_transport, capsys):
    mock_transport.add_response("\r\nERROR\r\n")

    assert run(cli, "count") == 1
    assert "No success message was received." in capsys.readouterr().out
    assert mock_transport.is_open() is False


def test_open_error_exit_code(cli, mock_transport, capsys):
    mock_transport.open()

    assert run(cli, "count") == 1
    assert "already open" in capsys.readouterr().out
