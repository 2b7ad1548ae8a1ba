"""
Command line interface for comportsms.

Runs one SMS workflow against a modem and prints the result.
"""

import sys
import logging
from typing import Optional

from .modem import SMSModem
from .version import __version__
from .types import DeleteFlag, SMSStatus
from .exceptions import SMSModemError


class SMSCLI:
    """One-shot SMS command runner."""

    def __init__(self, port: str, baudrate: int = 9600, modem: Optional[SMSModem] = None):
        """
        Initialize CLI.

        Args:
            port: Serial port path
            baudrate: Baud rate
            modem: Preconfigured modem (for testing)
        """
        self.port = port
        self.baudrate = baudrate
        self.modem = modem if modem is not None else SMSModem(port=port, baudrate=baudrate)

    def run(self, args) -> int:
        """Open the port, run the selected command and close the port."""
        try:
            self.modem.open(self.port, baudrate=self.baudrate)
        except SMSModemError as e:
            print(f"Error: {e}")
            return 1

        try:
            return self._dispatch(args)
        except SMSModemError as e:
            print(f"Error: {e}")
            return 1
        finally:
            self.modem.close()

    def _dispatch(self, args) -> int:
        if args.command == "count":
            print(self.modem.sms.count_messages())
            return 0

        if args.command == "list":
            messages = self.modem.sms.list_messages(SMSStatus(args.status))
            for msg in messages:
                print(f"[{msg.index}] {msg.status} {msg.sender} {msg.timestamp}")
                print(f"    {msg.body}")
            print(f"{len(messages)} message(s)")
            return 0

        if args.command == "send":
            if self.modem.sms.send_message(args.number, args.text):
                print("Sent")
                return 0
            print("Modem rejected the message")
            return 1

        if args.command == "delete":
            if self.modem.sms.delete_message_at(args.index, DeleteFlag(args.flag)):
                print("Deleted")
                return 0
            print("Modem rejected the delete")
            return 1

        print(f"Unknown command: {args.command}")
        return 1


def build_parser():
    """Build the argument parser."""
    import argparse

    parser = argparse.ArgumentParser(
        description=f"comportsms {__version__} - SMS over an AT-command modem",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  comportsms-cli /dev/ttyUSB0 count
  comportsms-cli /dev/ttyUSB0 list --status "REC UNREAD"
  comportsms-cli COM3 send +31628870634 "Hello World!"
  comportsms-cli COM3 delete 1 --flag 4
        """
    )

    parser.add_argument(
        "port",
        help="Serial port (e.g., /dev/ttyUSB0, COM3)"
    )
    parser.add_argument(
        "-b", "--baudrate",
        type=int,
        default=9600,
        help="Baud rate (default: 9600)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("count", help="Count stored messages")

    list_parser = commands.add_parser("list", help="List stored messages")
    list_parser.add_argument(
        "--status",
        choices=[s.value for s in SMSStatus],
        default=SMSStatus.ALL.value,
        help="Status filter (default: ALL)"
    )

    send_parser = commands.add_parser("send", help="Send a message")
    send_parser.add_argument("number", help="Recipient number")
    send_parser.add_argument("text", help="Message text")

    delete_parser = commands.add_parser("delete", help="Delete messages")
    delete_parser.add_argument("index", type=int, help="Message index")
    delete_parser.add_argument(
        "--flag",
        type=int,
        choices=[int(f) for f in DeleteFlag],
        default=int(DeleteFlag.INDEX),
        help="AT+CMGD delete flag (default: 0, the given index only)"
    )

    return parser


def main(argv=None):
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    # Setup logging
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    else:
        logging.basicConfig(
            level=logging.WARNING,
            format='%(levelname)s: %(message)s'
        )

    cli = SMSCLI(port=args.port, baudrate=args.baudrate)
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
