#!/usr/bin/env python3
"""
SMS Operations Example

Demonstrates the SMS workflows:
- Counting stored messages
- Listing messages
- Sending a message
- Deleting a message

Usage:
    python examples/sms_operations.py /dev/ttyUSB0
"""

import sys
import logging

from comportsms import SMSModem, ProtocolError
from comportsms.types import SMSStatus


def list_example(modem: SMSModem):
    """Demonstrate counting and listing."""
    print(f"\nMessages on SIM: {modem.sms.count_messages()}")

    for msg in modem.sms.list_messages(SMSStatus.ALL):
        print(f"  [{msg.index}] {msg.status} from {msg.sender} at {msg.timestamp}")
        print(f"      {msg.body}")


def send_example(modem: SMSModem):
    """Demonstrate sending."""
    recipient = input("\nEnter recipient number (e.g., +31628870634): ").strip()
    text = input("Enter message text: ").strip()

    if not (recipient and text):
        print("Skipped - no input provided")
        return

    if modem.sms.send_message(recipient, text):
        print("SMS sent")
    else:
        print("Modem rejected the message")


def delete_example(modem: SMSModem):
    """Demonstrate deleting by index."""
    index = input("\nIndex to delete (empty to skip): ").strip()
    if not index:
        return

    if modem.sms.delete_message(f"AT+CMGD={index}"):
        print(f"Deleted message {index}")
    else:
        print(f"Could not delete message {index}")


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return 1

    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    try:
        with SMSModem(port=sys.argv[1], baudrate=9600) as modem:
            list_example(modem)
            send_example(modem)
            delete_example(modem)
    except ProtocolError as e:
        print(f"Modem did not respond as expected: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
