"""
SMS manager.

Handles SMS messaging workflows (count, list, send, delete) in text mode.
"""

import logging
from typing import TYPE_CHECKING

from ..types import DeleteFlag, ShortMessageCollection, SMSStatus
from ..parsers.sms import MessageParser, parse_cpms_count
from ..core.protocol import (
    FAILURE_TERMINATOR,
    MESSAGE_TERMINATOR,
    NO_SUCCESS_MESSAGE,
    SUCCESS_TERMINATOR,
)
from ..exceptions import ProtocolError

if TYPE_CHECKING:
    from ..core import PortSession

logger = logging.getLogger(__name__)

# Per-wait timeouts in seconds
ATTENTION_TIMEOUT = 0.3
SETUP_TIMEOUT = 0.3
STORAGE_QUERY_TIMEOUT = 1.0
LIST_TIMEOUT = 5.0
SUBMIT_TIMEOUT = 3.0
DELETE_TIMEOUT = 0.3


class SMSManager:
    """
    Manages SMS messaging workflows.

    Each workflow is a fixed sequence of commands. The first failing step
    aborts the workflow and its error propagates; commands already executed
    are not undone and nothing is retried.
    """

    def __init__(self, session: "PortSession") -> None:
        """
        Initialize SMS manager.

        Args:
            session: PortSession used for command execution
        """
        self.session = session
        self._parser = MessageParser()

        logger.debug("Initialized SMSManager")

    def _prepare_text_mode(self) -> None:
        """Check the modem answers and switch to text mode."""
        self.session.execute("AT", ATTENTION_TIMEOUT)
        self.session.execute("AT+CMGF=1", SETUP_TIMEOUT)

    def count_messages(self) -> int:
        """
        Count messages in the first preferred storage.

        Returns:
            Number of stored messages

        Raises:
            ProtocolError: If any step fails

        Example:

        .. code-block:: python

            total = modem.sms.count_messages()
            print(f"{total} message(s) on SIM")
        """
        logger.info("Counting messages")

        self._prepare_text_mode()
        response = self.session.execute("AT+CPMS?", STORAGE_QUERY_TIMEOUT)

        count = parse_cpms_count(response)
        logger.info(f"Storage holds {count} message(s)")
        return count

    def read_messages(self, command: str) -> ShortMessageCollection:
        """
        List messages from SIM storage with a raw listing command.

        Args:
            command: Listing command (e.g., 'AT+CMGL="ALL"')

        Returns:
            Messages in listing order

        Raises:
            ProtocolError: If any step fails
        """
        logger.info(f"Reading messages with {command}")

        self._prepare_text_mode()
        self.session.execute('AT+CSCS="PCCP437"', SETUP_TIMEOUT)
        self.session.execute('AT+CPMS="SM"', SETUP_TIMEOUT)
        response = self.session.execute(command, LIST_TIMEOUT)

        messages = self._parser.parse(response)
        logger.info(f"Found {len(messages)} message(s)")
        return messages

    def list_messages(self, status: SMSStatus = SMSStatus.ALL) -> ShortMessageCollection:
        """
        List messages by status.

        Args:
            status: Status filter (default: all messages)

        Returns:
            Messages in listing order

        Example:

        .. code-block:: python

            for msg in modem.sms.list_messages(SMSStatus.REC_UNREAD):
                print(f"{msg.sender}: {msg.body}")
        """
        return self.read_messages(f'AT+CMGL="{status.value}"')

    def send_message(self, phone_number: str, body: str) -> bool:
        """
        Send a text message.

        Args:
            phone_number: Recipient number (e.g., "+31628870634")
            body: Message text, ISO-8859-1 encodable

        Returns:
            True if the modem confirmed the submission, False if it answered
            with ERROR

        Raises:
            ProtocolError: If a preparation step fails or the final response
                is neither a confirmation nor an error

        Example:

        .. code-block:: python

            if not modem.sms.send_message("+31628870634", "Hello World!"):
                print("Modem refused the message")
        """
        logger.info(f"Sending SMS to {phone_number}")

        self._prepare_text_mode()
        self.session.execute(f'AT+CMGS="{phone_number}"', SETUP_TIMEOUT)

        command = body + MESSAGE_TERMINATOR
        response = self.session.transact(command, SUBMIT_TIMEOUT)

        if response.endswith(SUCCESS_TERMINATOR):
            logger.info("SMS sent successfully")
            return True
        elif FAILURE_TERMINATOR in response:
            logger.warning(f"Modem rejected SMS to {phone_number}")
            return False

        logger.error(f"Unexpected SMS submit response: {response!r}")
        raise ProtocolError(NO_SUCCESS_MESSAGE, command=command, response=response)

    def delete_message(self, command: str) -> bool:
        """
        Delete messages with a raw delete command.

        Args:
            command: Delete command (e.g., "AT+CMGD=1,3")

        Returns:
            True if the modem confirmed the deletion, False if it answered
            with ERROR

        Raises:
            ProtocolError: If a preparation step fails or the final response
                is neither a confirmation nor an error
        """
        logger.info(f"Deleting messages with {command}")

        self._prepare_text_mode()
        response = self.session.transact(command, DELETE_TIMEOUT)

        deleted = None
        if response.endswith(SUCCESS_TERMINATOR):
            deleted = True
        # ERROR anywhere in the response wins over a trailing OK
        if FAILURE_TERMINATOR in response:
            deleted = False

        if deleted is None:
            logger.error(f"Unexpected delete response: {response!r}")
            raise ProtocolError(NO_SUCCESS_MESSAGE, command=command, response=response)

        logger.info(f"Delete {'succeeded' if deleted else 'rejected'}")
        return deleted

    def delete_message_at(self, index: int, flag: DeleteFlag = DeleteFlag.INDEX) -> bool:
        """
        Delete by storage index and delete flag.

        Args:
            index: Message index (ignored by the modem for flags other than INDEX)
            flag: Which messages to delete

        Returns:
            True if the modem confirmed the deletion

        Example:

        .. code-block:: python

            modem.sms.delete_message_at(1)
            modem.sms.delete_message_at(1, DeleteFlag.ALL)
        """
        return self.delete_message(f"AT+CMGD={index},{int(flag)}")
