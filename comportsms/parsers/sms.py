"""
SMS response parsers for AT commands.

Parses responses from SMS-related AT commands like:
- AT+CMGL (List messages)
- AT+CPMS? (Preferred message storage)
"""

import logging
import re
from typing import Optional

from ..exceptions import ArgumentError, ProtocolError
from ..types import ShortMessage, ShortMessageCollection

logger = logging.getLogger(__name__)

# +CMGL: <index>,"<status>","<sender>",<alphabet>,"<timestamp>"\r\n<body>\r\n
CMGL_RECORD = re.compile(r'\+CMGL: (\d+),"(.+)","(.+)",(.*),"(.+)"\r\n(.+)\r\n')


class MessageParser:
    """Parser for text mode AT+CMGL listings."""

    @staticmethod
    def parse(text: Optional[str]) -> ShortMessageCollection:
        """
        Extract every listing record from a response.

        Records are matched left to right without overlap; anything that does
        not match is skipped.

        Expected format (multiple messages):
            +CMGL: 1,"REC UNREAD","+31628870634",,"11/01/09,10:26:26+04"
            This is text message 1
            +CMGL: 2,"REC UNREAD","+31628870634",,"11/01/09,10:26:49+04"
            This is text message 2

        Args:
            text: Raw AT+CMGL response

        Returns:
            ShortMessageCollection in order of appearance (may be empty)

        Raises:
            ArgumentError: If text is None
        """
        if text is None:
            raise ArgumentError("Response text is required")

        messages = ShortMessageCollection()

        for match in CMGL_RECORD.finditer(text):
            index, status, sender, alphabet, timestamp, body = match.groups()
            messages.append(ShortMessage(
                index=index,
                status=status,
                sender=sender,
                alphabet=alphabet,
                timestamp=timestamp,
                body=body
            ))

        logger.debug(f"Parsed {len(messages)} message(s)")
        return messages


def parse_cpms_count(text: str) -> int:
    """
    Parse the message count of the first storage from an AT+CPMS? response.

    Expected format:
        +CPMS: "SM",4,20,"SM",0,20,"ME",186,1000

    The line is split on commas and the second field is the count. Quoted
    fields are assumed to contain no commas.

    Args:
        text: Raw AT+CPMS? response

    Returns:
        Number of messages in the first storage, 0 if no +CPMS line is present

    Raises:
        ProtocolError: If the count field is missing or not an integer
    """
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith("+CPMS:"):
            continue

        fields = line.split(",")
        try:
            return int(fields[1])
        except (IndexError, ValueError) as e:
            raise ProtocolError(
                f"Could not parse message count from: {line}",
                command="AT+CPMS?",
                response=text
            ) from e

    logger.warning(f"No +CPMS line in response: {text!r}")
    return 0
