"""
AT command protocol handler.

Manages the request/response exchange with the modem: command writing,
response assembly across wake cycles, and terminator classification.
"""

import logging
import threading

from .transport import Transport
from .waker import ResponseWaker
from ..exceptions import IncompleteResponseError, NoDataError, ProtocolError

logger = logging.getLogger(__name__)

# Wire-exact response terminators
SUCCESS_TERMINATOR = "\r\nOK\r\n"
PROMPT_TERMINATOR = "\r\n> "
FAILURE_TERMINATOR = "\r\nERROR\r\n"

TERMINATORS = (SUCCESS_TERMINATOR, PROMPT_TERMINATOR, FAILURE_TERMINATOR)

# Appended to an SMS body to submit it (Ctrl-Z, carriage return)
MESSAGE_TERMINATOR = "\x1a\r"

COMMAND_TERMINATOR = "\r"

NO_SUCCESS_MESSAGE = "No success message was received."


def is_success(response: str) -> bool:
    """Check if a response ends with the success or prompt terminator."""
    return response.endswith(SUCCESS_TERMINATOR) or response.endswith(PROMPT_TERMINATOR)


class ResponseAssembler:
    """
    Accumulates a response until a terminator is received.

    The timeout applies to each wait cycle, not to the whole response: a
    response arriving in bursts separated by short gaps assembles even if
    the total exchange takes much longer than the timeout.
    """

    def read(self, transport: Transport, waker: ResponseWaker, timeout: float) -> str:
        """
        Read one complete response.

        Args:
            transport: Transport to drain
            waker: Waker signalled by the transport on data arrival
            timeout: Seconds to wait for each burst of data

        Returns:
            The accumulated text, including the terminator

        Raises:
            NoDataError: If a wait times out before any data arrived
            IncompleteResponseError: If a wait times out after partial data
        """
        buffer = ""

        while True:
            if not waker.wait(timeout):
                if buffer:
                    logger.error(f"Response received is incomplete: {buffer!r}")
                    raise IncompleteResponseError(
                        "Response received is incomplete.",
                        response=buffer
                    )
                logger.error("No data received from modem")
                raise NoDataError("No data received from modem.")

            buffer += transport.read_available()

            # Match against the whole buffer; a terminator may straddle chunks
            if buffer.endswith(TERMINATORS):
                return buffer


class CommandExecutor:
    """
    Executes one AT command at a time.

    One executor exists per session. Executions are serialized, but the
    protocol is half-duplex: callers must not overlap commands.
    """

    def __init__(self, transport: Transport, waker: ResponseWaker) -> None:
        """
        Initialize command executor.

        Args:
            transport: Transport instance for communication
            waker: Waker the transport's data handler notifies
        """
        self.transport = transport
        self.waker = waker
        self.assembler = ResponseAssembler()

        self._at_lock = threading.Lock()

    def transact(self, command: str, timeout: float) -> str:
        """
        Write a command and return the raw response, whatever its terminator.

        Args:
            command: Command text without the trailing carriage return
            timeout: Seconds to wait for each burst of response data

        Returns:
            Raw response text including terminator

        Raises:
            NoDataError: If nothing was received
            IncompleteResponseError: If the response was cut short
            TransportIOError: If the transport fails
        """
        with self._at_lock:
            # Drop leftovers from unrelated traffic
            self.transport.discard_output_buffer()
            self.transport.discard_input_buffer()
            self.waker.arm()

            logger.debug(f"Sending AT command: {command!r}")
            self.transport.write(command + COMMAND_TERMINATOR)

            try:
                response = self.assembler.read(self.transport, self.waker, timeout)
            except ProtocolError as e:
                e.command = command
                raise

            logger.debug(f"Received response: {response!r}")
            return response

    def execute(self, command: str, timeout: float) -> str:
        """
        Execute a command that must succeed.

        A response ending with the prompt terminator counts as success.

        Args:
            command: Command text without the trailing carriage return
            timeout: Seconds to wait for each burst of response data

        Returns:
            Raw response text including terminator

        Raises:
            ProtocolError: If the response ends with the failure terminator
            NoDataError: If nothing was received
            IncompleteResponseError: If the response was cut short
        """
        response = self.transact(command, timeout)

        if not is_success(response):
            logger.error(f"AT command failed: {command!r}")
            raise ProtocolError(NO_SUCCESS_MESSAGE, command=command, response=response)

        return response
