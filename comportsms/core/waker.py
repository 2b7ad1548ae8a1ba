"""
Response wake signal.

Bridges the transport's asynchronous data-arrival notification into the
synchronous command flow.
"""

import threading


class ResponseWaker:
    """
    Single-slot wake signal.

    A pending wake only means that some bytes may be available. Several
    notifications before a wait collapse into one, and nothing is queued:
    two waits without new data both time out.

    ``notify`` may be called from the transport's notification thread while
    the command flow is blocked in ``wait``.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def arm(self) -> None:
        """Discard any pending notification before a command is written."""
        self._event.clear()

    def notify(self) -> None:
        """Mark that new bytes may be available. Idempotent while pending."""
        self._event.set()

    def wait(self, timeout: float) -> bool:
        """
        Block until a notification is pending or the timeout elapses.

        Args:
            timeout: Seconds to wait

        Returns:
            True if a notification was pending (it is consumed),
            False on timeout
        """
        if not self._event.wait(timeout):
            return False

        # Consume before the caller drains the transport, so bytes arriving
        # during the drain raise a fresh wake.
        self._event.clear()
        return True

    @property
    def is_pending(self) -> bool:
        """Check if a notification is waiting to be consumed."""
        return self._event.is_set()
