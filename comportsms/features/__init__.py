"""
Feature managers for modem functionality.

- SMSManager: Count, list, send and delete SMS messages
"""

from .sms import SMSManager

__all__ = [
    "SMSManager",
]
