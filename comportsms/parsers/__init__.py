"""
Response parsers for AT command responses.

Provides parsing of modem responses into structured data.
"""

from .sms import MessageParser, parse_cpms_count

__all__ = [
    "MessageParser",
    "parse_cpms_count",
]
