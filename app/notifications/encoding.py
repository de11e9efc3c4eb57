"""SMS segment computation.

A single GSM-7 SMS carries 160 characters and a single UCS-2 SMS carries
70. Once a message spans several segments each one loses room to the
concatenation header: 153 and 67 characters respectively.
"""

import math

GSM_SINGLE_SEGMENT = 160
GSM_MULTI_SEGMENT = 153
UNICODE_SINGLE_SEGMENT = 70
UNICODE_MULTI_SEGMENT = 67


def is_unicode(body: str) -> bool:
    """True if any character lies outside 7-bit ASCII."""
    return any(ord(char) > 0x7F for char in body)


def segments(body: str) -> int:
    """Number of SMS segments needed to carry the body.

    Args:
        body: Message text

    Returns:
        Segment count, at least 1 (an empty body still costs one segment)
    """
    length = len(body)

    if is_unicode(body):
        if length <= UNICODE_SINGLE_SEGMENT:
            return 1
        return math.ceil(length / UNICODE_MULTI_SEGMENT)

    if length <= GSM_SINGLE_SEGMENT:
        return 1
    return math.ceil(length / GSM_MULTI_SEGMENT)
