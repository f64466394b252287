"""
Sequential human readable codes for distribution entities.

A code is a fixed prefix followed by a zero padded number, e.g. `TAR007`.
No counter is stored anywhere: the next code is derived from the highest
code already persisted for the kind.
"""

import re
from typing import Optional

from distribution.src.constants import (
    CODE_NUMBER_LIMIT,
    CODE_NUMBER_WIDTH,
    REGEX_CODE_NUMBER,
)


def parseCodeNumber(prefix: str, code: Optional[str]) -> Optional[int]:
    """
    Extract the numeric part of a code.

    Args:
        prefix (str): Expected code prefix, e.g. "TAR".
        code (str | None): Code to parse.

    Returns:
        int | None: The non-negative number after the prefix, or None when the
        code lacks the prefix, has an empty or non-numeric remainder, or the
        number exceeds CODE_NUMBER_LIMIT.

    Example:
        >>> parseCodeNumber("TAR", "TAR007")
        7
        >>> parseCodeNumber("TAR", "TARX1") is None
        True
    """
    if not code or not code.startswith(prefix):
        return None
    remainder = code[len(prefix) :]
    if re.fullmatch(REGEX_CODE_NUMBER, remainder) is None:
        return None
    number = int(remainder)
    if number > CODE_NUMBER_LIMIT:
        return None
    return number


def formatCode(prefix: str, number: int) -> str:
    return f"{prefix}{number:0{CODE_NUMBER_WIDTH}d}"


def nextCode(prefix: str, lastKnownCode: Optional[str]) -> str:
    """
    Compute the code following the highest known code of a kind.

    A malformed last code never blocks the write: its number counts as 0,
    so generation falls back to `<prefix>001`. The caller still checks the
    result against the store before saving.

    Example:
        >>> nextCode("TAR", None)
        'TAR001'
        >>> nextCode("TAR", "TAR005")
        'TAR006'
        >>> nextCode("TAR", "TAR999")
        'TAR1000'
        >>> nextCode("TAR", "legacy")
        'TAR001'
    """
    number = parseCodeNumber(prefix, lastKnownCode) or 0
    return formatCode(prefix, number + 1)
