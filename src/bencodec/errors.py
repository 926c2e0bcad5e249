"""
Exceptions raised while decoding Bencoded data.

Each failure mode has its own class so callers can tell them apart with
`except` or `isinstance` instead of matching on messages.
"""

__all__ = [
    "BencodeDecodeError",
    "UnknownTag",
    "MalformedInteger",
    "IntegerOverflow",
    "MalformedLength",
    "UnterminatedValue",
    "TruncatedString",
    "InvalidKeyType",
    "DuplicateKey",
    "MissingValue",
    "UnexpectedEndOfInput",
    "TrailingData",
    "NestingTooDeep",
]


class BencodeDecodeError(Exception):
    """Base class for Bencode decoding errors. `position` is a byte offset."""

    def __init__(self, message: str, position: int = None):
        self.position = position
        if position is not None:
            message = f"{message} (at byte {position})"
        super().__init__(message)


class UnknownTag(BencodeDecodeError):
    """The byte where a value should start is not i, l, d or a digit."""

    def __init__(self, tag: bytes, position: int = None):
        self.tag = tag
        super().__init__(f"Unknown tag {tag!r}", position)


class MalformedInteger(BencodeDecodeError):
    """An i...e body that is not a canonical decimal integer."""


class IntegerOverflow(MalformedInteger):
    """An integer that does not fit in a signed 64-bit value."""


class MalformedLength(BencodeDecodeError):
    """A byte string length prefix that is not a canonical decimal number."""


class UnterminatedValue(BencodeDecodeError):
    """Input ended before a value's terminator (e or :) was seen."""


class TruncatedString(BencodeDecodeError):
    """Fewer bytes remain than a byte string's length prefix declares."""

    def __init__(self, expected: int, available: int, position: int = None):
        self.expected = expected
        self.available = available
        super().__init__(
            f"String declares {expected} bytes but only {available} remain", position
        )


class InvalidKeyType(BencodeDecodeError):
    """A dictionary key that is not a byte string."""


class DuplicateKey(BencodeDecodeError):
    """The same key appears twice in one dictionary."""

    def __init__(self, key: bytes, position: int = None):
        self.key = key
        super().__init__(f"Duplicate dictionary key {key!r}", position)


class MissingValue(BencodeDecodeError):
    """A dictionary key followed directly by the closing e."""


class UnexpectedEndOfInput(BencodeDecodeError):
    """Input ended where a value was expected to start."""


class TrailingData(BencodeDecodeError):
    """Bytes left over after a complete top-level value."""


class NestingTooDeep(BencodeDecodeError):
    """Lists/dictionaries nested deeper than the decoder allows."""
