"""
Bencode decoder for BitTorrent metainfo and tracker responses.
"""
import re
from typing import BinaryIO, Optional, Tuple

from .errors import (
    BencodeDecodeError,
    DuplicateKey,
    IntegerOverflow,
    InvalidKeyType,
    MalformedInteger,
    MalformedLength,
    MissingValue,
    NestingTooDeep,
    TrailingData,
    TruncatedString,
    UnexpectedEndOfInput,
    UnknownTag,
    UnterminatedValue,
)
from .structure import (
    INT64_MAX,
    INT64_MIN,
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeType,
)

DEFAULT_MAX_DEPTH = 256

_DIGITS = b"0123456789"
_INT_RE = re.compile(rb"-?(?:0|[1-9][0-9]*)")
_LENGTH_RE = re.compile(rb"0|[1-9][0-9]*")
# a signed 64-bit value has at most 19 decimal digits
_MAX_INT_DIGITS = 19
_READ_CHUNK = 64 * 1024


# --------------------------
# Byte sources
# --------------------------

class _BufferSource:
    """Cursor over an in-memory buffer."""

    def __init__(self, data, offset: int = 0):
        self.data = bytes(data)
        self.pos = offset

    def peek(self) -> bytes:
        return self.data[self.pos:self.pos+1]

    def read(self, n: int = 1) -> bytes:
        chunk = self.data[self.pos:self.pos+n]
        self.pos += len(chunk)
        return chunk

    def at_end(self) -> bool:
        return self.pos >= len(self.data)


class _StreamSource:
    """
    Reads from a binary file object one byte at a time, with a single byte
    of pushback so peek() never takes a byte the value does not own.
    """

    def __init__(self, fp: BinaryIO):
        self.fp = fp
        self.pos = 0
        self._pending: Optional[bytes] = None

    def peek(self) -> bytes:
        if self._pending is None:
            self._pending = self.fp.read(1)
        return self._pending

    def read(self, n: int = 1) -> bytes:
        if n <= 0:
            return b""
        chunks = []
        if self._pending is not None:
            if self._pending:
                chunks.append(self._pending)
                n -= 1
            self._pending = None
        while n > 0:
            chunk = self.fp.read(min(n, _READ_CHUNK))
            if not chunk:
                break
            chunks.append(chunk)
            n -= len(chunk)
        data = b"".join(chunks)
        self.pos += len(data)
        return data

    def at_end(self) -> bool:
        return self.peek() == b""


class BencodeDecoder:
    """
    Decodes Bencoded byte strings into Bencode types.

    A decoder reads exactly one value per decode() call and stops right after
    that value's closing byte.
    """
    def __init__(self, data: bytes = b"", offset: int = 0, max_depth: int = DEFAULT_MAX_DEPTH):
        self.src = _BufferSource(data, offset)
        self.max_depth = max_depth
        self._depth = 0

    @classmethod
    def from_stream(cls, fp: BinaryIO, max_depth: int = DEFAULT_MAX_DEPTH) -> "BencodeDecoder":
        decoder = cls(max_depth=max_depth)
        decoder.src = _StreamSource(fp)
        return decoder

    @property
    def position(self) -> int:
        return self.src.pos

    def decode(self) -> BencodeType:
        """Decodes the next value from the source."""
        self._depth = 0
        return self._parse_value()

    def at_end(self) -> bool:
        return self.src.at_end()

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _peek(self) -> bytes:
        ch = self.src.peek()
        if not ch:
            raise UnexpectedEndOfInput("Unexpected end of input", self.src.pos)
        return ch

    def _scan(self, allowed: bytes) -> Tuple[bytes, bytes]:
        """
        Consumes bytes while they are in `allowed`.
        Returns (consumed, stop_byte); stop_byte is b"" at end of input and is
        left unconsumed.
        """
        run = []
        while True:
            ch = self.src.peek()
            if not ch or ch not in allowed:
                return b"".join(run), ch
            run.append(self.src.read(1))

    def _enter(self):
        self._depth += 1
        if self._depth > self.max_depth:
            raise NestingTooDeep(f"Nesting deeper than {self.max_depth} levels", self.src.pos)

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self) -> BencodeType:
        ch = self._peek()

        if ch == b'i':
            return self._parse_int()

        if ch in _DIGITS:  # Bencode strings start with length, which is a digit
            return self._parse_string()

        if ch == b'l':
            return self._parse_list()

        if ch == b'd':
            return self._parse_dict()

        raise UnknownTag(ch, self.src.pos)

    def _parse_int(self) -> BencodeInt:
        """Parses an integer from the Bencoded data."""
        start = self.src.pos
        self.src.read(1)  # skip 'i'

        number_bytes, stop = self._scan(b"-" + _DIGITS)
        if not stop:
            raise UnterminatedValue("Integer is missing its 'e' terminator", start)
        if stop != b'e':
            raise MalformedInteger(f"Unexpected byte {stop!r} in integer", self.src.pos)
        if not _INT_RE.fullmatch(number_bytes) or number_bytes == b"-0":
            raise MalformedInteger(f"Invalid integer format {number_bytes!r}", start)

        if len(number_bytes.lstrip(b"-")) > _MAX_INT_DIGITS:
            raise IntegerOverflow(f"Integer with {len(number_bytes)} digits does not fit in 64 bits", start)

        num = int(number_bytes)
        if not INT64_MIN <= num <= INT64_MAX:
            raise IntegerOverflow(f"Integer {number_bytes.decode()} does not fit in 64 bits", start)

        self.src.read(1)  # skip 'e'
        return BencodeInt(num)

    def _parse_string(self) -> BencodeString:
        """Parses a byte string from the Bencoded data."""
        start = self.src.pos

        # read length until ':'
        length_bytes, stop = self._scan(_DIGITS)
        if not stop:
            raise UnterminatedValue("String length is missing its ':' separator", start)
        if stop != b':' or not _LENGTH_RE.fullmatch(length_bytes):
            raise MalformedLength(f"Invalid string length {length_bytes + stop!r}", start)

        if len(length_bytes) > _MAX_INT_DIGITS:
            raise MalformedLength(f"String length has {len(length_bytes)} digits", start)

        length = int(length_bytes)
        self.src.read(1)  # skip ':'

        string_bytes = self.src.read(length)
        if len(string_bytes) < length:
            raise TruncatedString(length, len(string_bytes), start)

        return BencodeString(string_bytes)

    def _parse_list(self) -> BencodeList:
        """Parses a list from the Bencoded data."""
        start = self.src.pos
        self.src.read(1)  # skip 'l'
        self._enter()
        items = []

        while True:
            ch = self.src.peek()
            if not ch:
                raise UnterminatedValue("List is missing its 'e' terminator", start)
            if ch == b'e':
                break
            items.append(self._parse_value())

        self.src.read(1)  # skip 'e'
        self._depth -= 1
        return BencodeList(items)

    def _parse_dict(self) -> BencodeDict:
        """Parses a dictionary from the Bencoded data."""
        start = self.src.pos
        self.src.read(1)  # skip 'd'
        self._enter()
        obj = {}

        while True:
            ch = self.src.peek()
            if not ch:
                raise UnterminatedValue("Dictionary is missing its 'e' terminator", start)
            if ch == b'e':
                break

            # keys MUST be strings
            if ch not in _DIGITS:
                if ch in b"ild":
                    raise InvalidKeyType(f"Dictionary key must be a byte string, found {ch!r}", self.src.pos)
                raise UnknownTag(ch, self.src.pos)

            key_pos = self.src.pos
            key = self._parse_string().value
            if key in obj:
                raise DuplicateKey(key, key_pos)

            ch = self.src.peek()
            if not ch:
                raise UnterminatedValue(f"Dictionary key {key!r} has no value", start)
            if ch == b'e':
                raise MissingValue(f"Dictionary key {key!r} has no value", self.src.pos)
            obj[key] = self._parse_value()

        self.src.read(1)  # skip 'e'
        self._depth -= 1
        return BencodeDict(obj)


# --------------------------
# Convenience functions
# --------------------------

def decode(data: bytes, allow_trailing: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> BencodeType:
    """
    Decodes a complete Bencoded document.

    Bytes after the first value raise TrailingData unless allow_trailing is set.
    """
    decoder = BencodeDecoder(data, max_depth=max_depth)
    result = decoder.decode()
    if not allow_trailing and not decoder.at_end():
        raise TrailingData("Unexpected data after top-level value", decoder.position)
    return result


def decode_prefix(data: bytes, offset: int = 0, max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[BencodeType, int]:
    """
    Decodes one value starting at `offset`.
    Returns (value, bytes_consumed); whatever follows the value is not inspected.
    """
    decoder = BencodeDecoder(data, offset=offset, max_depth=max_depth)
    result = decoder.decode()
    return result, decoder.position - offset


def decode_stream(fp: BinaryIO, max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[BencodeType, int]:
    """
    Decodes one value from a binary file object and leaves the stream
    positioned immediately after it.
    Returns (value, bytes_consumed).
    """
    decoder = BencodeDecoder.from_stream(fp, max_depth=max_depth)
    result = decoder.decode()
    return result, decoder.position


__all__ = [
    "BencodeDecoder",
    "BencodeDecodeError",
    "DEFAULT_MAX_DEPTH",
    "decode",
    "decode_prefix",
    "decode_stream",
]
