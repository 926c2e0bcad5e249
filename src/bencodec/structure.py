"""
Data structures for representing Bencoded types.

Every decoded document is a tree of exactly four node types. Nodes are
immutable once built and compare by content, so a decoded tree can be
compared against one assembled by hand.
"""
from types import MappingProxyType

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "from_python",
    "INT64_MIN",
    "INT64_MAX",
]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("_value",)

    @property
    def value(self):
        return self._value

    def __setattr__(self, name, value):
        if name != "_value" or hasattr(self, "_value"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def to_python(self):
        """Unwraps the node (recursively) into plain Python values."""
        return self._value


class BencodeInt(BencodeType):
    """Represents a Bencoded integer (signed 64-bit)."""
    __slots__ = ()

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("BencodeInt requires an integer.")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"BencodeInt out of 64-bit range: {value}")
        self._value = value

    def __repr__(self):
        return f"BencodeInt({self._value})"


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ()

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        self._value = bytes(value)

    def __len__(self):
        return len(self._value)

    def __repr__(self):
        return f"BencodeString({self._value!r})"


class BencodeList(BencodeType):
    """Represents a Bencoded list. Items are kept in a tuple."""
    __slots__ = ()

    def __init__(self, value):
        if not isinstance(value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        for item in value:
            if not isinstance(item, BencodeType):
                raise TypeError(f"BencodeList items must be Bencode types, got {type(item)}")
        self._value = tuple(value)

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def __getitem__(self, index):
        return self._value[index]

    def to_python(self) -> list:
        return [item.to_python() for item in self._value]

    def __repr__(self):
        return f"BencodeList({list(self._value)!r})"


class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary.

    Insertion order is preserved for iteration; it is not the order used when
    encoding (the encoder always sorts keys). `value` is a read-only view.
    """
    __slots__ = ()

    def __init__(self, value: dict):
        if not isinstance(value, dict):
            raise TypeError("BencodeDict requires a dict.")
        # keys must be bytes (bencode requirement)
        for k, v in value.items():
            if not isinstance(k, (bytes, bytearray)):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError(f"BencodeDict values must be Bencode types, got {type(v)}")
        self._value = MappingProxyType({bytes(k): v for k, v in value.items()})

    def __eq__(self, other):
        if not isinstance(other, BencodeDict):
            return NotImplemented
        return dict(self._value) == dict(other._value)

    def __hash__(self):
        return hash(("BencodeDict", frozenset(self._value.items())))

    def __len__(self):
        return len(self._value)

    def __contains__(self, key):
        return key in self._value

    def __getitem__(self, key):
        return self._value[key]

    def get(self, key, default=None):
        return self._value.get(key, default)

    def keys(self):
        return self._value.keys()

    def items(self):
        return self._value.items()

    def to_python(self) -> dict:
        return {k: v.to_python() for k, v in self._value.items()}

    def __repr__(self):
        return f"BencodeDict({dict(self._value)!r})"


def from_python(obj) -> BencodeType:
    """
    Wraps plain Python values into Bencode types.
    str is stored as its UTF-8 bytes; dict keys may be bytes or str.
    """
    if isinstance(obj, BencodeType):
        return obj

    if isinstance(obj, bool):
        raise TypeError("Cannot bencode a bool")

    if isinstance(obj, int):
        return BencodeInt(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BencodeString(obj)

    if isinstance(obj, str):
        return BencodeString(obj.encode())

    if isinstance(obj, (list, tuple)):
        return BencodeList([from_python(x) for x in obj])

    if isinstance(obj, dict):
        items = {}
        for key, val in obj.items():
            key_bytes = key.encode() if isinstance(key, str) else key
            if not isinstance(key_bytes, (bytes, bytearray)):
                raise TypeError(f"Dictionary keys must be bytes or str, got {type(key)}")
            key_bytes = bytes(key_bytes)
            if key_bytes in items:
                raise ValueError(f"Duplicate dictionary key after encoding: {key_bytes!r}")
            items[key_bytes] = from_python(val)
        return BencodeDict(items)

    raise TypeError(f"Cannot bencode object of type {type(obj)}")
