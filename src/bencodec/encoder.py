"""
Bencode encoder for BitTorrent metainfo and tracker responses.

Output is canonical: dictionary keys are always written in ascending byte
order, whatever order the dictionary was built in.
"""
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, from_python


def encode(obj) -> bytes:
    """Encodes a Python object or BencodeType into bencoded bytes."""
    return b"".join(_encode_parts(from_python(obj)))


def _encode_parts(node):
    if isinstance(node, BencodeInt):
        yield encode_int(node.value)

    elif isinstance(node, BencodeString):
        yield encode_bytes(node.value)

    elif isinstance(node, BencodeList):
        yield b"l"
        for item in node:
            yield from _encode_parts(item)
        yield b"e"

    elif isinstance(node, BencodeDict):
        yield b"d"
        for key in sorted(node.keys()):
            yield encode_bytes(key)
            yield from _encode_parts(node[key])
        yield b"e"

    else:
        raise TypeError(f"Cannot bencode object of type {type(node)}")


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    return b"i%de" % n


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return b"%d:" % len(b) + b

