"""
Projects a decoded Bencode tree onto the typed metainfo structures.

A field that is absent raises MissingRequiredField; a field that is present
with the wrong shape raises FieldWrongType. Errors found inside `info` or a
`files` entry keep their class and record the enclosing field in `context`.
"""
from bencodec import BencodeDict, BencodeInt, BencodeList, BencodeString, encode

from .errors import (
    ConflictingLengthAndFiles,
    FieldWrongType,
    InvalidFieldValue,
    InvalidPathSegment,
    MetainfoError,
    MissingLengthOrFiles,
    MissingRequiredField,
    TopLevelNotDictionary,
)
from .metainfo import PIECE_HASH_LEN, TorrentFile, TorrentInfo, TorrentMeta

_KIND_NAMES = {
    BencodeInt: "an integer",
    BencodeString: "a byte string",
    BencodeList: "a list",
    BencodeDict: "a dictionary",
}


# --------------------------
# Field extraction helpers
# --------------------------

def _field(d: BencodeDict, key: bytes, kind, required: bool = False):
    name = key.decode()
    node = d.get(key)
    if node is None:
        if required:
            raise MissingRequiredField(name)
        return None
    if not isinstance(node, kind):
        raise FieldWrongType(name, _KIND_NAMES[kind])
    return node


def _text(d: BencodeDict, key: bytes, required: bool = False):
    node = _field(d, key, BencodeString, required)
    if node is None:
        return None
    try:
        return node.value.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FieldWrongType(key.decode(), "UTF-8 text") from exc


def _integer(d: BencodeDict, key: bytes, required: bool = False, minimum: int = None):
    node = _field(d, key, BencodeInt, required)
    if node is None:
        return None
    if minimum is not None and node.value < minimum:
        raise InvalidFieldValue(key.decode(), f"must be at least {minimum}, got {node.value}")
    return node.value


# --------------------------
# Projection
# --------------------------

def project(value) -> TorrentMeta:
    """Validates a decoded document and converts it into a TorrentMeta."""
    if not isinstance(value, BencodeDict):
        raise TopLevelNotDictionary(_KIND_NAMES.get(type(value), type(value).__name__))

    announce = _text(value, b"announce", required=True)
    announce_list = _project_announce_list(value)
    creation_date = _integer(value, b"creation date")
    comment = _text(value, b"comment")
    created_by = _text(value, b"created by")

    info_node = _field(value, b"info", BencodeDict, required=True)
    try:
        info = project_info(info_node)
    except MetainfoError as exc:
        exc.within("info")
        raise

    return TorrentMeta(
        announce=announce,
        info=info,
        info_bytes=encode(info_node),
        announce_list=announce_list,
        creation_date=creation_date,
        comment=comment,
        created_by=created_by,
    )


def _project_announce_list(value: BencodeDict):
    node = _field(value, b"announce-list", BencodeList)
    if node is None:
        return None

    tiers = []
    for tier in node:
        if not isinstance(tier, BencodeList):
            raise FieldWrongType("announce-list", "a list of tiers")
        urls = []
        for url in tier:
            if not isinstance(url, BencodeString):
                raise FieldWrongType("announce-list", "a list of URL strings")
            try:
                urls.append(url.value.decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise FieldWrongType("announce-list", "a list of UTF-8 URLs") from exc
        tiers.append(tuple(urls))
    return tuple(tiers)


def project_info(info: BencodeDict) -> TorrentInfo:
    """Projects the `info` dictionary. Required scalars are checked before length/files."""
    piece_length = _integer(info, b"piece length", required=True, minimum=1)

    pieces = _field(info, b"pieces", BencodeString, required=True).value
    if len(pieces) % PIECE_HASH_LEN:
        raise InvalidFieldValue("pieces", f"length {len(pieces)} is not a multiple of {PIECE_HASH_LEN}")

    name = _text(info, b"name", required=True)
    private = _integer(info, b"private")

    has_length = b"length" in info
    has_files = b"files" in info
    if has_length and has_files:
        raise ConflictingLengthAndFiles()
    if not has_length and not has_files:
        raise MissingLengthOrFiles()

    length = None
    files = None
    if has_length:
        length = _integer(info, b"length", required=True, minimum=0)
    else:
        files = _project_files(_field(info, b"files", BencodeList, required=True))

    return TorrentInfo(
        piece_length=piece_length,
        pieces=pieces,
        name=name,
        private=bool(private),
        length=length,
        files=files,
    )


def _project_files(node: BencodeList):
    if not len(node):
        raise InvalidFieldValue("files", "is empty")

    files = []
    for index, entry in enumerate(node):
        if not isinstance(entry, BencodeDict):
            raise FieldWrongType("files", "a list of dictionaries")
        try:
            files.append(_project_file(entry))
        except MetainfoError as exc:
            exc.within(f"files[{index}]")
            raise
    return tuple(files)


def _project_file(entry: BencodeDict) -> TorrentFile:
    length = _integer(entry, b"length", required=True, minimum=0)
    path_node = _field(entry, b"path", BencodeList, required=True)
    if not len(path_node):
        raise InvalidPathSegment("path has no segments")

    segments = []
    for seg in path_node:
        if not isinstance(seg, BencodeString):
            raise InvalidPathSegment(f"segment is {_KIND_NAMES[type(seg)]}, not a byte string")
        try:
            text = seg.value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidPathSegment(f"{seg.value!r} is not UTF-8") from exc
        if text in ("", ".", "..") or "/" in text or "\x00" in text:
            raise InvalidPathSegment(f"{text!r} is not a valid file name")
        segments.append(text)

    return TorrentFile(length=length, path=tuple(segments))
