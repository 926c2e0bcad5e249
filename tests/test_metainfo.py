import hashlib

import pytest

from bencodec import decode, encode, from_python
from torrent import (
    ConflictingLengthAndFiles,
    FieldWrongType,
    InvalidFieldValue,
    InvalidPathSegment,
    MissingLengthOrFiles,
    MissingRequiredField,
    TopLevelNotDictionary,
    load_torrent,
    parse_torrent,
    project,
)

PIECES = hashlib.sha1(b"piece0").digest() + hashlib.sha1(b"piece1").digest()


def make_torrent(info_overrides=None, drop=(), info_drop=(), **overrides):
    """Builds a valid single-file torrent document as plain Python values."""
    info = {
        b"piece length": 16384,
        b"pieces": PIECES,
        b"name": b"sample.iso",
        b"length": 20000,
    }
    info.update(info_overrides or {})
    for key in info_drop:
        info.pop(key, None)

    doc = {
        b"announce": b"http://tracker.example/announce",
        b"info": info,
    }
    for key, value in overrides.items():
        key = "announce-list" if key == "announce_list" else key.replace("_", " ")
        doc[key.encode()] = value
    for key in drop:
        doc.pop(key, None)
    return doc


def project_doc(doc):
    return project(decode(encode(doc)))


def test_single_file_torrent():
    meta = project_doc(make_torrent(comment=b"hello", created_by=b"mktorrent 1.1", creation_date=1700000000))
    print("Parsed TorrentMeta:", meta)

    assert meta.announce == "http://tracker.example/announce"
    assert meta.comment == "hello"
    assert meta.created_by == "mktorrent 1.1"
    assert meta.creation_date == 1700000000
    assert meta.created_at.year == 2023
    assert meta.announce_list is None

    info = meta.info
    assert info.piece_length == 16384
    assert info.name == "sample.iso"
    assert info.length == 20000
    assert info.files is None
    assert not info.is_multi_file
    assert info.private is False
    assert info.num_pieces == 2
    assert info.piece_hashes == [PIECES[:20], PIECES[20:]]
    assert info.last_piece_length == 20000 - 16384
    assert meta.total_length == 20000
    assert [f.relative_path for f in info.file_entries()] == ["sample.iso"]


def test_multi_file_torrent():
    doc = make_torrent(
        info_overrides={
            b"files": [
                {b"length": 10, b"path": [b"docs", b"readme.txt"]},
                {b"length": 32, b"path": [b"data.bin"]},
            ],
            b"private": 1,
        },
        info_drop=[b"length"],
    )
    meta = project_doc(doc)

    assert meta.info.is_multi_file
    assert meta.info.private is True
    assert meta.total_length == 42
    assert [f.path for f in meta.info.files] == [("docs", "readme.txt"), ("data.bin",)]
    assert meta.info.files[0].relative_path == "docs/readme.txt"
    assert [f.relative_path for f in meta.info.file_entries()] == [
        "sample.iso/docs/readme.txt",
        "sample.iso/data.bin",
    ]


def test_announce_list_and_trackers():
    doc = make_torrent(announce_list=[
        [b"http://tracker.example/announce", b"http://backup.example/announce"],
        [b"udp://tracker.example:80"],
    ])
    meta = project_doc(doc)

    assert meta.announce_list == (
        ("http://tracker.example/announce", "http://backup.example/announce"),
        ("udp://tracker.example:80",),
    )
    assert meta.trackers == [
        "http://tracker.example/announce",
        "http://backup.example/announce",
        "udp://tracker.example:80",
    ]


def test_info_hash_uses_canonical_info_bytes():
    doc = make_torrent()
    meta = project_doc(doc)
    expected = encode(doc[b"info"])
    assert meta.info_bytes == expected
    assert meta.info_hash == hashlib.sha1(expected).digest()


def test_info_hash_stable_under_key_order():
    # same info dictionary written with unsorted keys
    raw = (
        b"d8:announce3:url4:info"
        b"d4:name1:x6:lengthi1e12:piece lengthi1e6:pieces20:" + b"a" * 20 + b"ee"
    )
    meta = parse_torrent(raw)
    canonical = encode({b"length": 1, b"name": b"x", b"piece length": 1, b"pieces": b"a" * 20})
    assert meta.info_bytes == canonical
    assert meta.info_hash == hashlib.sha1(canonical).digest()


def test_top_level_not_dictionary():
    with pytest.raises(TopLevelNotDictionary):
        project(decode(b"l4:spame"))


def test_missing_announce_vs_wrong_type():
    with pytest.raises(MissingRequiredField) as missing:
        project_doc(make_torrent(drop=[b"announce"]))
    assert missing.value.field == "announce"

    with pytest.raises(FieldWrongType) as wrong:
        project_doc(make_torrent(announce=42))
    assert wrong.value.field == "announce"


def test_missing_info():
    with pytest.raises(MissingRequiredField) as exc_info:
        project_doc(make_torrent(drop=[b"info"]))
    assert exc_info.value.field == "info"
    assert exc_info.value.context == []


def test_info_not_a_dictionary():
    with pytest.raises(FieldWrongType) as exc_info:
        project_doc(make_torrent(info=b"nope"))
    assert exc_info.value.field == "info"


def test_conflicting_length_and_files():
    doc = make_torrent(info_overrides={b"files": [{b"length": 1, b"path": [b"a"]}]})
    with pytest.raises(ConflictingLengthAndFiles) as exc_info:
        project_doc(doc)
    assert exc_info.value.context == ["info"]
    assert str(exc_info.value).startswith("error parsing 'info': ")


def test_missing_length_and_files():
    with pytest.raises(MissingLengthOrFiles):
        project_doc(make_torrent(info_drop=[b"length"]))


def test_required_info_fields_checked_before_length_files():
    doc = make_torrent(info_drop=[b"length", b"name"])
    with pytest.raises(MissingRequiredField) as exc_info:
        project_doc(doc)
    assert exc_info.value.field == "name"
    assert str(exc_info.value) == "error parsing 'info': missing required field 'name'"


@pytest.mark.parametrize("key, value", [
    (b"piece length", b"big"),
    (b"pieces", 5),
    (b"name", [b"x"]),
    (b"private", b"yes"),
    (b"length", b"20000"),
])
def test_info_field_wrong_type(key, value):
    with pytest.raises(FieldWrongType) as exc_info:
        project_doc(make_torrent(info_overrides={key: value}))
    assert exc_info.value.field == key.decode()
    assert exc_info.value.context == ["info"]


def test_invalid_values():
    with pytest.raises(InvalidFieldValue) as exc_info:
        project_doc(make_torrent(info_overrides={b"piece length": 0}))
    assert exc_info.value.field == "piece length"

    with pytest.raises(InvalidFieldValue) as exc_info:
        project_doc(make_torrent(info_overrides={b"pieces": b"x" * 21}))
    assert exc_info.value.field == "pieces"


def test_optional_fields_wrong_type():
    with pytest.raises(FieldWrongType) as exc_info:
        project_doc(make_torrent(creation_date=b"yesterday"))
    assert exc_info.value.field == "creation date"

    with pytest.raises(FieldWrongType) as exc_info:
        project_doc(make_torrent(comment=7))
    assert exc_info.value.field == "comment"

    with pytest.raises(FieldWrongType) as exc_info:
        project_doc(make_torrent(announce_list=[b"http://not-a-tier"]))
    assert exc_info.value.field == "announce-list"


def test_non_utf8_text_is_wrong_type():
    with pytest.raises(FieldWrongType):
        project_doc(make_torrent(created_by=b"\xff\xfe"))


@pytest.mark.parametrize("path", [[], [b""], [b".."], [b"a/b"], [b"ok", 3], [b"\xff"]])
def test_invalid_path_segments(path):
    doc = make_torrent(info_overrides={b"files": [{b"length": 1, b"path": path}]}, info_drop=[b"length"])
    with pytest.raises(InvalidPathSegment) as exc_info:
        project_doc(doc)
    assert exc_info.value.context == ["info", "files[0]"]


def test_file_entry_errors_carry_index():
    doc = make_torrent(
        info_overrides={b"files": [{b"length": 1, b"path": [b"a"]}, {b"path": [b"b"]}]},
        info_drop=[b"length"],
    )
    with pytest.raises(MissingRequiredField) as exc_info:
        project_doc(doc)
    assert exc_info.value.field == "length"
    assert str(exc_info.value) == (
        "error parsing 'info': error parsing 'files[1]': missing required field 'length'"
    )


def test_metadata_is_immutable():
    meta = project_doc(make_torrent())
    with pytest.raises(AttributeError):
        meta.announce = "http://elsewhere"
    with pytest.raises(AttributeError):
        meta.info.length = 1


def test_load_torrent(tmp_path):
    path = tmp_path / "sample.torrent"
    path.write_bytes(encode(from_python(make_torrent())))
    print("Loading torrent:", path)

    meta = load_torrent(path)

    assert meta.piece_length > 0
    assert len(meta.info.piece_hashes) > 0
    assert meta.total_length > 0
    assert meta.announce is not None
    print("Info hash:", meta.info_hash.hex())


def test_unrepresentable_creation_date():
    meta = project_doc(make_torrent(creation_date=2 ** 62))
    assert meta.creation_date == 2 ** 62
    assert meta.created_at is None


def test_empty_content_has_no_last_piece():
    meta = project_doc(make_torrent(info_overrides={b"length": 0, b"pieces": b""}))
    assert meta.total_length == 0
    assert meta.info.num_pieces == 0
    assert meta.info.last_piece_length == 0
