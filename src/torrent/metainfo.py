"""
Typed torrent metadata built from a decoded .torrent document.
"""
import datetime as dt
import hashlib
from dataclasses import dataclass
from typing import List, Optional, Tuple

PIECE_HASH_LEN = 20


@dataclass(frozen=True)
class TorrentFile:
    """One entry of a multi-file torrent's `files` list."""
    length: int
    path: Tuple[str, ...]

    @property
    def relative_path(self) -> str:
        return "/".join(self.path)


@dataclass(frozen=True)
class TorrentInfo:
    """
    The `info` dictionary. Exactly one of `length` (single file) and
    `files` (multi-file) is set.
    """
    piece_length: int
    pieces: bytes
    name: str
    private: bool = False
    length: Optional[int] = None
    files: Optional[Tuple[TorrentFile, ...]] = None

    @property
    def is_multi_file(self) -> bool:
        return self.files is not None

    @property
    def total_length(self) -> int:
        if self.files is not None:
            return sum(f.length for f in self.files)
        return self.length

    @property
    def piece_hashes(self) -> List[bytes]:
        return [self.pieces[i:i+PIECE_HASH_LEN] for i in range(0, len(self.pieces), PIECE_HASH_LEN)]

    @property
    def num_pieces(self) -> int:
        return len(self.pieces) // PIECE_HASH_LEN

    @property
    def last_piece_length(self) -> int:
        if not self.total_length:
            return 0
        return (self.total_length % self.piece_length) or self.piece_length

    def file_entries(self) -> List[TorrentFile]:
        """Files as laid out on disk; a single-file torrent yields one entry named after the torrent."""
        if self.files is not None:
            return [TorrentFile(f.length, (self.name,) + f.path) for f in self.files]
        return [TorrentFile(self.length, (self.name,))]


@dataclass(frozen=True)
class TorrentMeta:
    announce: str
    info: TorrentInfo
    # canonical bencoding of the info dictionary, the input of the info hash
    info_bytes: bytes
    announce_list: Optional[Tuple[Tuple[str, ...], ...]] = None
    creation_date: Optional[int] = None
    comment: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def info_hash(self) -> bytes:
        return hashlib.sha1(self.info_bytes).digest()

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def piece_length(self) -> int:
        return self.info.piece_length

    @property
    def total_length(self) -> int:
        return self.info.total_length

    @property
    def created_at(self) -> Optional[dt.datetime]:
        if self.creation_date is None:
            return None
        try:
            return dt.datetime.fromtimestamp(self.creation_date, tz=dt.timezone.utc)
        except (OverflowError, OSError, ValueError):
            # not representable as a datetime on this platform
            return None

    @property
    def trackers(self) -> List[str]:
        """Every announce URL, primary first, without duplicates."""
        urls = [self.announce]
        for tier in self.announce_list or ():
            urls.extend(tier)
        return list(dict.fromkeys(urls))

    def __repr__(self):
        files = len(self.info.files) if self.info.is_multi_file else 1
        return (
            f"TorrentMeta(name={self.name!r}, files={files}, pieces={self.info.num_pieces}, "
            f"multi={self.info.is_multi_file}, announce={self.announce!r})"
        )
