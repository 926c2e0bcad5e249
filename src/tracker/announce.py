"""
Builds HTTP tracker announce URLs and keeps the transfer counters a
tracker expects (uploaded, downloaded, left, event).
"""
import logging
import os
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6881
PEER_ID_LEN = 20
PEER_ID_PREFIX = b"-BC0001-"


class AnnounceEvent(str, Enum):
    """Values of the `event` announce parameter. NONE means a regular update."""
    STARTED = "started"
    COMPLETED = "completed"
    STOPPED = "stopped"
    NONE = ""


def generate_peer_id(prefix: bytes = PEER_ID_PREFIX) -> bytes:
    """Azureus-style peer id: client prefix followed by random bytes."""
    return prefix + os.urandom(PEER_ID_LEN - len(prefix))


def pct_encode(b: bytes) -> str:
    # Correct percent-encoding for trackers: %HH per byte
    return ''.join(f'%{byte:02X}' for byte in b)


class Announcer:
    def __init__(self, torrent_meta, peer_id: Optional[bytes] = None, port: int = DEFAULT_PORT):
        self.meta = torrent_meta
        self.peer_id = peer_id if peer_id is not None else generate_peer_id()  # MUST be 20 bytes
        self.port = port

        if len(self.peer_id) != PEER_ID_LEN:
            raise ValueError(f"peer_id must be {PEER_ID_LEN} bytes, got {len(self.peer_id)}")
        if not self.meta.announce:
            raise ValueError("No announce URL provided for Announcer")

        self.total_length = torrent_meta.total_length
        self.uploaded = 0
        self.downloaded = 0
        self.left = self.total_length
        self.compact = 1
        self.event = AnnounceEvent.STARTED

    def params(self) -> dict:
        """Announce parameters in the order trackers conventionally receive them."""
        params = {
            "info_hash": self.meta.info_hash,
            "peer_id": self.peer_id,
            "port": self.port,
            "uploaded": self.uploaded,
            "downloaded": self.downloaded,
            "left": self.left,
            "compact": self.compact,
        }
        if self.event.value:
            params["event"] = self.event.value
        return params

    def build_url(self, url: Optional[str] = None) -> str:
        """Full announce URL for `url` (defaults to the torrent's primary tracker)."""
        base = url if url else self.meta.announce

        # URL-encode binary fields
        encoded = {}
        for k, v in self.params().items():
            if isinstance(v, bytes):
                encoded[k] = pct_encode(v)
            else:
                encoded[k] = str(v)

        query = "&".join(f"{k}={v}" for k, v in encoded.items())
        sep = "&" if "?" in base else "?"
        full_url = f"{base}{sep}{query}"
        logger.debug("Announce URL: %s", full_url)
        return full_url

    # --------------------------
    # Counter bookkeeping
    # --------------------------

    def record_download(self, nbytes: int):
        """Called whenever a piece has been received."""
        if nbytes < 0:
            raise ValueError("Downloaded byte count cannot be negative")
        self.downloaded += nbytes
        self.left = max(self.total_length - self.downloaded, 0)

    def record_upload(self, nbytes: Optional[int] = None):
        """Called whenever a piece has been seeded; defaults to one full piece."""
        if nbytes is None:
            nbytes = self.meta.piece_length
        if nbytes < 0:
            raise ValueError("Uploaded byte count cannot be negative")
        self.uploaded += nbytes

    def set_event(self, event: Union[AnnounceEvent, str]):
        try:
            self.event = AnnounceEvent(event)
        except ValueError:
            logger.warning("Unknown announce event %r, clearing event", event)
            self.event = AnnounceEvent.NONE
