"""
Reads .torrent files and turns them into TorrentMeta objects.
"""
import logging
from pathlib import Path

from bencodec import decode

from .metainfo import TorrentMeta
from .projector import project

logger = logging.getLogger(__name__)


def parse_torrent(raw: bytes) -> TorrentMeta:
    """Decodes and projects a complete .torrent document."""
    meta = project(decode(raw))

    if meta.info.is_multi_file:
        logger.info(
            "Parsed multi-file torrent: %s (%d files, %d bytes)",
            meta.name, len(meta.info.files), meta.total_length,
        )
    else:
        logger.info("Parsed single-file torrent: %s (%d bytes)", meta.name, meta.total_length)
    logger.debug("Info hash: %s", meta.info_hash.hex())
    return meta


def load_torrent(path) -> TorrentMeta:
    path = Path(path)
    logger.info("Parsing torrent file: %s", path)
    return parse_torrent(path.read_bytes())
