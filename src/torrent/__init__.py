"""
Torrent metainfo: typed view of a decoded .torrent document.
"""
from .errors import *
from .errors import __all__ as _error_names
from .loader import load_torrent, parse_torrent
from .metainfo import TorrentFile, TorrentInfo, TorrentMeta
from .projector import project, project_info

__all__ = [
    'project', 'project_info', 'parse_torrent', 'load_torrent',
    'TorrentMeta', 'TorrentInfo', 'TorrentFile',
] + _error_names
