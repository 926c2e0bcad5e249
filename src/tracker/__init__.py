"""
Tracker package: announce URL construction and transfer bookkeeping.
"""
from .announce import DEFAULT_PORT, AnnounceEvent, Announcer, generate_peer_id

__all__ = ['Announcer', 'AnnounceEvent', 'generate_peer_id', 'DEFAULT_PORT']
