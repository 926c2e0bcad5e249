"""
Bencode package for encoding and decoding BitTorrent data.
"""
from .decoder import BencodeDecoder, decode, decode_prefix, decode_stream
from .encoder import encode
from .errors import *
from .errors import __all__ as _error_names
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, from_python

__all__ = [
    'decode', 'decode_prefix', 'decode_stream', 'encode', 'from_python', 'BencodeDecoder',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
] + _error_names
