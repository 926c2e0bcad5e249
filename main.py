import argparse
import logging
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), 'src'))

from bencodec import BencodeDecodeError
from torrent import MetainfoError, load_torrent
from tracker import DEFAULT_PORT, Announcer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect a .torrent file")
    parser.add_argument("torrent", help="path to the .torrent file")
    parser.add_argument("--announce", action="store_true", help="print the tracker announce URL")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to advertise to the tracker")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        meta = load_torrent(args.torrent)
    except (OSError, BencodeDecodeError, MetainfoError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print("name:", meta.name)
    print("trackers:", ", ".join(meta.trackers))
    print("info_hash:", meta.info_hash.hex())
    print(f"pieces: {meta.info.num_pieces} x {meta.piece_length} bytes (last {meta.info.last_piece_length})")
    print("total length:", meta.total_length)
    if meta.created_at:
        print("created:", meta.created_at.isoformat())
    if meta.comment:
        print("comment:", meta.comment)
    for f in meta.info.file_entries():
        print(f"  {f.relative_path} ({f.length} bytes)")

    if args.announce:
        print("announce URL:", Announcer(meta, port=args.port).build_url())
    return 0


if __name__ == "__main__":
    sys.exit(main())
