from shortie.snapshot.codec import encode_snapshot, decode_snapshot, dumps_snapshot, loads_snapshot
from shortie.snapshot.storage import read_snapshot, write_snapshot


__all__ = [
    'encode_snapshot',
    'decode_snapshot',
    'dumps_snapshot',
    'loads_snapshot',
    'read_snapshot',
    'write_snapshot',
]
