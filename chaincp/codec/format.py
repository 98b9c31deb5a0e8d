"""
Binary layout of the checkpoints file.

    offset  size     field
    0       13       magic "CHECKPOINTS 1"
    13      4        signature count S (uint32 BE), 0 until signed
    17      S*65     signature blobs
    ..      4        record count N (uint32 BE)    <- digest starts
    ..      N*44     records                        <- digest ends at EOF

Record: height (uint32 BE), hash (32 raw bytes), timestamp (uint64 BE).
"""

import struct

from ..core.header import BlockHeaderMeta

MAGIC = b"CHECKPOINTS 1"
MAX_SIGNATURES = 255
SIGNATURE_SIZE = 65

COUNT = struct.Struct(">I")
RECORD = struct.Struct(">I32sQ")
RECORD_SIZE = RECORD.size

SIGNATURE_COUNT_OFFSET = len(MAGIC)
SIGNATURES_OFFSET = SIGNATURE_COUNT_OFFSET + COUNT.size


def pack_record(header: BlockHeaderMeta) -> bytes:
    return RECORD.pack(header.height, header.hash, header.timestamp)


def unpack_record(buf: bytes) -> BlockHeaderMeta:
    height, block_hash, timestamp = RECORD.unpack(buf)
    return BlockHeaderMeta(height=height, hash=block_hash, timestamp=timestamp)
