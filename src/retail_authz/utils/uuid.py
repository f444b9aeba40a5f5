"""UUID helpers for retail-authz."""

import os
import time
import uuid


def generate_uuid_v7() -> str:
    """
    Generate a time-ordered UUIDv7.

    Audit rows are appended in time order, so ids that sort by creation time
    keep the audit index compact.

    Returns:
        String representation of UUIDv7
    """
    timestamp_ms = int(time.time() * 1000) & ((1 << 48) - 1)
    rand = int.from_bytes(os.urandom(10), byteorder='big')

    value = timestamp_ms << 80
    value |= 0x7 << 76                          # version
    value |= ((rand >> 68) & 0xFFF) << 64       # rand_a, 12 bits
    value |= 0b10 << 62                         # variant
    value |= rand & ((1 << 62) - 1)             # rand_b, 62 bits
    return str(uuid.UUID(int=value))
