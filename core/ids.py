"""
core/ids.py -- Document identifier generation.

Every stored record and every nested entry (experience, education, like,
comment) gets a 24-character hex id: a 4-byte big-endian creation timestamp
followed by 8 random bytes. Ids sort roughly by creation time and are
indistinguishable in shape from document-database object ids, which keeps the
JSON contract stable for existing clients.
"""

import secrets
import time


def new_id() -> str:
    """Return a fresh 24-character lowercase hex identifier."""
    return int(time.time()).to_bytes(4, "big").hex() + secrets.token_hex(8)
