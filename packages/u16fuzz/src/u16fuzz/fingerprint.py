from __future__ import annotations
import hashlib

import numpy as np


def fingerprint(buf, seed: int = 0) -> int:
    """64-bit content hash of a symbol buffer (in-memory equality only, never stored)."""
    data = np.ascontiguousarray(buf).tobytes()
    h = hashlib.blake2b(data, digest_size=8, salt=(int(seed) & 0xFFFFFFFFFFFFFFFF).to_bytes(16, "little"))
    return int.from_bytes(h.digest(), "little")
