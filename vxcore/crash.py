"""Crash point formula.

The engine treats this as a pluggable ``(seed, game_hash) -> float``
collaborator; this module supplies the published default.
"""

from __future__ import annotations

import hashlib
import hmac
import math

N_BITS = 52


def crash_point(seed: bytes, game_hash: bytes) -> float:
    """Compute a game's crash multiplier from its seed and hash.

    HMAC-SHA256 keyed by ``seed`` over ``game_hash``; the top 52 bits give a
    uniform X in [0, 1), and the result is ``floor(99 / (1 - X)) / 100``,
    never below 1.00.
    """
    digest = hmac.new(seed, game_hash, hashlib.sha256).hexdigest()
    r = int(digest[: N_BITS // 4], 16)
    x = r / 2**N_BITS
    result = math.floor(99 / (1 - x))
    return max(1.0, result / 100)
