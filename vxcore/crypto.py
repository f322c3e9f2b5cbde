"""Hash-chain stepping and commitment verification."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Iterator

from .epoch import HashingConvention

if TYPE_CHECKING:
    from .epoch import Epoch


def next_hash(game_hash: bytes, convention: HashingConvention) -> bytes:
    """Derive the hash of the previous game from the hash of this one.

    The two conventions are not bit-compatible: ``BINARY`` hashes the raw
    32-byte digest, ``HEX_TEXT`` hashes its lowercase hex encoding.
    """
    if convention is HashingConvention.BINARY:
        return hashlib.sha256(game_hash).digest()
    return hashlib.sha256(game_hash.hex().encode("ascii")).digest()


def walk_chain(
    start_hash: bytes,
    start_index: int,
    epoch: "Epoch",
    max_steps: int | None = None,
) -> Iterator[tuple[int, bytes]]:
    """Lazily yield ``(index, hash)`` from ``start_index`` down the chain.

    Stops at ``max(start_index - max_steps + 1, epoch.boundary)``, or at the
    boundary when ``max_steps`` is None. Only the current hash is held, and
    a hash is computed only when the next pair is requested.
    """
    if max_steps is None:
        stop = epoch.boundary
    else:
        if max_steps <= 0:
            return
        stop = max(start_index - max_steps + 1, epoch.boundary)

    current = start_hash
    index = start_index
    while index >= stop:
        yield index, current
        if index == stop:
            return
        current = next_hash(current, epoch.convention)
        index -= 1


def terminating_hash(start_hash: bytes, start_index: int, epoch: "Epoch") -> bytes | None:
    """Walk to the epoch boundary and return the hash found there.

    Returns None when ``start_index`` lies below the boundary.
    """
    last = None
    for _, game_hash in walk_chain(start_hash, start_index, epoch):
        last = game_hash
    return last


def verify_commitment(
    start_hash: bytes, start_index: int, epoch: "Epoch"
) -> tuple[bool, str | None]:
    """Check that a walk from ``start_hash`` reproduces the epoch commitment.

    Returns (True, terminus_hex) on a match, or (False, terminus_hex) when the
    walk ends somewhere else. The terminus is None for an empty walk.
    """
    terminus = terminating_hash(start_hash, start_index, epoch)
    if terminus is None:
        return False, None
    terminus_hex = terminus.hex()
    return terminus_hex == epoch.commitment.lower(), terminus_hex
