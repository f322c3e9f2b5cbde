"""Chain epochs and the selector that maps a game number onto one."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import VerifierConfig


class HashingConvention(enum.Enum):
    """How the hash for game ``i - 1`` is derived from the hash for game ``i``."""

    BINARY = "binary"  # sha256(digest)
    HEX_TEXT = "hex_text"  # sha256(hexdigest.encode("ascii"))


class SeedSource(enum.Enum):
    """Where the per-game crash seed comes from."""

    STATIC = "static"
    ORACLE = "oracle"


@dataclass(frozen=True)
class Epoch:
    """One hash-chain regime.

    ``boundary`` is the lowest game index in the epoch; the hash at that
    index is the published ``commitment``.
    """

    name: str
    boundary: int
    convention: HashingConvention
    seed_source: SeedSource
    commitment: str
    static_seed: str

    @property
    def uses_oracle(self) -> bool:
        return self.seed_source is SeedSource.ORACLE


class ChainSelector:
    """Decide which epoch governs a game number.

    Indices strictly below ``config.epoch_boundary`` are legacy games;
    the boundary itself and everything above it belong to the current epoch.
    """

    def __init__(self, config: "VerifierConfig | None" = None) -> None:
        if config is None:
            from .config import VerifierConfig

            config = VerifierConfig()
        self.config = config
        self.current = config.current_epoch()
        self.legacy = config.legacy_epoch()

    def select(self, game_number: int) -> Epoch:
        if game_number < self.config.epoch_boundary:
            return self.legacy
        return self.current


def select_epoch(game_number: int, config: "VerifierConfig | None" = None) -> Epoch:
    """Shorthand for ``ChainSelector(config).select(game_number)``."""
    return ChainSelector(config).select(game_number)
