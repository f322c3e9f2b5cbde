"""Immutable verifier configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from . import constants
from .epoch import Epoch, HashingConvention, SeedSource


@dataclass(frozen=True)
class VerifierConfig:
    """Every public constant the engine needs, in one read-only value.

    The defaults are the production values. Tests build small synthetic
    chains with ``dataclasses.replace``.
    """

    app_slug: str = constants.APP_SLUG
    oracle_url: str = constants.ORACLE_URL
    oracle_timeout: float = 15.0

    commitment: str = constants.COMMITMENT
    game_salt: str = constants.GAME_SALT
    vx_pub_key: str = constants.VX_PUB_KEY

    epoch_boundary: int = constants.PREV_CHAIN_LENGTH
    prev_commitment: str = constants.PREV_COMMITMENT
    prev_game_salt: str = constants.PREV_GAME_SALT
    prev_boundary: int = 1

    max_iterations: int = constants.MAX_ITERATIONS

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "VerifierConfig":
        """Build a config, letting the oracle endpoint come from the environment.

        Reads ``VXCORE_ORACLE_URL`` and ``VXCORE_ORACLE_TIMEOUT``.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        url = env.get("VXCORE_ORACLE_URL") or defaults.oracle_url
        raw_timeout = env.get("VXCORE_ORACLE_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else defaults.oracle_timeout
        except ValueError:
            raise ValueError(
                f"VXCORE_ORACLE_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from None
        if timeout <= 0:
            raise ValueError("VXCORE_ORACLE_TIMEOUT must be positive")
        return cls(oracle_url=url, oracle_timeout=timeout)

    def current_epoch(self) -> Epoch:
        return Epoch(
            name="current",
            boundary=self.epoch_boundary,
            convention=HashingConvention.BINARY,
            seed_source=SeedSource.ORACLE,
            commitment=self.commitment,
            static_seed=self.game_salt,
        )

    def legacy_epoch(self) -> Epoch:
        return Epoch(
            name="legacy",
            boundary=self.prev_boundary,
            convention=HashingConvention.HEX_TEXT,
            seed_source=SeedSource.STATIC,
            commitment=self.prev_commitment,
            static_seed=self.prev_game_salt,
        )
