"""Shared fixtures: short synthetic chains and a scriptable oracle."""

from __future__ import annotations

import dataclasses
import hashlib
import threading

import pytest

from vxcore import HashingConvention, VerifiedSeed, VerifierConfig, next_hash

BOUNDARY = 100
CURRENT_TOP = 120
LEGACY_TOP = 50

CURRENT_TOP_HASH = hashlib.sha256(b"current chain seed").digest()
LEGACY_TOP_HASH = hashlib.sha256(b"legacy chain seed").digest()


def chain_down(game_hash: bytes, steps: int, convention: HashingConvention) -> bytes:
    for _ in range(steps):
        game_hash = next_hash(game_hash, convention)
    return game_hash


def hash_at(index: int) -> bytes:
    """Hash of game ``index`` in the synthetic chains."""
    if index >= BOUNDARY:
        return chain_down(CURRENT_TOP_HASH, CURRENT_TOP - index, HashingConvention.BINARY)
    return chain_down(LEGACY_TOP_HASH, LEGACY_TOP - index, HashingConvention.HEX_TEXT)


def make_config(**overrides) -> VerifierConfig:
    values = dict(
        epoch_boundary=BOUNDARY,
        commitment=hash_at(BOUNDARY).hex(),
        prev_commitment=hash_at(1).hex(),
    )
    values.update(overrides)
    return dataclasses.replace(VerifierConfig(), **values)


class FakeOracle:
    """Stands in for VxClient without any network or pairing work."""

    def __init__(self, missing=(), unverified=()):
        self.missing = set(missing)
        self.unverified = set(unverified)
        self.calls: list[int] = []

    def get_vx_signature(self, index, client_seed, game_hash):
        self.calls.append(index)
        if index in self.missing:
            return None
        signature = hashlib.sha256(b"vx" + game_hash).digest()
        return VerifiedSeed(signature=signature, verified=index not in self.unverified)


class GatedOracle(FakeOracle):
    """Blocks inside the oracle call for ``gate_index`` until released."""

    def __init__(self, gate_index, **kwargs):
        super().__init__(**kwargs)
        self.gate_index = gate_index
        self.entered = threading.Event()
        self.release = threading.Event()

    def get_vx_signature(self, index, client_seed, game_hash):
        if index == self.gate_index:
            self.entered.set()
            self.release.wait(timeout=10)
        return super().get_vx_signature(index, client_seed, game_hash)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def oracle():
    return FakeOracle()
