"""Value types passed into and out of the verification engine."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .constants import MAX_ITERATIONS
from .errors import InvalidRequestError

_HEX64 = re.compile(r"^[0-9a-fA-F]{64}$")


@dataclass(frozen=True)
class VerificationRequest:
    """One request drives exactly one run.

    ``game_hash`` is the hash of game ``game_number``, the most recent game
    in the range to verify.
    """

    game_hash: str
    game_number: int
    iterations: int = 100
    verify_chain: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.game_hash, str) or not _HEX64.match(self.game_hash):
            raise InvalidRequestError("game_hash must be 64 hexadecimal characters")
        if not _is_int(self.game_number) or self.game_number < 1:
            raise InvalidRequestError("game_number must be an integer >= 1")
        if not _is_int(self.iterations) or not 1 <= self.iterations <= MAX_ITERATIONS:
            raise InvalidRequestError(
                f"iterations must be an integer between 1 and {MAX_ITERATIONS}"
            )
        if not isinstance(self.verify_chain, bool):
            raise InvalidRequestError("verify_chain must be a bool")
        object.__setattr__(self, "game_hash", self.game_hash.lower())

    @property
    def game_hash_bytes(self) -> bytes:
        return bytes.fromhex(self.game_hash)

    def to_dict(self) -> dict[str, Any]:
        return {
            "gameHash": self.game_hash,
            "gameNumber": self.game_number,
            "iterations": self.iterations,
            "verifyChain": self.verify_chain,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VerificationRequest":
        """Accept either the wire keys (``gameHash``) or snake_case keys."""
        try:
            return cls(
                game_hash=_pick(data, "gameHash", "game_hash"),
                game_number=_pick(data, "gameNumber", "game_number"),
                iterations=_pick(data, "iterations", "iterations", 100),
                verify_chain=_pick(data, "verifyChain", "verify_chain", False),
            )
        except KeyError as exc:
            raise InvalidRequestError(f"missing field: {exc.args[0]}") from None


@dataclass(frozen=True)
class GameResult:
    """The verified outcome of a single game."""

    id: int
    crash_point: float
    verified: bool
    hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "crashPoint": self.crash_point,
            "verified": self.verified,
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameResult":
        return cls(
            id=data["id"],
            crash_point=data["crashPoint"],
            verified=data.get("verified", False),
            hash=data["hash"],
        )


@dataclass(frozen=True)
class VxAttestation:
    """A record returned by the oracle for one game index."""

    index: int
    message: str  # hex
    signature: str  # hex

    @property
    def signature_bytes(self) -> bytes:
        return bytes.fromhex(self.signature)


@dataclass(frozen=True)
class VerifiedSeed:
    """The crash seed for a current-epoch game and whether it checked out."""

    signature: bytes
    verified: bool


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


_MISSING = object()


def _pick(data: dict[str, Any], wire_key: str, py_key: str, default: Any = _MISSING) -> Any:
    if wire_key in data:
        return data[wire_key]
    if py_key in data:
        return data[py_key]
    if default is _MISSING:
        raise KeyError(wire_key)
    return default
