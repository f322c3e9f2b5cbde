"""VerificationReport — summary of a finished verification run."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Iterable

from .epoch import Epoch
from .events import DoneEvent, Event, FailedEvent, ResultEvent, TerminatingHashEvent
from .models import GameResult, VerificationRequest


@dataclass
class VerificationReport:
    """What a run emitted, plus the commitment it should have reached."""

    request: VerificationRequest
    epoch: str
    commitment: str

    results: list[GameResult] = field(default_factory=list)
    done: bool = False
    failed: bool = False
    terminating_hash: str | None = None

    # Ed25519 signature over ``hash`` (optional)
    signature: str | None = None
    signer_id: str | None = None
    public_key: str | None = None

    @property
    def chain_valid(self) -> bool | None:
        """Whether the terminating hash equals the commitment.

        None when the chain was not walked to its boundary.
        """
        if self.terminating_hash is None:
            return None
        return self.terminating_hash == self.commitment.lower()

    @property
    def all_verified(self) -> bool:
        return bool(self.results) and all(r.verified for r in self.results)

    @property
    def hash(self) -> str:
        """Deterministic hash of the report's content."""
        data = {
            "request": self.request.to_dict(),
            "epoch": self.epoch,
            "commitment": self.commitment,
            "results": [r.to_dict() for r in self.results],
            "done": self.done,
            "failed": self.failed,
            "terminating_hash": self.terminating_hash,
        }
        canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    @classmethod
    def collect(
        cls, events: Iterable[Event], request: VerificationRequest, epoch: Epoch
    ) -> "VerificationReport":
        """Fold a run's events into a report."""
        report = cls(request=request, epoch=epoch.name, commitment=epoch.commitment)
        for event in events:
            if isinstance(event, ResultEvent):
                report.results.append(event.result)
            elif isinstance(event, DoneEvent):
                report.done = True
            elif isinstance(event, FailedEvent):
                report.failed = True
            elif isinstance(event, TerminatingHashEvent):
                report.terminating_hash = event.hash
        return report

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "request": self.request.to_dict(),
            "epoch": self.epoch,
            "commitment": self.commitment,
            "results": [r.to_dict() for r in self.results],
            "done": self.done,
            "failed": self.failed,
            "terminating_hash": self.terminating_hash,
            "chain_valid": self.chain_valid,
            "all_verified": self.all_verified,
            "hash": self.hash,
        }
        if self.signature is not None:
            d["signature"] = self.signature
        if self.signer_id is not None:
            d["signer_id"] = self.signer_id
        if self.public_key is not None:
            d["public_key"] = self.public_key
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VerificationReport":
        return cls(
            request=VerificationRequest.from_dict(data["request"]),
            epoch=data["epoch"],
            commitment=data["commitment"],
            results=[GameResult.from_dict(r) for r in data.get("results", [])],
            done=data.get("done", False),
            failed=data.get("failed", False),
            terminating_hash=data.get("terminating_hash"),
            signature=data.get("signature"),
            signer_id=data.get("signer_id"),
            public_key=data.get("public_key"),
        )
