"""Events emitted by a verification run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .models import GameResult


@dataclass(frozen=True)
class ResultEvent:
    result: GameResult

    def to_message(self) -> dict[str, Any]:
        return {"gameResult": self.result.to_dict()}


@dataclass(frozen=True)
class DoneEvent:
    """The iteration budget is spent, the boundary was reached, or the oracle failed."""

    def to_message(self) -> dict[str, Any]:
        return {"done": True}


@dataclass(frozen=True)
class TerminatingHashEvent:
    hash: str

    def to_message(self) -> dict[str, Any]:
        return {"terminatingHash": self.hash}


@dataclass(frozen=True)
class FailedEvent:
    """The oracle had no usable attestation; the run was aborted."""

    index: int | None = None

    def to_message(self) -> dict[str, Any]:
        return {"failed": True}


Event = Union[ResultEvent, DoneEvent, TerminatingHashEvent, FailedEvent]


def is_terminal(event: Event, verify_chain: bool) -> bool:
    """True when no further events follow ``event`` in its run."""
    if isinstance(event, (TerminatingHashEvent, FailedEvent)):
        return True
    return isinstance(event, DoneEvent) and not verify_chain
