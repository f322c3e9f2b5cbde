"""The verification run: walk the chain, fetch seeds, emit results."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterator

from .config import VerifierConfig
from .crash import crash_point
from .crypto import walk_chain
from .epoch import ChainSelector
from .events import DoneEvent, Event, FailedEvent, ResultEvent, TerminatingHashEvent
from .models import GameResult, VerificationRequest
from .oracle import VxClient

log = logging.getLogger(__name__)

CrashFormula = Callable[[bytes, bytes], float]


class CancelToken:
    """Checked between steps; once cancelled, a run emits nothing more."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ResultStream:
    """Produces the event sequence for one verification request.

    Args:
        config: constants and oracle settings
        oracle: object with ``get_vx_signature(index, client_seed, game_hash)``;
            defaults to a ``VxClient`` built from ``config``
        formula: crash point function of ``(seed, game_hash)``
    """

    def __init__(
        self,
        config: VerifierConfig | None = None,
        oracle: Any = None,
        formula: CrashFormula = crash_point,
    ) -> None:
        self.config = config or VerifierConfig()
        self.selector = ChainSelector(self.config)
        self.oracle = oracle if oracle is not None else VxClient(self.config)
        self.formula = formula

    def events(
        self, request: VerificationRequest, token: CancelToken | None = None
    ) -> Iterator[Event]:
        """Yield events for ``request`` in order.

        Results come out one per game, highest index first. ``DoneEvent``
        follows the last result. With ``verify_chain`` the walk then
        continues silently to the epoch boundary and ends with a
        ``TerminatingHashEvent``. An unavailable oracle ends the run with
        ``DoneEvent`` then ``FailedEvent``.
        """
        token = token or CancelToken()
        epoch = self.selector.select(request.game_number)
        log.debug(
            "Verifying %d games from #%d in the %s epoch",
            request.iterations, request.game_number, epoch.name,
        )

        max_steps = None if request.verify_chain else request.iterations
        remaining = request.iterations
        last_hash = None
        done = False

        for index, game_hash in walk_chain(
            request.game_hash_bytes, request.game_number, epoch, max_steps
        ):
            if token.cancelled:
                return
            last_hash = game_hash
            if done:
                continue

            if epoch.uses_oracle:
                seed = self.oracle.get_vx_signature(index, epoch.static_seed, game_hash)
                if token.cancelled:
                    return
                if seed is None:
                    log.error("Aborting run at game %d: no Vx attestation", index)
                    yield DoneEvent()
                    yield FailedEvent(index)
                    return
                crash_seed, verified = seed.signature, seed.verified
            else:
                crash_seed, verified = epoch.static_seed.encode("utf-8"), False

            yield ResultEvent(
                GameResult(
                    id=index,
                    crash_point=self.formula(crash_seed, game_hash),
                    verified=verified,
                    hash=game_hash.hex(),
                )
            )

            remaining -= 1
            if remaining == 0 or index == epoch.boundary:
                done = True
                yield DoneEvent()
                if not request.verify_chain:
                    return

        if token.cancelled:
            return
        if not done:
            yield DoneEvent()
        if request.verify_chain and last_hash is not None:
            log.info("Reached %s epoch boundary at game %d", epoch.name, epoch.boundary)
            yield TerminatingHashEvent(last_hash.hex())
