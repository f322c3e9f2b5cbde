"""Run verifications off the caller's thread, one at a time.

Each run gets its own daemon thread. Starting a new run supersedes the
active one: its token is cancelled, its undelivered events are dropped,
and from that moment none of its events reach the callback or its queue.
A superseded thread may still be blocked in an oracle round-trip;
whatever it computes afterwards is discarded.

Callbacks run on the worker thread outside the verifier lock. A new run
waits for a superseded run's in-flight callback to return before invoking
its own, so callbacks never interleave across runs.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Iterator

from .config import VerifierConfig
from .crash import crash_point
from .events import Event, is_terminal
from .models import VerificationRequest
from .stream import CancelToken, CrashFormula, ResultStream

log = logging.getLogger(__name__)

EventCallback = Callable[[Event], None]

_END = object()


class RunHandle:
    """The caller's view of one run."""

    def __init__(self, run_id: int, request: VerificationRequest) -> None:
        self.run_id = run_id
        self.request = request
        self.token = CancelToken()
        self._queue: queue.Queue = queue.Queue()
        self._finished = threading.Event()
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None
        self._callback_lock = threading.Lock()
        self._prior: RunHandle | None = None

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def events(self, timeout: float | None = None) -> Iterator[Event]:
        """Yield this run's events until a terminal one, or until it is cancelled.

        Raises ``queue.Empty`` if no event arrives within ``timeout`` seconds.
        """
        while True:
            item = self._queue.get(timeout=timeout)
            if item is _END or self.token.cancelled:
                return
            yield item
            if is_terminal(item, self.request.verify_chain):
                return

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the run's thread exits. Re-raises any error it hit.

        Returns False if the timeout expired first.
        """
        if self._thread is not None:
            self._thread.join(timeout)
        if not self._finished.is_set():
            return False
        if self._error is not None:
            raise self._error
        return True

    def _close(self) -> None:
        self._queue.put(_END)
        self._finished.set()


class Verifier:
    """Runs at most one verification at a time.

    Args:
        config: constants and oracle settings
        oracle: oracle client override, mainly for tests
        formula: crash point function of ``(seed, game_hash)``
        on_event: default callback invoked for every delivered event
    """

    def __init__(
        self,
        config: VerifierConfig | None = None,
        oracle: Any = None,
        formula: CrashFormula = crash_point,
        on_event: EventCallback | None = None,
    ) -> None:
        self.stream = ResultStream(config, oracle, formula)
        self.on_event = on_event
        self._lock = threading.RLock()
        self._active: RunHandle | None = None
        self._cancelled: RunHandle | None = None
        self._next_id = 1

    @property
    def active(self) -> RunHandle | None:
        with self._lock:
            return self._active

    def start(
        self,
        request: VerificationRequest | dict,
        on_event: EventCallback | None = None,
    ) -> RunHandle:
        """Start a run, cancelling whichever run is in flight.

        Malformed requests raise InvalidRequestError here, before any
        thread is started and before the active run is touched. Never
        waits on the superseded run.
        """
        if isinstance(request, dict):
            request = VerificationRequest.from_dict(request)
        callback = on_event or self.on_event

        with self._lock:
            prior = self._active
            if prior is not None:
                log.info("Run %d superseded by a new request", prior.run_id)
                self._supersede(prior)
            else:
                prior = self._cancelled
            handle = RunHandle(self._next_id, request)
            handle._prior = prior
            self._next_id += 1
            self._active = handle
            self._cancelled = None

        thread = threading.Thread(
            target=self._run,
            args=(handle, callback),
            name=f"vxcore-run-{handle.run_id}",
            daemon=True,
        )
        handle._thread = thread
        thread.start()
        return handle

    def cancel(self) -> None:
        """Cancel the active run, if any."""
        with self._lock:
            if self._active is not None:
                self._supersede(self._active)
                self._cancelled = self._active
                self._active = None

    def _supersede(self, handle: RunHandle) -> None:
        handle.token.cancel()
        while True:
            try:
                handle._queue.get_nowait()
            except queue.Empty:
                break
        handle._queue.put(_END)

    def _deliver(
        self, handle: RunHandle, event: Event, callback: EventCallback | None
    ) -> bool:
        with self._lock:
            if handle.token.cancelled or self._active is not handle:
                return False
            handle._queue.put(event)
        if callback is None:
            return True

        # Let any superseded run's in-flight callback return first.
        prior = handle._prior
        while prior is not None:
            with prior._callback_lock:
                pass
            prior = prior._prior
        handle._prior = None

        with handle._callback_lock:
            if handle.token.cancelled:
                return False
            callback(event)
        return True

    def _run(self, handle: RunHandle, callback: EventCallback | None) -> None:
        log.debug("Run %d started for game #%d", handle.run_id, handle.request.game_number)
        events = self.stream.events(handle.request, handle.token)
        try:
            for event in events:
                if not self._deliver(handle, event, callback):
                    break
        except Exception as exc:
            log.exception("Run %d failed", handle.run_id)
            handle._error = exc
        finally:
            events.close()
            with self._lock:
                if self._active is handle:
                    self._active = None
            handle._close()
            log.debug("Run %d finished", handle.run_id)
