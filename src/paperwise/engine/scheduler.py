"""Debounced, generation-tagged analysis scheduling.

State machine::

    IDLE --change--> PENDING --timer--> IN_FLIGHT --resolve--> IDLE
                       ^                    |
                       |                 change
                       |                    v
                       +----discard------ STALE

Every document change bumps the generation.  A result is merged only if no
change happened while it was in flight; otherwise it is discarded and the
newer text is scheduled.  In-flight calls are never cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum

from paperwise.engine.store import SuggestionStore
from paperwise.models.analysis import AnalysisSettings, AnalysisSnapshot, AnalysisStatus
from paperwise.models.suggestion import EngineSuggestion

logger = logging.getLogger(__name__)

AnalyzeFn = Callable[[str, AnalysisSettings], Awaitable[Iterable[EngineSuggestion | dict]]]


class SchedulerState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    STALE = "stale"


class AnalysisScheduler:
    """Runs ``analyze`` at most once per idle window and merges fresh results.

    The debounce timer restarts on every change but never pushes the call
    further than ``max_wait_seconds`` past the first change of a burst, so
    continuous typing still gets analyzed.

    Must be driven from inside a running event loop.
    """

    def __init__(
        self,
        analyze: AnalyzeFn,
        store: SuggestionStore,
        settings: AnalysisSettings | None = None,
        *,
        debounce_seconds: float = 2.5,
        max_wait_seconds: float = 3.0,
        min_text_length: int = 20,
        max_text_length: int = 10_000,
        on_status: Callable[[AnalysisStatus], None] | None = None,
    ):
        if max_wait_seconds < debounce_seconds:
            raise ValueError("max_wait_seconds must be >= debounce_seconds")
        self._analyze = analyze
        self.store = store
        self.settings = settings or AnalysisSettings()
        self.debounce_seconds = debounce_seconds
        self.max_wait_seconds = max_wait_seconds
        self.min_text_length = min_text_length
        self.max_text_length = max_text_length
        self.on_status = on_status

        self.state = SchedulerState.IDLE
        self.status = AnalysisStatus.IDLE
        self.last_snapshot: AnalysisSnapshot | None = None
        self.last_error: str | None = None
        self.calls = 0

        self._text = ""
        self._generation = 0
        self._burst_start: float | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None

    @property
    def generation(self) -> int:
        return self._generation

    # -- inbound events -----------------------------------------------------

    def document_changed(self, text: str, *, schedule: bool = True) -> None:
        """Record the latest flattened text.

        ``schedule=False`` only marks in-flight results as stale; it is used
        for changes that should not trigger analysis on their own, such as
        accepting a suggestion.
        """
        self._generation += 1
        self._text = text
        if self.state in (SchedulerState.IN_FLIGHT, SchedulerState.STALE):
            self.state = SchedulerState.STALE
            return
        if schedule:
            self._arm()

    async def flush(self) -> None:
        """Fire a pending analysis now and wait until the scheduler is idle."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._fire()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        loop = asyncio.get_running_loop()
        while self._timer is not None or self._task is not None:
            if self._task is not None:
                await asyncio.wait({self._task})
            else:
                await asyncio.sleep(max(0.0, self._timer.when() - loop.time()))

    def close(self) -> None:
        """Drop any pending timer and in-flight call. Use on shutdown only."""
        self._cancel_timer()
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self.state = SchedulerState.IDLE

    # -- internals ----------------------------------------------------------

    def _set_status(self, status: AnalysisStatus) -> None:
        if status != self.status:
            self.status = status
            if self.on_status is not None:
                self.on_status(status)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self) -> None:
        if len(self._text.strip()) < self.min_text_length:
            self._cancel_timer()
            self._burst_start = None
            self.state = SchedulerState.IDLE
            return

        loop = asyncio.get_running_loop()
        now = loop.time()
        if self.state != SchedulerState.PENDING or self._burst_start is None:
            self._burst_start = now
        deadline = min(now + self.debounce_seconds, self._burst_start + self.max_wait_seconds)
        self._cancel_timer()
        self._timer = loop.call_at(deadline, self._fire)
        self.state = SchedulerState.PENDING

    def _fire(self) -> None:
        self._timer = None
        self._burst_start = None
        if len(self._text) > self.max_text_length:
            self.last_error = (
                f"Text too long: {len(self._text)} characters (maximum {self.max_text_length})"
            )
            logger.warning("Analysis skipped: %s", self.last_error)
            self.state = SchedulerState.IDLE
            self._set_status(AnalysisStatus.ERROR)
            return

        snapshot = AnalysisSnapshot(source_text=self._text, generation=self._generation)
        self.last_snapshot = snapshot
        self.state = SchedulerState.IN_FLIGHT
        self.calls += 1
        self._set_status(AnalysisStatus.ANALYZING)
        logger.debug("Analysis started: generation=%d, %d chars", snapshot.generation, len(snapshot.source_text))
        self._task = asyncio.get_running_loop().create_task(self._run(snapshot))

    async def _run(self, snapshot: AnalysisSnapshot) -> None:
        try:
            result = list(await self._analyze(snapshot.source_text, self.settings))
        except Exception as e:
            self._task = None
            self.last_error = str(e) or type(e).__name__
            logger.warning("Analysis failed for generation %d: %s", snapshot.generation, self.last_error)
            owed = self.state == SchedulerState.STALE
            self.state = SchedulerState.IDLE
            self._set_status(AnalysisStatus.ERROR)
            if owed:
                self._arm()
            return

        self._task = None
        if snapshot.generation != self._generation:
            logger.info(
                "Discarding stale analysis: generation %d superseded by %d",
                snapshot.generation, self._generation,
            )
            self.state = SchedulerState.IDLE
            self._arm()
            self._set_status(AnalysisStatus.IDLE)
            return

        self.store.merge(result, snapshot.source_text)
        self.last_error = None
        self.state = SchedulerState.IDLE
        self._set_status(AnalysisStatus.COMPLETE)
