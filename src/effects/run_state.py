"""
Per-run bookkeeping

A RunState is created by every successful start() and shared between the
scheduling task and caller threads. All mutation goes through a lock, the
cancellation token is a threading.Event so stop() works from any thread.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from models.enums import RunOutcome
from models.light_state import LightState

if TYPE_CHECKING:
    from effects.sequencer import StepSequencer


class RunState:
    """
    Mutable state of one effect run

    Attributes:
        run_id: Per-controller run number (1, 2, ...)
        snapshot: Light state captured before the first step (None when
            preservation is off or capture failed)
        sequencer: Scheduler driving this run, set once it is launched
        outcome: How the run ended (None while running)
        error: Fault that ended the run, when outcome is FAULTED
    """

    def __init__(self, run_id: int):
        self.run_id = run_id
        self.snapshot: Optional[LightState] = None
        self.sequencer: Optional["StepSequencer"] = None
        self.outcome: Optional[RunOutcome] = None
        self.error: Optional[BaseException] = None

        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._running = True
        self._finalizing = False
        self._step_index = 0
        self._completed_cycles = 0

    # ------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def claim_finalize(self, outcome: RunOutcome, error: Optional[BaseException] = None) -> bool:
        """Return True for the first caller only; that caller owns cleanup."""
        with self._lock:
            if self._finalizing:
                return False
            self._finalizing = True
            self.outcome = outcome
            self.error = error
            return True

    def finish(self) -> None:
        with self._lock:
            self._running = False

    # ------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------

    @property
    def step_index(self) -> int:
        with self._lock:
            return self._step_index

    @property
    def completed_cycles(self) -> int:
        with self._lock:
            return self._completed_cycles

    def advance(self, ends_cycle: bool = False) -> None:
        """Count one executed step (and one cycle when the step closes it)"""
        with self._lock:
            self._step_index += 1
            if ends_cycle:
                self._completed_cycles += 1

    def __repr__(self) -> str:
        return (
            f"RunState(run_id={self.run_id}, running={self.running}, "
            f"steps={self.step_index}, cycles={self.completed_cycles}, outcome={self.outcome})"
        )
