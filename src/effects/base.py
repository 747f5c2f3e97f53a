"""
Base Effect Class

Every effect controller inherits from BaseEffect and supplies a step policy:
initial_state() for the write applied synchronously by start(), and plan()
for the steps handed to the StepSequencer.

IMPORTANT:
- One controller instance drives ONE light.
- One run at a time per controller; start() while running raises
  EffectAlreadyRunningError and leaves the active run untouched.
- stop() and natural completion share one finalize path that runs exactly
  once per run: cancel pending work, restore the captured state, clear the
  running flag, then fire on_fault (faulted runs only) and on_complete.

Known race: stop() called from a foreign thread while the loop thread is
inside a device write can let that one write land after the restore.
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from typing import ClassVar, Iterable, Optional, Type

from effects.run_state import RunState
from effects.sequencer import Step, StepSequencer
from hardware.light.light_interface import ILight, IStateCapturingLight
from models.effect_config import EffectConfig
from models.enums import EffectID, RunOutcome, ScheduleShape
from models.errors import EffectAlreadyRunningError, SchedulingFault
from models.light_state import LightState
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)


class BaseEffect:
    """
    Effect controller: start/stop/is_running over a step policy

    Subclasses set EFFECT_ID, CONFIG_TYPE and SHAPE, and implement plan().
    """

    EFFECT_ID: ClassVar[EffectID]
    CONFIG_TYPE: ClassVar[Type[EffectConfig]]
    SHAPE: ClassVar[ScheduleShape]

    def __init__(self, light: ILight, config: EffectConfig):
        if not isinstance(config, self.CONFIG_TYPE):
            raise TypeError(
                f"{type(self).__name__} needs {self.CONFIG_TYPE.__name__}, got {type(config).__name__}"
            )
        self.light = light
        self.config = config

        self._lock = threading.Lock()
        self._run: Optional[RunState] = None
        self._run_ids = itertools.count(1)

    @classmethod
    def build(cls, light: ILight, **fields) -> "BaseEffect":
        """Validate fields into this effect's config and wrap it in a controller"""
        return cls(light, cls.CONFIG_TYPE.build(**fields))

    @property
    def name(self) -> str:
        return self.EFFECT_ID.name

    # ------------------------------------------------------------
    # Step policy (override in subclasses)
    # ------------------------------------------------------------

    def initial_state(self) -> Optional[LightState]:
        """State written synchronously by start(), or None"""
        return None

    def plan(self, run: RunState) -> Iterable[Step]:
        raise NotImplementedError

    def final_state(self, run: RunState) -> Optional[LightState]:
        """State written during finalize (the snapshot when preserving)"""
        if self.config.preserve_state and run.snapshot is not None:
            return run.snapshot
        return None

    # ------------------------------------------------------------
    # Public control
    # ------------------------------------------------------------

    def start(self) -> None:
        """
        Start a run on the running event loop

        Raises:
            EffectAlreadyRunningError: a run is active
            RuntimeError: no running event loop
        """
        asyncio.get_running_loop()

        with self._lock:
            current = self._run
            if current is not None and current.running:
                raise EffectAlreadyRunningError(self.name, current.run_id)
            run = RunState(next(self._run_ids))
            self._run = run

        if self.config.preserve_state:
            run.snapshot = self._capture()

        log.info(
            "Effect started",
            effect=self.name,
            run=run.run_id,
            config=self.config.describe(),
        )

        try:
            initial = self.initial_state()
        except Exception as exc:
            log.error("Initial state unavailable, skipping initial write", effect=self.name, exc=exc)
            initial = None
        if initial is not None and not run.is_cancelled():
            self._write(run, Step(offset_s=0.0, compute=lambda: initial), initial)

        sequencer = StepSequencer(f"{self.name}#{run.run_id}", self.SHAPE)
        run.sequencer = sequencer
        try:
            sequencer.launch(
                self.plan(run),
                on_step=lambda step, state: self._write(run, step, state),
                is_cancelled=run.is_cancelled,
                on_finalize=lambda outcome, error: self._finalize(run, outcome, error),
            )
        except Exception as exc:
            self._finalize(run, RunOutcome.FAULTED, exc)

    def stop(self) -> None:
        """Stop the active run. Safe from any thread; no-op when idle."""
        run = self._run
        if run is None or not run.running:
            return
        run.cancel()
        self._finalize(run, RunOutcome.STOPPED)

    def is_running(self) -> bool:
        run = self._run
        return run is not None and run.running

    def completed_cycles(self) -> int:
        """Cycles finished by the current run, or by the last one once it ended"""
        run = self._run
        return run.completed_cycles if run is not None else 0

    @property
    def outcome(self) -> Optional[RunOutcome]:
        run = self._run
        return run.outcome if run is not None else None

    @property
    def last_error(self) -> Optional[BaseException]:
        run = self._run
        return run.error if run is not None else None

    @property
    def run_id(self) -> Optional[int]:
        run = self._run
        return run.run_id if run is not None else None

    async def wait_closed(self, timeout: Optional[float] = None) -> bool:
        """Wait until the run's scheduling task has exited"""
        run = self._run
        if run is None or run.sequencer is None:
            return True
        return await run.sequencer.wait_closed(timeout)

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _capture(self) -> Optional[LightState]:
        try:
            if isinstance(self.light, IStateCapturingLight):
                return self.light.capture_state()
            return LightState(on=self.light.is_on())
        except Exception as exc:
            log.warn("State capture failed, nothing will be restored", effect=self.name, exc=exc)
            return None

    def _write(self, run: RunState, step: Step, state: LightState) -> None:
        try:
            self.light.apply_state(state)
        except Exception as exc:
            log.error(
                "Step write failed",
                effect=self.name,
                run=run.run_id,
                step=run.step_index,
                exc=exc,
            )
        else:
            log.debug(f"{self.name} step {run.step_index}: {state}")
        run.advance(step.ends_cycle)

    def _finalize(
        self,
        run: RunState,
        outcome: RunOutcome,
        error: Optional[BaseException] = None,
    ) -> None:
        fault: Optional[SchedulingFault] = None
        if outcome is RunOutcome.FAULTED:
            fault = SchedulingFault(self.name, run.run_id, f"{type(error).__name__}: {error}")
            fault.__cause__ = error

        if not run.claim_finalize(outcome, fault):
            return

        run.cancel()
        if run.sequencer is not None:
            run.sequencer.cancel()

        final = self.final_state(run)
        if final is not None:
            try:
                self.light.apply_state(final)
            except Exception as exc:
                log.error("Restore write failed", effect=self.name, run=run.run_id, exc=exc)

        run.finish()

        log.info(
            "Effect finished",
            effect=self.name,
            run=run.run_id,
            outcome=outcome.name,
            steps=run.step_index,
            cycles=run.completed_cycles,
        )

        if fault is not None and self.config.on_fault is not None:
            try:
                self.config.on_fault(fault)
            except Exception as exc:
                log.error("on_fault callback failed", effect=self.name, exc=exc)

        if self.config.on_complete is not None:
            try:
                self.config.on_complete()
            except Exception as exc:
                log.error("on_complete callback failed", effect=self.name, exc=exc)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(running={self.is_running()}, run={self._run!r})"
