"""
Step Sequencer

Drives one effect run: waits until each step's deadline, checks the
cancellation predicate, computes the step's state, checks again, then hands
the state to on_step. Both scheduling shapes go through the same loop:

- PRE_PLANNED: step offsets are measured from the run start, so timing
  does not drift with slow writes.
- SELF_RESCHEDULING: each offset is measured from the end of the previous
  step; the plan is usually a generator that reads run counters to decide
  when to stop.

Each sequencer runs in exactly one tracked asyncio task. cancel() is safe
from any thread: it wakes the sleeping loop, which then sees the token and
exits. If the task has not finished after SHUTDOWN_GRACE_S it is cancelled
outright.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from lifecycle.task_registry import TaskCategory, create_tracked_task
from models.enums import RunOutcome, ScheduleShape
from models.light_state import LightState
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SEQUENCER)

# Time a woken scheduler gets to exit on its own before a forced cancel
SHUTDOWN_GRACE_S = 3.0


@dataclass(frozen=True)
class Step:
    """
    One scheduled device write

    Attributes:
        offset_s: Delay in seconds (from run start for PRE_PLANNED, from the
            previous step for SELF_RESCHEDULING)
        compute: Builds the state to write; called after the deadline
        index: Position within the effect's plan or cycle (for logs)
        ends_cycle: True if executing this step completes one cycle
    """
    offset_s: float
    compute: Callable[[], LightState]
    index: int = 0
    ends_cycle: bool = False


StepHandler = Callable[[Step, LightState], None]
CancelCheck = Callable[[], bool]
FinalizeHandler = Callable[[RunOutcome, Optional[BaseException]], None]


class StepSequencer:
    """
    Single-task step scheduler

    Usage:
        sequencer = StepSequencer("FADE#1", ScheduleShape.PRE_PLANNED)
        sequencer.launch(plan, on_step, is_cancelled, on_finalize)
        ...
        sequencer.cancel()          # from any thread
        await sequencer.wait_closed()
    """

    def __init__(self, name: str, shape: ScheduleShape):
        self.name = name
        self.shape = shape
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        self._wake: Optional[asyncio.Event] = None
        self._wind_down_requested = False
        self._abort_handle: Optional[asyncio.TimerHandle] = None

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    # ------------------------------------------------------------
    # Running
    # ------------------------------------------------------------

    def launch(
        self,
        plan: Iterable[Step],
        on_step: StepHandler,
        is_cancelled: CancelCheck,
        on_finalize: FinalizeHandler,
    ) -> asyncio.Task:
        """Start run() in a tracked task on the running loop"""
        if self._task is not None:
            raise RuntimeError(f"Sequencer {self.name} already launched")
        self._loop = asyncio.get_running_loop()
        self._wake = asyncio.Event()
        self._task = create_tracked_task(
            self.run(plan, on_step, is_cancelled, on_finalize),
            category=TaskCategory.EFFECT,
            description=f"Effect run {self.name}",
            created_by="StepSequencer",
        )
        self._task.add_done_callback(self._on_task_done)
        return self._task

    async def run(
        self,
        plan: Iterable[Step],
        on_step: StepHandler,
        is_cancelled: CancelCheck,
        on_finalize: FinalizeHandler,
    ) -> RunOutcome:
        """
        Execute the plan and report how it ended

        on_finalize is called exactly once from here with the outcome:
        COMPLETED when the plan is exhausted, STOPPED when the predicate
        turned true (or the task was cancelled), FAULTED with the exception
        when computing, planning or sleeping failed. Exceptions raised by
        on_step count as faults too; callers isolate device errors inside
        on_step themselves.
        """
        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop
        if self._wake is None:
            self._wake = asyncio.Event()
        if self._task is None:
            self._task = asyncio.current_task()

        origin = loop.time()
        executed = 0
        log.debug(f"Sequencer {self.name} running", shape=self.shape.name)

        try:
            outcome = RunOutcome.COMPLETED
            for step in plan:
                if is_cancelled():
                    outcome = RunOutcome.STOPPED
                    break

                if self.shape is ScheduleShape.PRE_PLANNED:
                    deadline = origin + step.offset_s
                else:
                    deadline = loop.time() + step.offset_s
                await self._sleep_until(deadline)

                if is_cancelled():
                    outcome = RunOutcome.STOPPED
                    break
                state = step.compute()
                if is_cancelled():
                    outcome = RunOutcome.STOPPED
                    break
                on_step(step, state)
                executed += 1

        except asyncio.CancelledError:
            log.debug(f"Sequencer {self.name} cancelled", executed=executed)
            on_finalize(RunOutcome.STOPPED, None)
            raise
        except Exception as exc:
            log.error(f"Sequencer {self.name} faulted", executed=executed, exc=exc)
            on_finalize(RunOutcome.FAULTED, exc)
            return RunOutcome.FAULTED

        log.debug(f"Sequencer {self.name} finished", outcome=outcome.name, executed=executed)
        on_finalize(outcome, None)
        return outcome

    async def _sleep_until(self, deadline: float) -> None:
        """Sleep until the deadline or until cancel() wakes us"""
        delay = max(0.0, deadline - self._loop.time())
        if self._wake.is_set():
            # still yield so a forced abort can be delivered
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._wake.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    # ------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------

    def cancel(self) -> None:
        """
        Wake the scheduler so it observes the cancellation token

        Thread-safe. The caller sets the token first; this only makes sure a
        sleeping loop notices it now rather than at its next deadline.
        """
        loop = self._loop
        if loop is None or loop.is_closed():
            return

        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None

        if current is loop:
            self._wind_down()
        else:
            try:
                loop.call_soon_threadsafe(self._wind_down)
            except RuntimeError:
                # loop closed between the check and the call
                log.debug(f"Sequencer {self.name}: loop closed before wind-down")

    def _wind_down(self) -> None:
        if self._wind_down_requested:
            return
        self._wind_down_requested = True

        if self._wake is not None:
            self._wake.set()

        task = self._task
        if task is None or task.done():
            return
        # A step calling stop() on its own run must not arm a cancel against itself
        if task is asyncio.current_task():
            return
        self._abort_handle = self._loop.call_later(SHUTDOWN_GRACE_S, self._force_abort)

    def _force_abort(self) -> None:
        task = self._task
        if task is not None and not task.done():
            log.warn(
                f"Sequencer {self.name} did not exit within grace period, cancelling",
                grace_s=SHUTDOWN_GRACE_S,
            )
            task.cancel()

    def _on_task_done(self, task: asyncio.Task) -> None:
        if self._abort_handle is not None:
            self._abort_handle.cancel()
            self._abort_handle = None

    async def wait_closed(self, timeout: Optional[float] = None) -> bool:
        """Wait for the scheduling task to exit. Returns False on timeout."""
        task = self._task
        if task is None or task.done():
            return True
        if task is asyncio.current_task():
            return False
        done, _ = await asyncio.wait({task}, timeout=timeout)
        return task in done
