from __future__ import annotations
import threading
from typing import Callable, List, Optional
from models.color import Color
from models.light_state import LightState
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEVICE)

# (state, write_number) -> True to make that write raise
FaultInjector = Callable[[LightState, int], bool]


class VirtualLight:
    """
    In-memory light.

    Tracks power/brightness/color like a real bulb and records every
    apply_state() call in `writes`. Safe to write from the event loop and
    read from another thread.

    Args:
        name: Display name used in logs
        on: Initial power state
        brightness: Initial brightness (1-100)
        color: Initial color
        fail_on: Optional predicate; writes for which it returns True raise
            ConnectionError and are not applied (still counted in attempts)
    """

    def __init__(
        self,
        name: str = "virtual",
        on: bool = True,
        brightness: int = 100,
        color: Optional[Color] = None,
        fail_on: Optional[FaultInjector] = None,
    ):
        self.name = name
        self._on = on
        self._brightness = brightness
        self._color = color or Color.white()
        self._fail_on = fail_on
        self._lock = threading.Lock()
        self.writes: List[LightState] = []
        self.attempts = 0

    def apply_state(self, state: LightState) -> None:
        with self._lock:
            self.attempts += 1
            if self._fail_on is not None and self._fail_on(state, self.attempts):
                raise ConnectionError(f"{self.name}: simulated write failure #{self.attempts}")
            if state.on is not None:
                self._on = state.on
            if state.brightness is not None:
                self._brightness = state.brightness
            if state.color is not None:
                self._color = state.color
            self.writes.append(state)
        log.debug(f"{self.name} <- {state}")

    def is_on(self) -> bool:
        with self._lock:
            return self._on

    @property
    def brightness(self) -> int:
        with self._lock:
            return self._brightness

    @property
    def color(self) -> Color:
        with self._lock:
            return self._color

    def history(self) -> List[LightState]:
        """Copy of recorded writes"""
        with self._lock:
            return list(self.writes)


class CapturingVirtualLight(VirtualLight):
    """VirtualLight that also supports full state capture (IStateCapturingLight)."""

    def capture_state(self) -> LightState:
        with self._lock:
            return LightState(on=self._on, brightness=self._brightness, color=self._color)
