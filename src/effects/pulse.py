"""
Pulse Effect

Triangle-wave brightness: each pulse is PULSE_SUB_STEPS writes, the first
half ramping min -> max and the second half max -> min. Each write carries a
transition equal to the step duration so the light smooths between steps.
Turns the light on first when it is off.
"""

from functools import partial
from typing import Iterator, Optional

from effects.base import BaseEffect
from effects.run_state import RunState
from effects.sequencer import Step
from models.effect_config import PULSE_SUB_STEPS, PulseConfig
from models.enums import EffectID, ScheduleShape
from models.light_state import LightState


def pulse_brightness(sub_step: int, min_brightness: int, max_brightness: int) -> int:
    """
    Brightness of one pulse sub-step (0..PULSE_SUB_STEPS-1)

    Examples (min=10, max=100):
        0 -> 10, 1 -> 28, 5 -> 100, 9 -> 28
    """
    half = PULSE_SUB_STEPS // 2
    span = max_brightness - min_brightness
    if sub_step < half:
        return int(min_brightness + span * sub_step / half)
    return int(max_brightness - span * (sub_step - half) / half)


class PulseEffect(BaseEffect):
    EFFECT_ID = EffectID.PULSE
    CONFIG_TYPE = PulseConfig
    SHAPE = ScheduleShape.SELF_RESCHEDULING

    config: PulseConfig

    def initial_state(self) -> Optional[LightState]:
        if self.light.is_on():
            return None
        return LightState.power(True)

    def state_at(self, sub_step: int) -> LightState:
        return LightState(
            on=True,
            brightness=pulse_brightness(sub_step, self.config.min_brightness, self.config.max_brightness),
            transition_ms=int(self.config.step_delay_ms),
        )

    def plan(self, run: RunState) -> Iterator[Step]:
        cfg = self.config
        delay_s = cfg.step_delay_ms / 1000.0
        first = True
        while cfg.continuous or run.completed_cycles < cfg.pulse_count:
            for sub in range(PULSE_SUB_STEPS):
                yield Step(
                    offset_s=0.0 if first else delay_s,
                    compute=partial(self.state_at, sub),
                    index=sub,
                    ends_cycle=sub == PULSE_SUB_STEPS - 1,
                )
                first = False
