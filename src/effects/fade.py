"""
Fade Effect

Linear color fade from from_color to to_color in `steps` writes spread
evenly over duration_ms. start() writes from_color (step 0); the remaining
steps are pre-planned at multiples of the per-step delay, and the last one
is exactly to_color.
"""

from functools import partial
from typing import List

from effects.base import BaseEffect
from effects.interpolator import lerp_color
from effects.run_state import RunState
from effects.sequencer import Step
from models.effect_config import FadeConfig
from models.enums import EffectID, ScheduleShape
from models.light_state import LightState


class FadeEffect(BaseEffect):
    EFFECT_ID = EffectID.FADE
    CONFIG_TYPE = FadeConfig
    SHAPE = ScheduleShape.PRE_PLANNED

    config: FadeConfig

    def initial_state(self) -> LightState:
        return LightState(on=True, color=self.config.from_color)

    def state_at(self, step: int) -> LightState:
        """Color for step 0..steps-1"""
        last = self.config.steps - 1
        if step >= last:
            return LightState(color=self.config.to_color)
        return LightState(color=lerp_color(self.config.from_color, self.config.to_color, step / last))

    def plan(self, run: RunState) -> List[Step]:
        delay_s = self.config.step_delay_ms / 1000.0
        last = self.config.steps - 1
        return [
            Step(
                offset_s=k * delay_s,
                compute=partial(self.state_at, k),
                index=k,
                ends_cycle=k == last,
            )
            for k in range(1, self.config.steps)
        ]
