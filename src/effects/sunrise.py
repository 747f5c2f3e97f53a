"""
Sunrise Effect

Simulates a sunrise: a fixed warm color ramp composed with a linear
brightness ramp from start_brightness to end_brightness.

Color ramp by progress:
    [0.00, 0.25)  deep red      -> warm orange
    [0.25, 0.60)  warm orange   -> bright orange
    [0.60, 1.00]  bright orange -> warm yellow
"""

from functools import partial
from typing import List

from effects.base import BaseEffect
from effects.interpolator import lerp_brightness, lerp_color
from effects.run_state import RunState
from effects.sequencer import Step
from models.color import Color
from models.effect_config import SunriseConfig
from models.enums import EffectID, ScheduleShape
from models.light_state import LightState

DEEP_RED = Color(80, 20, 0)
WARM_ORANGE = Color(200, 80, 0)
BRIGHT_ORANGE = Color(255, 140, 0)
WARM_YELLOW = Color(255, 220, 150)

FIRST_SEGMENT_END = 0.25
SECOND_SEGMENT_END = 0.60


def sunrise_color(progress: float) -> Color:
    """Color on the sunrise ramp at progress 0..1"""
    if progress >= 1.0:
        return WARM_YELLOW
    if progress < FIRST_SEGMENT_END:
        return lerp_color(DEEP_RED, WARM_ORANGE, progress / FIRST_SEGMENT_END)
    if progress < SECOND_SEGMENT_END:
        ratio = (progress - FIRST_SEGMENT_END) / (SECOND_SEGMENT_END - FIRST_SEGMENT_END)
        return lerp_color(WARM_ORANGE, BRIGHT_ORANGE, ratio)
    ratio = (progress - SECOND_SEGMENT_END) / (1.0 - SECOND_SEGMENT_END)
    return lerp_color(BRIGHT_ORANGE, WARM_YELLOW, ratio)


class SunriseEffect(BaseEffect):
    EFFECT_ID = EffectID.SUNRISE
    CONFIG_TYPE = SunriseConfig
    SHAPE = ScheduleShape.PRE_PLANNED

    config: SunriseConfig

    def initial_state(self) -> LightState:
        return LightState(on=True, color=DEEP_RED, brightness=self.config.start_brightness)

    def state_at(self, step: int) -> LightState:
        last = self.config.steps - 1
        if step >= last:
            return LightState(color=WARM_YELLOW, brightness=self.config.end_brightness)
        progress = step / last
        return LightState(
            color=sunrise_color(progress),
            brightness=lerp_brightness(self.config.start_brightness, self.config.end_brightness, progress),
        )

    def plan(self, run: RunState) -> List[Step]:
        delay_s = self.config.step_delay_ms / 1000.0
        last = self.config.steps - 1
        return [
            Step(offset_s=k * delay_s, compute=partial(self.state_at, k), index=k, ends_cycle=k == last)
            for k in range(1, self.config.steps)
        ]
