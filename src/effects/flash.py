"""
Flash Effect

Alternates color1 and color2 every flash_duration_ms. One flash is a
color1 write followed by a color2 write. Without state preservation the
light is left on color2 when the run ends, however it ended.
"""

from typing import Iterator, Optional

from effects.base import BaseEffect
from effects.run_state import RunState
from effects.sequencer import Step
from models.effect_config import FlashConfig
from models.enums import EffectID, ScheduleShape
from models.light_state import LightState


class FlashEffect(BaseEffect):
    EFFECT_ID = EffectID.FLASH
    CONFIG_TYPE = FlashConfig
    SHAPE = ScheduleShape.SELF_RESCHEDULING

    config: FlashConfig

    def plan(self, run: RunState) -> Iterator[Step]:
        cfg = self.config
        period_s = cfg.flash_duration_ms / 1000.0
        first = LightState(on=True, color=cfg.color1)
        second = LightState(on=True, color=cfg.color2)

        switches = 0
        while cfg.continuous or run.completed_cycles < cfg.flash_count:
            on_second = switches % 2 == 1
            state = second if on_second else first
            yield Step(
                offset_s=0.0 if switches == 0 else period_s,
                compute=lambda state=state: state,
                index=switches,
                ends_cycle=on_second,
            )
            switches += 1

    def final_state(self, run: RunState) -> Optional[LightState]:
        if self.config.preserve_state:
            return super().final_state(run)
        return LightState(on=True, color=self.config.color2)
