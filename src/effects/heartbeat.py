"""
Heartbeat Effect

Each cycle: beat (max, hold beat_duration, min), pause_between_beats,
second beat, then pause_between_cycles before the next cycle.

Timeline of one cycle (b = beat, p = pause between beats):
    0       max
    b       min
    b+p     max
    2b+p    min

Writes carry brightness only; power is left as it is. A bounded run
finalizes right after the last min write, without waiting out the final
pause_between_cycles, so completion is reported as soon as nothing more
will be written.
"""

from typing import Iterator

from effects.base import BaseEffect
from effects.run_state import RunState
from effects.sequencer import Step
from models.effect_config import HeartbeatConfig
from models.enums import EffectID, ScheduleShape
from models.light_state import LightState


class HeartbeatEffect(BaseEffect):
    EFFECT_ID = EffectID.HEARTBEAT
    CONFIG_TYPE = HeartbeatConfig
    SHAPE = ScheduleShape.SELF_RESCHEDULING

    config: HeartbeatConfig

    def plan(self, run: RunState) -> Iterator[Step]:
        cfg = self.config
        beat_s = cfg.beat_duration_ms / 1000.0
        between_beats_s = cfg.pause_between_beats_ms / 1000.0
        between_cycles_s = cfg.pause_between_cycles_ms / 1000.0

        up = LightState(brightness=cfg.max_brightness)
        down = LightState(brightness=cfg.min_brightness)

        first = True
        while cfg.continuous or run.completed_cycles < cfg.beat_count:
            yield Step(offset_s=0.0 if first else between_cycles_s, compute=lambda: up, index=0)
            yield Step(offset_s=beat_s, compute=lambda: down, index=1)
            yield Step(offset_s=between_beats_s, compute=lambda: up, index=2)
            yield Step(offset_s=beat_s, compute=lambda: down, index=3, ends_cycle=True)
            first = False
