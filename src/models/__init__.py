"""
Models package - Data models for the light effects engine
"""

from .enums import EffectID, NativeEffect, ScheduleShape, RunOutcome, LogLevel, LogCategory
from .color import Color
from .light_state import LightState
from .errors import EffectError, EffectConfigError, EffectAlreadyRunningError, SchedulingFault

__all__ = [
    'EffectID',
    'NativeEffect',
    'ScheduleShape',
    'RunOutcome',
    'LogLevel',
    'LogCategory',
    'Color',
    'LightState',
    'EffectError',
    'EffectConfigError',
    'EffectAlreadyRunningError',
    'SchedulingFault',
]
