"""
Effects package

Time-based light effects: each controller turns a validated configuration
into a cancellable sequence of timed device writes.
"""

from .interpolator import lerp_color, lerp_brightness
from .run_state import RunState
from .sequencer import Step, StepSequencer, SHUTDOWN_GRACE_S
from .base import BaseEffect
from .fade import FadeEffect
from .sunrise import SunriseEffect, sunrise_color
from .pulse import PulseEffect, pulse_brightness
from .heartbeat import HeartbeatEffect
from .flash import FlashEffect
from .engine import EffectEngine

__all__ = [
    'lerp_color',
    'lerp_brightness',
    'RunState',
    'Step',
    'StepSequencer',
    'SHUTDOWN_GRACE_S',
    'BaseEffect',
    'FadeEffect',
    'SunriseEffect',
    'sunrise_color',
    'PulseEffect',
    'pulse_brightness',
    'HeartbeatEffect',
    'FlashEffect',
    'EffectEngine',
]
