"""
Enums for the light effects engine
"""

from enum import Enum, auto


class EffectID(Enum):
    """Effect identifiers (one controller class per member)"""
    FADE = auto()
    SUNRISE = auto()
    PULSE = auto()
    HEARTBEAT = auto()
    FLASH = auto()


class NativeEffect(Enum):
    """
    Effects rendered by the device firmware itself

    Passed through to the device inside a LightState; the engine never
    animates these, it only asks the device to switch them on or off.
    """
    UNKNOWN = "unknown"
    FIRE = "fire"
    CANDLE = "candle"
    SPARKLE = "sparkle"
    PRISM = "prism"
    OPAL = "opal"
    GLISTEN = "glisten"
    UNDERWATER = "underwater"
    COSMOS = "cosmos"
    SUNBEAM = "sunbeam"
    ENCHANT = "enchant"
    NO_EFFECT = "no_effect"


class ScheduleShape(Enum):
    """
    How a step plan is laid out in time

    PRE_PLANNED: step offsets are measured from the start of the run
                 (fixed step count known up front, no drift)
    SELF_RESCHEDULING: each offset is measured from the end of the previous
                 step (termination depends on runtime counters)
    """
    PRE_PLANNED = auto()
    SELF_RESCHEDULING = auto()


class RunOutcome(Enum):
    """How an effect run ended"""
    COMPLETED = auto()   # Step plan exhausted naturally
    STOPPED = auto()     # stop() called (or forced abort after grace period)
    FAULTED = auto()     # Scheduling fault ended the run


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    DEVICE = auto()      # Light writes, state capture
    EFFECT = auto()      # Effect start/stop/finalize
    SEQUENCER = auto()   # Step scheduling, cancellation, aborts
    TASK = auto()        # asyncio task tracking
    SYSTEM = auto()      # Engine lifecycle, shutdown

    GENERAL = auto()     # Default general category
