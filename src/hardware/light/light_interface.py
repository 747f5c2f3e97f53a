# hardware/light/light_interface.py
"""
ILight Protocol
===============
Device abstraction consumed by the effects engine.
Minimal contract for any networked light (bridge-backed bulb, LAN bulb, virtual).
"""

from __future__ import annotations
from typing import Protocol, runtime_checkable
from models.light_state import LightState


class ILight(Protocol):
    """
    Protocol defining the minimal light capability used by effects.

    All implementations must provide:
    - apply_state: one atomic update (power, brightness, color, native effect)
    - is_on: current power state

    Writes are fire-and-forget from the engine's point of view: apply_state
    should return quickly and may raise on transport errors (the engine logs
    and carries on).
    """

    def apply_state(self, state: LightState) -> None:
        """Send a single atomic state update to the device."""
        ...

    def is_on(self) -> bool:
        """Return the device's current power state."""
        ...


@runtime_checkable
class IStateCapturingLight(Protocol):
    """
    Optional capability: full state snapshot.

    Lights that can report brightness and color implement this so effects
    with preserve_state restore everything, not just on/off.
    """

    def capture_state(self) -> LightState:
        """Return the device's current state as a LightState."""
        ...
