"""
Light state model

One LightState is one atomic update sent to a light: any combination of
power, brightness, color, native effect and transition time. Fields left as
None are not touched on the device.
"""

from dataclasses import dataclass
from typing import Optional
from models.color import Color
from models.enums import NativeEffect


@dataclass(frozen=True)
class LightState:
    """
    Immutable light update / snapshot

    Attributes:
        on: Power state (None = unchanged)
        brightness: Brightness percentage 1-100 (None = unchanged)
        color: RGB color (None = unchanged)
        effect: Device-native effect to activate (None = unchanged)
        transition_ms: How long the device should take to reach this state

    Examples:
        LightState(on=True, color=Color.from_rgb(255, 0, 0))
        LightState.power(False)
        LightState(brightness=40, transition_ms=200)
    """

    on: Optional[bool] = None
    brightness: Optional[int] = None
    color: Optional[Color] = None
    effect: Optional[NativeEffect] = None
    transition_ms: Optional[int] = None

    @classmethod
    def power(cls, on: bool) -> 'LightState':
        return cls(on=on)

    def __str__(self) -> str:
        parts = []
        if self.on is not None:
            parts.append("on" if self.on else "off")
        if self.brightness is not None:
            parts.append(f"{self.brightness}%")
        if self.color is not None:
            parts.append(self.color.to_hex())
        if self.effect is not None:
            parts.append(self.effect.value)
        if self.transition_ms is not None:
            parts.append(f"~{self.transition_ms}ms")
        return f"LightState({', '.join(parts) or 'empty'})"
