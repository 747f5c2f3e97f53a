"""
Color model - RGB color value used by effects and light states

Colors are immutable. Effects interpolate between them, light states carry
them to the device.
"""

from dataclasses import dataclass
from typing import Any, Tuple
from utils.colors import check_channel, hex_to_rgb, hue_to_rgb, rgb_to_hex


@dataclass(frozen=True)
class Color:
    """
    Immutable RGB color (0-255 per channel)

    The constructor does not range-check, so interpolation with ratios
    outside [0, 1] can produce out-of-range channels. Use from_rgb() or
    parse() at input boundaries to get validation.

    Examples:
        red = Color.from_rgb(255, 0, 0)
        green = Color.from_hue(120)
        blue = Color.parse("#0000ff")
        r, g, b = blue.to_rgb()
    """

    red: int
    green: int
    blue: int

    # === CONSTRUCTORS ===

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> 'Color':
        """
        Create from RGB channels, validating each is 0-255

        Raises:
            ValueError: on out-of-range or non-integer channel
        """
        return cls(check_channel("red", r), check_channel("green", g), check_channel("blue", b))

    @classmethod
    def from_hue(cls, hue: int) -> 'Color':
        """
        Create a fully saturated color from hue degrees (0-360)

        Raises:
            ValueError: if hue is not a number
        """
        if isinstance(hue, bool):
            raise ValueError(f"hue must be a number, got {hue!r}")
        try:
            degrees = int(hue)
        except (TypeError, ValueError, OverflowError):
            raise ValueError(f"hue must be a number, got {hue!r}") from None
        return cls(*hue_to_rgb(degrees))

    @classmethod
    def from_hex(cls, value: str) -> 'Color':
        """Create from "#rrggbb" """
        return cls(*hex_to_rgb(value))

    @classmethod
    def parse(cls, value: Any) -> 'Color':
        """
        Coerce config input into a Color

        Accepts:
            Color instance
            (r, g, b) tuple or list
            "#rrggbb" string
            {"rgb": [r, g, b]} or {"hue": degrees}

        Raises:
            ValueError: if value cannot be interpreted as a color
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        if isinstance(value, dict):
            if "rgb" in value:
                return cls.parse(value["rgb"])
            if "hue" in value:
                return cls.from_hue(value["hue"])
            raise ValueError(f"Color mapping needs 'rgb' or 'hue' key, got {list(value)}")
        if isinstance(value, (tuple, list)):
            if len(value) != 3:
                raise ValueError(f"Color needs 3 channels, got {len(value)}")
            return cls.from_rgb(*value)
        raise ValueError(f"Cannot interpret {value!r} as a color")

    # === RENDERING ===

    def to_rgb(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def to_hex(self) -> str:
        return rgb_to_hex(self.red, self.green, self.blue)

    @staticmethod
    def black() -> 'Color':
        return Color(0, 0, 0)

    @staticmethod
    def white() -> 'Color':
        return Color(255, 255, 255)

    def __str__(self) -> str:
        return f"Color(RGB={self.to_rgb()})"
