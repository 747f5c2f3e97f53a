"""
Color conversion utilities

Pure functions for color space conversions and color parsing.
"""

from typing import Tuple


def hue_to_rgb(hue: int) -> Tuple[int, int, int]:
    """
    Convert hue (0-360) to RGB (0-255)

    Simple HSV to RGB conversion with S=1, V=1 (full saturation and value).

    Args:
        hue: Hue value in degrees (0-360)

    Returns:
        (r, g, b) tuple with values 0-255

    Example:
        r, g, b = hue_to_rgb(0)    # Red
        r, g, b = hue_to_rgb(120)  # Green
        r, g, b = hue_to_rgb(240)  # Blue
    """
    hue = hue % 360

    if hue < 60:
        return (255, int(hue * 4.25), 0)
    elif hue < 120:
        return (int((120 - hue) * 4.25), 255, 0)
    elif hue < 180:
        return (0, 255, int((hue - 120) * 4.25))
    elif hue < 240:
        return (0, int((240 - hue) * 4.25), 255)
    elif hue < 300:
        return (int((hue - 240) * 4.25), 0, 255)
    else:
        return (255, 0, int((360 - hue) * 4.25))


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """
    Parse "#rrggbb" (or "rrggbb") into an RGB tuple

    Raises:
        ValueError: if the string is not six hex digits
    """
    digits = value.strip().lstrip("#")
    if len(digits) != 6:
        raise ValueError(f"Expected #rrggbb, got {value!r}")
    try:
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    except ValueError:
        raise ValueError(f"Expected #rrggbb, got {value!r}") from None


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format an RGB triple as "#rrggbb" """
    return f"#{r:02x}{g:02x}{b:02x}"


def check_channel(name: str, value: int) -> int:
    """Validate a single 0-255 channel value, return it as int"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be between 0 and 255, got {value}")
    return value
