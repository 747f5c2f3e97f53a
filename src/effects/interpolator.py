"""
Interpolation helpers

Pure functions used by every effect to compute intermediate states.
Ratios are not clamped; callers pass values in [0, 1].
"""

from models.color import Color


def lerp(start: float, end: float, ratio: float) -> int:
    """Linear blend truncated toward zero"""
    return int(start + (end - start) * ratio)


def lerp_color(start: Color, end: Color, ratio: float) -> Color:
    """
    Blend two colors channel by channel

    Examples:
        lerp_color(Color(255, 0, 0), Color(0, 0, 255), 0.5) -> Color(127, 0, 127)
    """
    return Color(
        lerp(start.red, end.red, ratio),
        lerp(start.green, end.green, ratio),
        lerp(start.blue, end.blue, ratio),
    )


def lerp_brightness(start: int, end: int, ratio: float) -> int:
    return lerp(start, end, ratio)
