"""
Utility functions for the light effects engine
"""

from .colors import (
    hue_to_rgb,
    hex_to_rgb,
    rgb_to_hex,
)
from .enum_helper import EnumHelper

__all__ = [
    'hue_to_rgb',
    'hex_to_rgb',
    'rgb_to_hex',
    'EnumHelper',
]
