from .light_interface import ILight, IStateCapturingLight
from .virtual_light import VirtualLight, CapturingVirtualLight

__all__ = [
    "ILight",
    "IStateCapturingLight",
    "VirtualLight",
    "CapturingVirtualLight",
]
