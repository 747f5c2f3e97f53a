"""
Hardware Layer

Device abstractions the effects engine drives:

- ILight protocol (apply_state + is_on)
- IStateCapturingLight for devices that can report a full snapshot
- VirtualLight in-memory implementation

"""
from .light.light_interface import ILight, IStateCapturingLight
from .light.virtual_light import VirtualLight, CapturingVirtualLight

__all__ = [
    "ILight",
    "IStateCapturingLight",
    "VirtualLight",
    "CapturingVirtualLight",
]
