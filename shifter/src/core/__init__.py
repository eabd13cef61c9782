"""
Core node pool shifter modules
"""

from .controller import ShiftController
from .scaling import ScalingEngine
from .shifter import NodePoolShifter

__all__ = [
    "ShiftController",
    "ScalingEngine",
    "NodePoolShifter"
]
