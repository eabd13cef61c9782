"""
Models package for node pool shifter data structures
"""

from .shift import (
    CycleOutcome,
    NodeInfo,
    ShiftDecision,
    ShiftParameters,
)

__all__ = [
    "CycleOutcome",
    "NodeInfo",
    "ShiftDecision",
    "ShiftParameters",
]
