#!/usr/bin/env python3
"""
Exceptions raised by the node pool shifter
"""

from typing import List


class ShifterError(Exception):
    """Base class for node pool shifter errors"""
    pass


class BootstrapError(ShifterError):
    """Startup condition that retrying cannot fix"""
    pass


class NoZonesObservedError(ShifterError):
    """A node pool reported no zones, so per-zone sizes cannot be derived"""

    def __init__(self, pool: str):
        self.pool = pool
        super().__init__(f"No zones observed for node pool '{pool}'")


class EmptyDistributionError(ShifterError):
    """Min/max requested over an empty zone distribution"""
    pass


class InvalidShiftError(ShifterError):
    """Shift parameters that would drive a node pool below zero"""
    pass


class ShiftVerificationError(ShifterError):
    """Target pool holds more nodes than expected after growing"""

    def __init__(self, pool: str, expected: int, actual: int):
        self.pool = pool
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Node pool '{pool}' has {actual} node(s) after resize, expected {expected}"
        )


class ResizeError(ShifterError):
    """The cloud provider rejected or failed a node pool resize"""

    def __init__(self, pool: str, size: int, message: str):
        self.pool = pool
        self.size = size
        super().__init__(f"Resizing node pool '{pool}' to {size} node(s) per zone failed: {message}")


class MissingZoneLabelError(ShifterError):
    """Nodes of a pool carry no zone label, so they cannot be counted per zone"""

    def __init__(self, pool: str, nodes: List[str]):
        self.pool = pool
        self.nodes = nodes
        super().__init__(
            f"Node pool '{pool}' has {len(nodes)} node(s) without a zone label: {', '.join(nodes)}"
        )
