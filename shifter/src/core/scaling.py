#!/usr/bin/env python3
"""
Scaling engine module for deciding whether to shift a node
"""

import logging

from models.shift import ShiftDecision
from .exceptions import NoZonesObservedError

logger = logging.getLogger(__name__)


class ScalingEngine:
    """Decides whether the source node pool can give up one node per zone"""

    def __init__(self, min_nodes_per_zone: int = 0):
        """
        Initialize scaling engine

        Args:
            min_nodes_per_zone: Nodes per zone the source pool must keep
        """
        self.min_nodes_per_zone = min_nodes_per_zone

    def evaluate_shift(self, source_pool: str, target_pool: str,
                       source_node_count: int, zone_count: int) -> ShiftDecision:
        """
        Evaluate whether a shift cycle should execute

        The zone count is the target pool's, both pools are expected to span
        the same zones.

        Args:
            source_pool: Source node pool name
            target_pool: Target node pool name
            source_node_count: Total nodes in the source pool
            zone_count: Number of zones of the target pool

        Returns:
            ShiftDecision

        Raises:
            NoZonesObservedError: If the target pool spans no zones
        """
        if zone_count <= 0:
            raise NoZonesObservedError(target_pool)

        per_zone_size = source_node_count // zone_count
        should_shift = per_zone_size > self.min_nodes_per_zone and source_node_count > 0

        if should_shift:
            reason = (f"{per_zone_size} node(s) per zone above minimum "
                      f"of {self.min_nodes_per_zone}")
        elif source_node_count == 0:
            reason = "Source node pool has no nodes"
        else:
            reason = (f"{per_zone_size} node(s) per zone, not above minimum "
                      f"of {self.min_nodes_per_zone}")

        logger.info(
            f"Node pool {source_pool} has {per_zone_size} node(s) per zone, "
            f"minimum wanted: {self.min_nodes_per_zone} node(s)"
        )

        return ShiftDecision(
            should_shift=should_shift,
            source_node_count=source_node_count,
            zone_count=zone_count,
            per_zone_size=per_zone_size,
            min_nodes_per_zone=self.min_nodes_per_zone,
            reason=reason
        )
