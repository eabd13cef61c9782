#!/usr/bin/env python3
"""
Two-phase node shift: grow the target pool, verify, then shrink the source pool
"""

import logging

from models.shift import ShiftParameters
from .exceptions import InvalidShiftError, NoZonesObservedError, ShiftVerificationError
from .gcloud_client import NodePoolManager
from .helpers import sum_counts
from .kubernetes_client import NodeDirectory
from .logging_config import pool_logger

logger = logging.getLogger(__name__)


class NodePoolShifter:
    """Moves one node per zone from one node pool to another"""

    def __init__(self, pool_manager: NodePoolManager, node_directory: NodeDirectory):
        """
        Initialize node pool shifter

        Args:
            pool_manager: Cloud node pool manager issuing resizes
            node_directory: Cluster node directory used to verify growth
        """
        self.pool_manager = pool_manager
        self.node_directory = node_directory

    def shift(self, params: ShiftParameters) -> None:
        """
        Add one node per zone to the target pool, then remove one per zone from the source pool

        The source pool is only shrunk once the target pool is verified not to
        exceed the expected number of nodes. Nothing is rolled back on failure.

        Args:
            params: Pools and their current per-zone sizes

        Raises:
            InvalidShiftError: If the source pool has no node per zone left to give
            ResizeError: If a resize fails
            NoZonesObservedError: If the target pool spans no zones after growing
            ShiftVerificationError: If the target pool holds more nodes than expected after growing
        """
        if params.from_current_size < 1:
            raise InvalidShiftError(
                f"Node pool {params.from_pool} has {params.from_current_size} node(s) per zone, nothing to shift"
            )

        # Add node
        to_new_size = params.to_current_size + 1

        pool_logger(logger, params.to_pool).info(
            f"adding 1 node per zone, currently "
            f"{params.to_current_size} node(s), expecting {to_new_size} node(s) per zone"
        )
        self.pool_manager.set_node_pool_size(params.to_pool, to_new_size)

        self.verify_growth(params.to_pool, to_new_size)

        # Remove node
        from_new_size = params.from_current_size - 1

        pool_logger(logger, params.from_pool).info(
            f"removing 1 node per zone, currently "
            f"{params.from_current_size} node(s), expecting {from_new_size} node(s) per zone"
        )
        self.pool_manager.set_node_pool_size(params.from_pool, from_new_size)

    def verify_growth(self, pool: str, per_zone_size: int) -> None:
        """
        Check the pool did not end up with more nodes than per_zone_size in each of its zones

        A zone still catching up (a preemptible node being recreated) leaves
        the pool short and does not block the shrink. Only a pool larger than
        expected stops the shift.
        """
        zone_info = self.node_directory.get_zones(pool)
        if not zone_info:
            raise NoZonesObservedError(pool)

        actual_node_count = sum_counts(zone_info)
        expected_node_count = per_zone_size * len(zone_info)

        pool_logger(logger, pool).info(
            f"size after resize, actual: {actual_node_count}, "
            f"expected: {expected_node_count}"
        )

        if expected_node_count < actual_node_count:
            raise ShiftVerificationError(pool, expected_node_count, actual_node_count)
