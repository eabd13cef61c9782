#!/usr/bin/env python3
"""
Kubernetes node lookups grouped by node pool and availability zone
"""

import logging
from typing import Dict, List, Optional

from kubernetes import client

from models.shift import NodeInfo
from .exceptions import MissingZoneLabelError

logger = logging.getLogger(__name__)

DEFAULT_NODE_POOL_LABEL = "cloud.google.com/gke-nodepool"
DEFAULT_ZONE_LABEL = "topology.kubernetes.io/zone"


def build_label_selector(labels: Dict[str, str]) -> str:
    """Exact-match conjunction of key/value pairs, e.g. 'a=1,b=2'"""
    return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))


class NodeDirectory:
    """Reads node membership of node pools from the Kubernetes API"""

    def __init__(
        self,
        core_api: client.CoreV1Api,
        node_pool_label: str = DEFAULT_NODE_POOL_LABEL,
        zone_label: str = DEFAULT_ZONE_LABEL
    ):
        """
        Initialize node directory

        Args:
            core_api: Kubernetes CoreV1Api client
            node_pool_label: Label carrying the node pool name
            zone_label: Label carrying the availability zone
        """
        self.core_api = core_api
        self.node_pool_label = node_pool_label
        self.zone_label = zone_label

    def _to_node_info(self, node) -> NodeInfo:
        labels = node.metadata.labels or {}
        return NodeInfo(
            name=node.metadata.name,
            node_pool=labels.get(self.node_pool_label),
            zone=labels.get(self.zone_label),
            provider_id=node.spec.provider_id if node.spec else None
        )

    def list_nodes(self, labels: Optional[Dict[str, str]] = None) -> List[NodeInfo]:
        """
        List nodes matching every given label, all nodes when no labels are given

        Raises:
            kubernetes.client.ApiException: On API failure, unchanged
        """
        kwargs = {}
        if labels:
            kwargs["label_selector"] = build_label_selector(labels)
        node_list = self.core_api.list_node(**kwargs)
        return [self._to_node_info(node) for node in node_list.items]

    def get_node(self, name: str) -> NodeInfo:
        """Fetch a single node by name"""
        return self._to_node_info(self.core_api.read_node(name))

    def get_node_list(self, pool: str = "") -> List[NodeInfo]:
        """Nodes of a node pool, or of the whole cluster when pool is empty"""
        if not pool:
            return self.list_nodes()
        return self.list_nodes({self.node_pool_label: pool})

    def get_zones(self, pool: str) -> List[int]:
        """
        Per-zone node counts of a node pool

        Zones are discovered from the pool's nodes first, then each zone is
        counted with a pool and zone selector. The result is ordered by zone
        name; a pool without nodes yields an empty list.

        Args:
            pool: Node pool name

        Returns:
            Node count for each zone the pool currently spans

        Raises:
            MissingZoneLabelError: If any node of the pool has no zone label
        """
        nodes = self.get_node_list(pool)
        unzoned = [node.name for node in nodes if not node.zone]
        if unzoned:
            raise MissingZoneLabelError(pool, unzoned)

        zones = sorted({node.zone for node in nodes})

        counts = []
        for zone in zones:
            zone_nodes = self.list_nodes({self.node_pool_label: pool, self.zone_label: zone})
            counts.append(len(zone_nodes))

        logger.debug(f"Node pool {pool} zone distribution: {dict(zip(zones, counts))}")
        return counts
