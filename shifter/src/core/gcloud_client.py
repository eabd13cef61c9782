#!/usr/bin/env python3
"""
Google Cloud clients: project discovery and GKE node pool resizing
"""

import logging
import time
from typing import Optional, Tuple

import requests
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import container_v1

from .exceptions import BootstrapError, ResizeError

logger = logging.getLogger(__name__)

DEFAULT_METADATA_URL = "http://metadata.google.internal/computeMetadata/v1"


def parse_provider_id(provider_id: str) -> Tuple[str, str, str]:
    """
    Split a GCE provider ID into its parts

    Args:
        provider_id: Node spec.providerID, e.g. gce://my-project/europe-west1-b/gke-node-1

    Returns:
        Tuple of (project, zone, instance)

    Raises:
        BootstrapError: If the provider ID is not a GCE provider ID
    """
    prefix = "gce://"
    if not provider_id or not provider_id.startswith(prefix):
        raise BootstrapError(f"Unsupported provider ID {provider_id!r}, are you running this in GKE?")

    parts = provider_id[len(prefix):].split("/")
    if len(parts) != 3 or not all(parts):
        raise BootstrapError(f"Malformed GCE provider ID {provider_id!r}")

    project, zone, instance = parts
    return project, zone, instance


class GCloudClient:
    """Discovers the project, location and cluster the shifter runs in"""

    def __init__(
        self,
        project: Optional[str] = None,
        location: Optional[str] = None,
        cluster: Optional[str] = None,
        metadata_url: str = DEFAULT_METADATA_URL,
        session: Optional[requests.Session] = None
    ):
        self.project = project
        self.location = location
        self.cluster = cluster
        self.metadata_url = metadata_url.rstrip("/")
        self.session = session or requests.Session()

    def _get_metadata(self, path: str) -> str:
        url = f"{self.metadata_url}/{path}"
        try:
            response = self.session.get(url, headers={"Metadata-Flavor": "Google"}, timeout=5)
            response.raise_for_status()
        except requests.RequestException as e:
            raise BootstrapError(f"Error reading instance metadata {path}: {e}") from e
        return response.text.strip()

    def get_project_details_from_node(self, provider_id: str) -> None:
        """
        Fill in project, location and cluster name

        Values given at construction win. The project comes from the node
        provider ID, cluster name and location from the metadata server.
        """
        project, zone, _ = parse_provider_id(provider_id)

        if not self.project:
            self.project = project
        if not self.cluster:
            self.cluster = self._get_metadata("instance/attributes/cluster-name")
        if not self.location:
            try:
                self.location = self._get_metadata("instance/attributes/cluster-location")
            except BootstrapError as e:
                logger.warning(f"Falling back to node zone {zone} as cluster location: {e}")
                self.location = zone

        if not (self.project and self.location and self.cluster):
            raise BootstrapError(
                f"Incomplete cluster identity: project={self.project!r}, "
                f"location={self.location!r}, cluster={self.cluster!r}"
            )

        logger.info(
            f"Running in project {self.project}, location {self.location}, cluster {self.cluster}"
        )

    def new_container_client(
        self,
        timeout: int = 900,
        poll_interval: int = 10,
        cluster_manager: Optional[container_v1.ClusterManagerClient] = None
    ) -> "NodePoolManager":
        """Create the GKE node pool manager for the discovered cluster"""
        if not (self.project and self.location and self.cluster):
            raise BootstrapError("Project details must be resolved before creating the container client")

        if cluster_manager is None:
            try:
                cluster_manager = container_v1.ClusterManagerClient()
            except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
                raise BootstrapError(f"Error creating GKE cluster manager client: {e}") from e

        return NodePoolManager(
            cluster_manager,
            project=self.project,
            location=self.location,
            cluster=self.cluster,
            timeout=timeout,
            poll_interval=poll_interval
        )


class NodePoolManager:
    """Resizes GKE node pools and waits for the resize operations"""

    def __init__(
        self,
        cluster_manager: container_v1.ClusterManagerClient,
        project: str,
        location: str,
        cluster: str,
        timeout: int = 900,
        poll_interval: int = 10
    ):
        """
        Initialize node pool manager

        Args:
            cluster_manager: GKE ClusterManagerClient
            project: GCP project ID
            location: Cluster region or zone
            cluster: Cluster name
            timeout: Seconds to wait for a resize operation
            poll_interval: Seconds between operation polls
        """
        self.cluster_manager = cluster_manager
        self.project = project
        self.location = location
        self.cluster = cluster
        self.timeout = timeout
        self.poll_interval = poll_interval

    def node_pool_path(self, pool: str) -> str:
        return (
            f"projects/{self.project}/locations/{self.location}"
            f"/clusters/{self.cluster}/nodePools/{pool}"
        )

    def operation_path(self, operation_name: str) -> str:
        return f"projects/{self.project}/locations/{self.location}/operations/{operation_name}"

    def set_node_pool_size(self, pool: str, size: int) -> None:
        """
        Set the per-zone node count of a node pool and wait until GKE is done

        Raises:
            ResizeError: If the request is rejected or the operation fails
        """
        request = container_v1.SetNodePoolSizeRequest(
            name=self.node_pool_path(pool),
            node_count=int(size)
        )
        try:
            operation = self.cluster_manager.set_node_pool_size(request=request)
        except google_exceptions.GoogleAPIError as e:
            raise ResizeError(pool, size, str(e)) from e

        logger.info(f"Resize of node pool {pool} to {size} node(s) per zone started: {operation.name}")
        self.wait_for_operation(pool, size, operation.name.split("/")[-1])

    def wait_for_operation(self, pool: str, size: int, operation_name: str) -> None:
        """Poll a GKE operation until it is done"""
        deadline = time.monotonic() + self.timeout

        while True:
            try:
                operation = self.cluster_manager.get_operation(
                    request=container_v1.GetOperationRequest(name=self.operation_path(operation_name))
                )
            except google_exceptions.GoogleAPIError as e:
                raise ResizeError(pool, size, f"error polling operation {operation_name}: {e}") from e

            status = operation.status
            if status == container_v1.Operation.Status.DONE:
                error = operation.error
                if error is not None and error.code:
                    raise ResizeError(pool, size, error.message or f"operation {operation_name} failed")
                logger.info(f"Operation {operation_name} on node pool {pool} done")
                return

            if status == container_v1.Operation.Status.ABORTING:
                raise ResizeError(pool, size, f"operation {operation_name} is aborting")

            if time.monotonic() >= deadline:
                raise ResizeError(pool, size, f"operation {operation_name} timed out after {self.timeout}s")

            logger.debug(f"Operation {operation_name} on node pool {pool} is {status}, waiting...")
            time.sleep(self.poll_interval)
