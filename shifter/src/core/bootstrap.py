#!/usr/bin/env python3
"""
Startup wiring: Kubernetes and GKE clients for the node pool shifter
"""

import logging
import os
from typing import Tuple

from kubernetes import client
from kubernetes import config as k8s_config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException

from config.settings import Settings, KubernetesSettings
from .exceptions import BootstrapError
from .gcloud_client import GCloudClient, NodePoolManager
from .kubernetes_client import NodeDirectory

logger = logging.getLogger(__name__)


def new_kubernetes_client(kube_settings: KubernetesSettings) -> client.CoreV1Api:
    """
    Create a Kubernetes API client

    In-cluster configuration is used when the service host and port are
    known, the kubeconfig otherwise.

    Raises:
        BootstrapError: If no usable configuration is found
    """
    try:
        if kube_settings.in_cluster:
            logger.info("Loading in-cluster config")
            k8s_config.load_incluster_config()
        else:
            kubeconfig_path = kube_settings.kubeconfig_path
            if kubeconfig_path and not os.path.exists(kubeconfig_path):
                raise BootstrapError(f"Kubeconfig file not found: {kubeconfig_path}")
            logger.info(f"Loading kubeconfig from: {kubeconfig_path or 'default location'}")
            k8s_config.load_kube_config(config_file=kubeconfig_path)
    except ConfigException as e:
        raise BootstrapError(f"Error loading Kubernetes configuration: {e}") from e

    return client.CoreV1Api()


def build_clients(settings: Settings) -> Tuple[NodeDirectory, NodePoolManager]:
    """
    Build the node directory and the node pool manager

    Project details are read from one of the cluster nodes, so the cluster
    must have at least one node.

    Raises:
        BootstrapError: On any condition a retry cannot fix
    """
    node_directory = NodeDirectory(
        new_kubernetes_client(settings.kubernetes),
        node_pool_label=settings.kubernetes.node_pool_label,
        zone_label=settings.kubernetes.zone_label
    )

    try:
        nodes = node_directory.get_node_list()
    except ApiException as e:
        raise BootstrapError(f"Error while getting the list of nodes: {e}") from e

    if not nodes:
        raise BootstrapError("There is no node in the cluster")

    gcloud = GCloudClient(
        project=settings.gcloud.project,
        location=settings.gcloud.location,
        cluster=settings.gcloud.cluster,
        metadata_url=settings.gcloud.metadata_url
    )
    gcloud.get_project_details_from_node(nodes[0].provider_id or "")

    pool_manager = gcloud.new_container_client(
        timeout=settings.gcloud.resize_timeout,
        poll_interval=settings.gcloud.resize_poll_interval
    )
    return node_directory, pool_manager
