#!/usr/bin/env python3
"""
Tests for startup wiring
"""

from unittest.mock import Mock, patch

import pytest
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException

from config.settings import GCloudSettings, KubernetesSettings, Settings, ShifterSettings
from core.bootstrap import build_clients, new_kubernetes_client
from core.exceptions import BootstrapError
from fakes import FakeCluster, FakeCoreV1Api


@pytest.fixture
def settings():
    return Settings(
        shifter=ShifterSettings(node_pool_from="default-pool", node_pool_to="preemptible-pool"),
        kubernetes=KubernetesSettings(service_host=None, service_port=None, kubeconfig_path=None),
        gcloud=GCloudSettings(project=None, location="europe-west1", cluster="my-cluster"),
    )


class TestNewKubernetesClient:
    @patch("core.bootstrap.client.CoreV1Api")
    @patch("core.bootstrap.k8s_config")
    def test_in_cluster(self, k8s_config, core_api):
        new_kubernetes_client(KubernetesSettings(service_host="10.0.0.1", service_port="443"))

        k8s_config.load_incluster_config.assert_called_once()
        k8s_config.load_kube_config.assert_not_called()

    @patch("core.bootstrap.client.CoreV1Api")
    @patch("core.bootstrap.k8s_config")
    def test_kubeconfig(self, k8s_config, core_api, tmp_path):
        kubeconfig = tmp_path / "config"
        kubeconfig.write_text("apiVersion: v1\n")

        new_kubernetes_client(KubernetesSettings(
            service_host=None, service_port=None, kubeconfig_path=str(kubeconfig)
        ))

        k8s_config.load_kube_config.assert_called_once_with(config_file=str(kubeconfig))

    def test_missing_kubeconfig(self, tmp_path):
        with pytest.raises(BootstrapError):
            new_kubernetes_client(KubernetesSettings(
                service_host=None, service_port=None, kubeconfig_path=str(tmp_path / "missing")
            ))

    @patch("core.bootstrap.k8s_config")
    def test_invalid_configuration(self, k8s_config):
        k8s_config.load_incluster_config.side_effect = ConfigException("service account token missing")

        with pytest.raises(BootstrapError):
            new_kubernetes_client(KubernetesSettings(service_host="10.0.0.1", service_port="443"))


class TestBuildClients:
    """Fail-fast startup"""

    @patch("core.gcloud_client.container_v1.ClusterManagerClient")
    @patch("core.bootstrap.new_kubernetes_client")
    def test_project_from_first_node(self, new_client, cluster_manager, settings):
        new_client.return_value = FakeCoreV1Api(FakeCluster({"default-pool": {"europe-west1-b": 1}}))

        node_directory, pool_manager = build_clients(settings)

        assert pool_manager.project == "my-project"
        assert pool_manager.node_pool_path("preemptible-pool") == (
            "projects/my-project/locations/europe-west1/clusters/my-cluster/nodePools/preemptible-pool"
        )
        assert node_directory.get_zones("default-pool") == [1]

    @patch("core.bootstrap.new_kubernetes_client")
    def test_empty_cluster_is_fatal(self, new_client, settings):
        new_client.return_value = FakeCoreV1Api(FakeCluster({}))

        with pytest.raises(BootstrapError, match="no node"):
            build_clients(settings)

    @patch("core.bootstrap.new_kubernetes_client")
    def test_node_listing_failure_is_fatal(self, new_client, settings):
        core_api = Mock()
        core_api.list_node.side_effect = ApiException(status=403, reason="Forbidden")
        new_client.return_value = core_api

        with pytest.raises(BootstrapError):
            build_clients(settings)
