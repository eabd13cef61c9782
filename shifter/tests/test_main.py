#!/usr/bin/env python3
"""
Tests for the command line entry point and service wiring
"""

from unittest.mock import patch

import pytest
from prometheus_client import CollectorRegistry

import main
from core.exceptions import BootstrapError
from core.metrics import create_node_totals
from fakes import FakeCluster, FakeCoreV1Api, FakePoolManager
from core.kubernetes_client import NodeDirectory


@pytest.fixture
def env(monkeypatch):
    for name in ("INTERVAL", "CYCLE_TIME", "NODE_POOL_FROM_MIN_NODE", "DRY_RUN",
                 "METRICS_LISTEN_ADDRESS", "METRICS_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NODE_POOL_FROM", "default-pool")
    monkeypatch.setenv("NODE_POOL_TO", "preemptible-pool")
    return monkeypatch


class TestCommandLine:
    def test_flags_override_environment(self, env):
        env.setenv("INTERVAL", "600")

        settings = main.load_settings(main.parse_args([
            "-i", "120", "--cycle-time", "20", "--node-pool-from-min-node", "1",
            "--node-pool-to", "spot-pool", "--metrics-listen-address", ":9100", "--dry-run",
        ]))

        assert settings.shifter.interval == 120
        assert settings.shifter.cycle_time == 20
        assert settings.shifter.node_pool_from_min_node == 1
        assert settings.shifter.node_pool_from == "default-pool"
        assert settings.shifter.node_pool_to == "spot-pool"
        assert settings.shifter.dry_run is True
        assert settings.metrics.host_and_port() == ("0.0.0.0", 9100)

    def test_unset_flags_keep_environment(self, env):
        env.setenv("DRY_RUN", "true")

        settings = main.load_settings(main.parse_args([]))

        assert settings.shifter.interval == 300
        assert settings.shifter.dry_run is True

    def test_invalid_configuration_exits(self, env):
        env.delenv("NODE_POOL_FROM")

        with patch("main.setup_logging"), pytest.raises(SystemExit) as exc_info:
            main.main([])

        assert exc_info.value.code == 1

    def test_bootstrap_failure_exits(self, env):
        with patch("main.setup_logging"), \
                patch("main.build_clients", side_effect=BootstrapError("There is no node in the cluster")), \
                pytest.raises(SystemExit) as exc_info:
            main.main([])

        assert exc_info.value.code == 1


class TestShifterService:
    def test_stop_waits_for_the_loop(self, env):
        cluster = FakeCluster({"default-pool": {"a": 1}, "preemptible-pool": {"a": 1}})
        directory = NodeDirectory(FakeCoreV1Api(cluster))
        manager = FakePoolManager(cluster)
        service = main.ShifterService(
            main.load_settings(main.parse_args([])),
            directory,
            manager,
            node_totals=create_node_totals(CollectorRegistry())
        )

        with patch.object(service.api_server, "run"):
            service.start()
            service.stop()
            service.wait(poll_interval=0.01)

        assert not service.loop_thread.is_alive()
        assert service.controller.running is False
