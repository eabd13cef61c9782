#!/usr/bin/env python3
"""
Tests for the two-phase shift
"""

import pytest

from core.exceptions import (
    InvalidShiftError,
    NoZonesObservedError,
    ResizeError,
    ShiftVerificationError,
)
from core.kubernetes_client import NodeDirectory
from core.shifter import NodePoolShifter
from fakes import FakeCluster, FakeCoreV1Api, FakePoolManager
from models.shift import ShiftParameters

ZONES = {"a": 3, "b": 3, "c": 3}


@pytest.fixture
def cluster():
    return FakeCluster({"from": dict(ZONES), "to": dict(ZONES)})


def make_shifter(cluster, **manager_kwargs):
    manager = FakePoolManager(cluster, **manager_kwargs)
    return NodePoolShifter(manager, NodeDirectory(FakeCoreV1Api(cluster))), manager


def params(from_size=3, to_size=3):
    return ShiftParameters(from_pool="from", to_pool="to",
                           from_current_size=from_size, to_current_size=to_size)


class TestNodePoolShifter:
    """Grow, verify, shrink"""

    def test_grows_target_before_shrinking_source(self, cluster):
        shifter, manager = make_shifter(cluster)

        shifter.shift(params())

        assert manager.calls == [("to", 4), ("from", 2)]
        assert cluster.per_zone("to") == {"a": 4, "b": 4, "c": 4}
        assert cluster.per_zone("from") == {"a": 2, "b": 2, "c": 2}

    def test_grow_failure_never_shrinks(self, cluster):
        shifter, manager = make_shifter(cluster, failing_pools={"to"})

        with pytest.raises(ResizeError):
            shifter.shift(params())

        assert manager.calls == [("to", 4)]
        assert cluster.per_zone("from") == ZONES

    def test_over_provisioned_target_never_shrinks(self, cluster):
        shifter, manager = make_shifter(cluster, overshoot=1)

        with pytest.raises(ShiftVerificationError) as exc_info:
            shifter.shift(params())

        assert exc_info.value.expected == 12
        assert exc_info.value.actual == 15
        assert manager.calls == [("to", 4)]

    def test_target_short_of_expected_still_shrinks(self, cluster):
        shifter, manager = make_shifter(cluster, apply_resizes=False)

        shifter.shift(params())

        assert manager.calls == [("to", 4), ("from", 2)]

    def test_lagging_target_zone_still_shrinks(self, cluster):
        shifter, manager = make_shifter(cluster, lagging_zones={("to", "c")})

        shifter.shift(params())

        assert manager.calls == [("to", 4), ("from", 2)]
        assert cluster.per_zone("to") == {"a": 4, "b": 4, "c": 3}
        assert cluster.per_zone("from") == {"a": 2, "b": 2, "c": 2}

    def test_shrink_failure_leaves_target_grown(self, cluster):
        shifter, manager = make_shifter(cluster, failing_pools={"from"})

        with pytest.raises(ResizeError):
            shifter.shift(params())

        assert manager.calls == [("to", 4), ("from", 2)]
        assert cluster.per_zone("to") == {"a": 4, "b": 4, "c": 4}
        assert cluster.per_zone("from") == ZONES

    def test_empty_source_is_rejected_before_any_resize(self, cluster):
        shifter, manager = make_shifter(cluster)

        with pytest.raises(InvalidShiftError):
            shifter.shift(params(from_size=0))

        assert manager.calls == []

    def test_target_without_zones_after_growth(self):
        cluster = FakeCluster({"from": dict(ZONES)})
        shifter, manager = make_shifter(cluster)

        with pytest.raises(NoZonesObservedError):
            shifter.shift(params(to_size=0))

        assert manager.calls == [("to", 1)]
