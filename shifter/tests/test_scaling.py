#!/usr/bin/env python3
"""
Tests for the rebalance decision
"""

import pytest

from core.exceptions import NoZonesObservedError
from core.scaling import ScalingEngine


class TestScalingEngine:
    """Test shift decision logic"""

    def test_shift_when_above_minimum(self):
        decision = ScalingEngine(2).evaluate_shift("from", "to", 9, 3)

        assert decision.should_shift is True
        assert decision.per_zone_size == 3

    def test_no_shift_at_minimum(self):
        decision = ScalingEngine(3).evaluate_shift("from", "to", 9, 3)

        assert decision.should_shift is False
        assert "not above minimum" in decision.reason

    def test_no_shift_below_minimum(self):
        assert ScalingEngine(5).evaluate_shift("from", "to", 9, 3).should_shift is False

    @pytest.mark.parametrize("min_nodes", [0, 1, 10])
    def test_no_shift_for_empty_source_pool(self, min_nodes):
        decision = ScalingEngine(min_nodes).evaluate_shift("from", "to", 0, 3)

        assert decision.should_shift is False
        assert decision.reason == "Source node pool has no nodes"

    def test_per_zone_size_uses_integer_division(self):
        decision = ScalingEngine(2).evaluate_shift("from", "to", 8, 3)

        assert decision.per_zone_size == 2
        assert decision.should_shift is False

    def test_no_zones_is_an_error(self):
        with pytest.raises(NoZonesObservedError) as exc_info:
            ScalingEngine(0).evaluate_shift("from", "to", 6, 0)

        assert exc_info.value.pool == "to"
