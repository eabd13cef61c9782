#!/usr/bin/env python3
"""
Prometheus metrics for control loop outcomes
"""

from typing import Optional

from prometheus_client import Counter, CollectorRegistry, REGISTRY

from models.shift import CycleOutcome

NODE_TOTALS_NAME = 'gke_node_pool_shifter_node_totals'


def create_node_totals(registry: Optional[CollectorRegistry] = REGISTRY) -> Counter:
    """Outcome counter with every status label initialized to zero"""
    counter = Counter(NODE_TOTALS_NAME, 'Number of processed nodes.', ['status'], registry=registry)
    for outcome in CycleOutcome:
        counter.labels(status=outcome.value)
    return counter


NODE_TOTALS = create_node_totals()


def record_outcome(outcome: CycleOutcome, counter: Counter = NODE_TOTALS) -> None:
    counter.labels(status=outcome.value).inc()
