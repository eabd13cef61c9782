#!/usr/bin/env python3
"""
Control loop shifting nodes from one node pool to another
"""

import logging
import random
import threading
from typing import Any, Dict, Optional

from kubernetes.client.exceptions import ApiException
from prometheus_client import Counter

from config.settings import ShifterSettings
from models.shift import CycleOutcome, ShiftParameters
from .exceptions import ShifterError
from .helpers import apply_jitter, find_min_and_max
from .kubernetes_client import NodeDirectory
from .logging_config import log_cycle_banner, log_section, pool_logger
from .metrics import NODE_TOTALS, record_outcome
from .scaling import ScalingEngine
from .shifter import NodePoolShifter

logger = logging.getLogger(__name__)


class ShiftController:
    """Runs decision, shift and bookkeeping cycles until asked to stop"""

    def __init__(
        self,
        settings: ShifterSettings,
        node_directory: NodeDirectory,
        shifter: NodePoolShifter,
        node_totals: Counter = NODE_TOTALS,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the controller

        Args:
            settings: Shifter settings, read only
            node_directory: Cluster node directory
            shifter: Two-phase shift executor
            node_totals: Outcome counter
            rng: Random source for sleep jitter
        """
        self.settings = settings
        self.node_directory = node_directory
        self.shifter = shifter
        self.scaling = ScalingEngine(settings.node_pool_from_min_node)
        self.node_totals = node_totals
        self.rng = rng

        self.running = False
        self.shifting = False
        self.shift_attempted = False
        self._cycle_counter = 0

        self.from_log = pool_logger(logger, settings.node_pool_from)
        self.to_log = pool_logger(logger, settings.node_pool_to)

    @property
    def from_pool(self) -> str:
        return self.settings.node_pool_from

    @property
    def to_pool(self) -> str:
        return self.settings.node_pool_to

    def run(self, stop_event: threading.Event) -> None:
        """
        Run cycles until stop_event is set

        The event interrupts the sleep between cycles but never a cycle in
        progress, so a started shift always completes before returning.
        """
        self.running = True
        logger.info(
            f"Starting node pool shifter loop: {self.from_pool} -> {self.to_pool}, "
            f"interval {self.settings.interval}s, cycle time {self.settings.cycle_time}s"
        )
        try:
            while not stop_event.is_set():
                self.run_cycle()
                sleep_time = self.sleep_time(self.shift_attempted)
                logger.info(f"One cycle done, sleeping for {sleep_time} seconds...")
                stop_event.wait(sleep_time)
        finally:
            self.running = False
            logger.info("Node pool shifter loop stopped")

    def sleep_time(self, shift_attempted: bool) -> int:
        """
        Jittered pause after a cycle

        Any cycle that reached the shift executor is followed by the shorter
        cycle time, whether the shift succeeded or not.
        """
        if shift_attempted:
            return apply_jitter(self.settings.cycle_time, self.rng)
        return apply_jitter(self.settings.interval, self.rng)

    def run_cycle(self) -> CycleOutcome:
        """Run one cycle and record its outcome"""
        self._cycle_counter += 1
        self.shift_attempted = False
        log_cycle_banner(logger, self._cycle_counter, self.from_pool, self.to_pool)

        try:
            outcome = self._run_cycle()
        except Exception as e:
            logger.exception(f"Unexpected error in shift cycle: {e}")
            outcome = CycleOutcome.FAILED

        record_outcome(outcome, self.node_totals)
        logger.info(f"Cycle outcome: {outcome.value}")
        return outcome

    def _run_cycle(self) -> CycleOutcome:
        log_section(logger, "CHECKING NODE POOLS")
        logger.info("Checking node pool to shift...")

        try:
            nodes_from = self.node_directory.get_node_list(self.from_pool)
        except ApiException as e:
            self.from_log.error(f"error while getting the list of nodes: {e}")
            return CycleOutcome.FAILED

        try:
            zone_info = self.node_directory.get_zones(self.to_pool)
        except (ApiException, ShifterError) as e:
            self.to_log.error(f"error while determining zones: {e}")
            return CycleOutcome.FAILED

        try:
            decision = self.scaling.evaluate_shift(
                self.from_pool, self.to_pool, len(nodes_from), len(zone_info)
            )
        except ShifterError as e:
            self.to_log.error(str(e))
            return CycleOutcome.FAILED

        if not decision.should_shift:
            self.from_log.info(f"skipping shift, {decision.reason}")
            return CycleOutcome.SKIPPED

        return self._shift()

    def _shift(self) -> CycleOutcome:
        log_section(logger, "SHIFTING")
        self.to_log.info("attempting to shift one node per zone...")

        try:
            # Fresh distributions, the largest zone drives the resize arithmetic
            _, max_to = find_min_and_max(self.node_directory.get_zones(self.to_pool))
            _, max_from = find_min_and_max(self.node_directory.get_zones(self.from_pool))
        except (ApiException, ShifterError) as e:
            logger.error(f"Error while determining current node pool sizes: {e}")
            return CycleOutcome.FAILED

        params = ShiftParameters(
            from_pool=self.from_pool,
            to_pool=self.to_pool,
            from_current_size=max_from,
            to_current_size=max_to
        )

        if self.settings.dry_run:
            logger.info(f"Dry-run mode: skipping shift {params.model_dump()}")
            return CycleOutcome.SKIPPED

        self.shifting = True
        self.shift_attempted = True
        try:
            self.shifter.shift(params)
        except (ApiException, ShifterError) as e:
            logger.error(f"Shift from {self.from_pool} to {self.to_pool} failed: {e}")
            return CycleOutcome.FAILED
        finally:
            self.shifting = False

        logger.info(f"Shifted one node per zone from {self.from_pool} to {self.to_pool}")
        return CycleOutcome.SHIFTED

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "shifting": self.shifting,
            "cycles": self._cycle_counter,
            "node_pool_from": self.from_pool,
            "node_pool_to": self.to_pool,
        }
