#!/usr/bin/env python3
"""
GKE Node Pool Shifter - Main Entry Point
Shifts nodes from one GKE node pool to another, one node per zone at a time
"""

import os
import sys
import signal
import logging
import argparse
import threading
from typing import List, Optional

from pydantic import ValidationError
from prometheus_client import Counter

# Add src to path for absolute imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.logging_config import setup_logging, get_logger
from core.bootstrap import build_clients
from core.controller import ShiftController
from core.exceptions import BootstrapError
from core.gcloud_client import NodePoolManager
from core.kubernetes_client import NodeDirectory
from core.metrics import NODE_TOTALS
from core.shifter import NodePoolShifter
from api.server import APIServer
from config import Settings

logger = get_logger(__name__)


class ShifterService:
    """Main service that coordinates the control loop and the API server"""

    def __init__(
        self,
        settings: Settings,
        node_directory: NodeDirectory,
        pool_manager: NodePoolManager,
        node_totals: Counter = NODE_TOTALS
    ):
        self.settings = settings
        self.stop_event = threading.Event()

        self.controller = ShiftController(
            settings.shifter,
            node_directory,
            NodePoolShifter(pool_manager, node_directory),
            node_totals=node_totals
        )
        self.api_server = APIServer(self.controller, settings)
        self.loop_thread: Optional[threading.Thread] = None

        logger.info("GKE Node Pool Shifter Service initialized")
        if settings.shifter.dry_run:
            logger.info("Dry-run mode enabled, node pools will not be resized")

    def install_signal_handlers(self):
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals"""
        logger.info(f"Received signal {signum}, shutting down...")
        self.stop()

    def stop(self):
        self.stop_event.set()

    def start(self):
        """Start the API server and the control loop in background threads"""
        host, port = self.settings.metrics.host_and_port()
        api_thread = threading.Thread(
            target=self.api_server.run,
            kwargs={'host': host, 'port': port},
            name="api-server"
        )
        api_thread.daemon = True
        api_thread.start()
        logger.info(f"Metrics served on {host}:{port}{self.settings.metrics.path}")

        self.loop_thread = threading.Thread(
            target=self.controller.run,
            args=(self.stop_event,),
            name="shift-loop"
        )
        self.loop_thread.start()

    def wait(self, poll_interval: float = 1.0):
        """Block until the control loop has finished its last cycle"""
        if self.loop_thread is None:
            return
        # Join with a timeout so signal handlers get to run in the main thread
        while self.loop_thread.is_alive():
            self.loop_thread.join(timeout=poll_interval)
        logger.info("Node pool shifter service stopped")

    def run(self):
        """Main run loop"""
        logger.info("Starting GKE Node Pool Shifter Service...")
        self.install_signal_handlers()
        self.start()
        self.wait()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='GKE Node Pool Shifter')
    parser.add_argument('-i', '--interval', type=int,
                        help='Time in second to wait between each node pool check (env INTERVAL, default 300)')
    parser.add_argument('-c', '--cycle-time', type=int,
                        help='Time in second between node pool operations (env CYCLE_TIME, default 10)')
    parser.add_argument('--kubeconfig',
                        help='Path to the kube config, usually ~/.kube/config. For out of cluster execution (env KUBECONFIG)')
    parser.add_argument('--node-pool-from',
                        help='The name of the node pool to shift from (env NODE_POOL_FROM)')
    parser.add_argument('--node-pool-to',
                        help='The name of the node pool to shift to (env NODE_POOL_TO)')
    parser.add_argument('--node-pool-from-min-node', type=int,
                        help='The minimum number of nodes per zone to keep in the node pool to shift from '
                             '(env NODE_POOL_FROM_MIN_NODE, default 0)')
    parser.add_argument('--metrics-listen-address',
                        help='The address to listen on for Prometheus metrics requests (env METRICS_LISTEN_ADDRESS, default :9001)')
    parser.add_argument('--metrics-path',
                        help='The path to listen for Prometheus metrics requests (env METRICS_PATH, default /metrics)')
    parser.add_argument('--dry-run', action='store_true', default=None,
                        help='Decide but never resize node pools (env DRY_RUN)')
    parser.add_argument('--log-level',
                        help='Logging level (env LOG_LEVEL, default INFO)')
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from the environment with command line flags taking precedence"""
    return Settings.load({
        "shifter": {
            "interval": args.interval,
            "cycle_time": args.cycle_time,
            "node_pool_from": args.node_pool_from,
            "node_pool_to": args.node_pool_to,
            "node_pool_from_min_node": args.node_pool_from_min_node,
            "dry_run": args.dry_run,
        },
        "kubernetes": {
            "kubeconfig_path": args.kubeconfig,
        },
        "metrics": {
            "listen_address": args.metrics_listen_address,
            "path": args.metrics_path,
        },
        "logging": {
            "level": args.log_level,
        },
    })


def main(argv: Optional[List[str]] = None):
    """Entry point"""
    args = parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        setup_logging(level="INFO")
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.file,
        enable_colors=settings.logging.enable_colors
    )

    try:
        node_directory, pool_manager = build_clients(settings)
    except BootstrapError as e:
        logger.error(f"Fatal startup error: {e}")
        sys.exit(1)

    service = ShifterService(settings, node_directory, pool_manager)

    try:
        service.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
        service.stop()
        service.wait()


if __name__ == "__main__":
    main()
