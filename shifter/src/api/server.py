#!/usr/bin/env python3
"""
FastAPI server module for liveness, status and Prometheus metrics
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, REGISTRY, generate_latest

from config.settings import Settings
from core.controller import ShiftController

logger = logging.getLogger(__name__)


class APIServer:
    """FastAPI server exposing liveness, status and metrics endpoints"""

    def __init__(
        self,
        controller: ShiftController,
        settings: Settings,
        registry: Optional[CollectorRegistry] = REGISTRY
    ):
        """
        Initialize API server

        Args:
            controller: ShiftController instance
            settings: Application settings
            registry: Prometheus registry served on the metrics path
        """
        self.controller = controller
        self.settings = settings
        self.app = FastAPI(
            title="GKE Node Pool Shifter",
            description="Shifts nodes between GKE node pools one zone-balanced step at a time",
            version="1.0.0"
        )
        self.registry = registry
        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes"""

        @self.app.get("/liveness")
        async def liveness():
            """Liveness probe, healthy while the control loop runs"""
            status = self.controller.get_status()
            alive = status["running"]
            return JSONResponse(
                content={
                    "status": "alive" if alive else "stopped",
                    "timestamp": datetime.now(timezone.utc).isoformat()
                },
                status_code=200 if alive else 503
            )

        @self.app.get("/status")
        async def get_status():
            """Control loop state and configuration"""
            return {
                "controller": self.controller.get_status(),
                "config": self.settings.summary(),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        async def metrics():
            """Prometheus metrics"""
            return Response(content=generate_latest(self.registry), media_type=CONTENT_TYPE_LATEST)

        self.app.add_api_route(self.settings.metrics.path, metrics, methods=["GET"])

    def run(self, host: str = "0.0.0.0", port: int = 9001):
        """Run the API server"""
        logger.info(f"Starting API server on {host}:{port}")
        uvicorn.run(self.app, host=host, port=port, log_level="warning")
