#!/usr/bin/env python3
"""
Configuration settings using Pydantic for environment variable loading
"""

from typing import Optional, Dict, Any, Tuple

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
load_dotenv()


class ShifterSettings(BaseSettings):
    """Node pool shifting configuration settings"""
    model_config = SettingsConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    interval: int = Field(300, ge=1, validation_alias="INTERVAL",
                          description="Seconds to wait between each node pool check")
    cycle_time: int = Field(10, ge=1, validation_alias="CYCLE_TIME",
                            description="Seconds to wait after a successful shift")
    node_pool_from: str = Field(..., min_length=1, validation_alias="NODE_POOL_FROM",
                                description="Name of the node pool to shift from")
    node_pool_to: str = Field(..., min_length=1, validation_alias="NODE_POOL_TO",
                              description="Name of the node pool to shift to")
    node_pool_from_min_node: int = Field(0, ge=0, validation_alias="NODE_POOL_FROM_MIN_NODE",
                                         description="Minimum nodes per zone to keep in the source pool")
    dry_run: bool = Field(False, validation_alias="DRY_RUN")

    @model_validator(mode="after")
    def check_distinct_pools(self) -> "ShifterSettings":
        if self.node_pool_from == self.node_pool_to:
            raise ValueError("node_pool_from and node_pool_to must be different node pools")
        return self


class KubernetesSettings(BaseSettings):
    """Kubernetes configuration settings"""
    model_config = SettingsConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    kubeconfig_path: Optional[str] = Field(None, validation_alias="KUBECONFIG")
    service_host: Optional[str] = Field(None, validation_alias="KUBERNETES_SERVICE_HOST")
    service_port: Optional[str] = Field(None, validation_alias="KUBERNETES_SERVICE_PORT")
    node_pool_label: str = Field("cloud.google.com/gke-nodepool", validation_alias="NODE_POOL_LABEL")
    zone_label: str = Field("topology.kubernetes.io/zone", validation_alias="ZONE_LABEL")

    @property
    def in_cluster(self) -> bool:
        return bool(self.service_host) and bool(self.service_port)


class GCloudSettings(BaseSettings):
    """Google Cloud configuration settings, empty values are discovered at startup"""
    model_config = SettingsConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    project: Optional[str] = Field(None, validation_alias="GCP_PROJECT")
    location: Optional[str] = Field(None, validation_alias="GKE_CLUSTER_LOCATION")
    cluster: Optional[str] = Field(None, validation_alias="GKE_CLUSTER_NAME")
    metadata_url: str = Field("http://metadata.google.internal/computeMetadata/v1",
                              validation_alias="GCE_METADATA_URL")
    resize_timeout: int = Field(900, ge=1, validation_alias="RESIZE_TIMEOUT")
    resize_poll_interval: int = Field(10, ge=1, validation_alias="RESIZE_POLL_INTERVAL")


class MetricsSettings(BaseSettings):
    """Prometheus exposition settings"""
    model_config = SettingsConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    listen_address: str = Field(":9001", validation_alias="METRICS_LISTEN_ADDRESS")
    path: str = Field("/metrics", validation_alias="METRICS_PATH")

    @field_validator("path")
    @classmethod
    def check_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("metrics path must start with '/'")
        return v.rstrip("/") or "/"

    @field_validator("listen_address")
    @classmethod
    def check_listen_address(cls, v: str) -> str:
        _, _, port = v.rpartition(":")
        if not port.isdigit():
            raise ValueError(f"metrics listen address needs a port: {v!r}")
        return v

    def host_and_port(self) -> Tuple[str, int]:
        """Split ':9001' style addresses, an empty host means all interfaces"""
        host, _, port = self.listen_address.rpartition(":")
        return host or "0.0.0.0", int(port)


class LoggingSettings(BaseSettings):
    """Logging configuration settings"""
    model_config = SettingsConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    level: str = Field("INFO", validation_alias="LOG_LEVEL")
    format: str = Field("console", validation_alias="LOG_FORMAT")
    file: Optional[str] = Field(None, validation_alias="LOG_FILE")

    @property
    def enable_colors(self) -> bool:
        return self.format.lower() != "plain"


class Settings(BaseSettings):
    """Main settings class that includes all sub-settings"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    shifter: ShifterSettings = Field(default_factory=ShifterSettings)
    kubernetes: KubernetesSettings = Field(default_factory=KubernetesSettings)
    gcloud: GCloudSettings = Field(default_factory=GCloudSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> "Settings":
        """
        Build settings from the environment, applying explicit overrides on top

        Args:
            overrides: Per-section values, e.g. {"shifter": {"interval": 60}}.
                None values are ignored so unset CLI flags fall through to the environment.

        Returns:
            Frozen Settings instance
        """
        sections = {
            "shifter": ShifterSettings,
            "kubernetes": KubernetesSettings,
            "gcloud": GCloudSettings,
            "metrics": MetricsSettings,
            "logging": LoggingSettings,
        }
        overrides = overrides or {}
        values = {}
        for name, section_cls in sections.items():
            section_overrides = {
                key: value
                for key, value in overrides.get(name, {}).items()
                if value is not None
            }
            values[name] = section_cls(**section_overrides)
        return cls(**values)

    def summary(self) -> Dict[str, Any]:
        """Configuration safe to expose over the status endpoint"""
        return {
            "interval": self.shifter.interval,
            "cycle_time": self.shifter.cycle_time,
            "node_pool_from": self.shifter.node_pool_from,
            "node_pool_to": self.shifter.node_pool_to,
            "node_pool_from_min_node": self.shifter.node_pool_from_min_node,
            "dry_run": self.shifter.dry_run,
            "metrics_path": self.metrics.path,
        }
