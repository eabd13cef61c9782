"""
Configuration module for node pool shifter settings
"""

from .settings import Settings, ShifterSettings, KubernetesSettings, GCloudSettings, MetricsSettings, LoggingSettings

__all__ = [
    "Settings",
    "ShifterSettings",
    "KubernetesSettings",
    "GCloudSettings",
    "MetricsSettings",
    "LoggingSettings"
]
