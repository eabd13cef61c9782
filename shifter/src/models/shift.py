#!/usr/bin/env python3
"""
Pydantic models for node pool shifting
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CycleOutcome(str, Enum):
    """Result of one control loop cycle, used as the metrics status label"""
    SHIFTED = "shifted"
    SKIPPED = "skipped"
    FAILED = "failed"


class NodeInfo(BaseModel):
    """Cluster node as seen by the shifter"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Kubernetes node name")
    node_pool: Optional[str] = Field(None, description="Node pool label value")
    zone: Optional[str] = Field(None, description="Availability zone label value")
    provider_id: Optional[str] = Field(None, description="Cloud provider ID, e.g. gce://project/zone/instance")


class ShiftDecision(BaseModel):
    """Model for rebalance decisions"""
    model_config = ConfigDict(frozen=True)

    should_shift: bool = Field(..., description="Whether a shift cycle should execute")
    source_node_count: int = Field(..., ge=0, description="Total nodes in the source pool")
    zone_count: int = Field(..., ge=1, description="Number of zones of the target pool")
    per_zone_size: int = Field(..., ge=0, description="Source nodes per zone")
    min_nodes_per_zone: int = Field(..., ge=0, description="Configured source pool floor")
    reason: str = Field(..., description="Reason for the decision")


class ShiftParameters(BaseModel):
    """Inputs of a two-phase shift, rebuilt every cycle"""
    model_config = ConfigDict(frozen=True)

    from_pool: str
    to_pool: str
    from_current_size: int = Field(..., ge=0, description="Current source nodes per zone")
    to_current_size: int = Field(..., ge=0, description="Current target nodes per zone")
