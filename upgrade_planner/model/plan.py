"""Upgrade plan models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .cluster import PlatformStatus


class StepType(str, Enum):
    """Kind of upgrade step."""

    VERIFICATION = "verification"
    OPERATOR = "operator"
    CLUSTER = "cluster"


class Confidence(str, Enum):
    """Confidence in an upgrade path."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    """Priority of a maintenance window."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UpgradeStep(CamelModel):
    """One ordered step of an upgrade path."""

    order: int
    type: StepType
    target: str
    from_version: Optional[str] = None
    to_version: Optional[str] = None
    channel: Optional[str] = None
    description: str
    estimated_duration: str
    required_prerequisites: List[str] = Field(default_factory=list)
    rollback_strategy: str


class UpgradePath(CamelModel):
    """Named, ordered upgrade strategy."""

    id: str
    description: str
    estimated_duration: str
    confidence: Confidence
    steps: List[UpgradeStep]
    benefits: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    supported_until: datetime

    @property
    def affected_components(self) -> List[str]:
        """Targets of every step that changes something."""
        return [step.target for step in self.steps if step.type != StepType.VERIFICATION]


class MaintenanceWindow(CamelModel):
    """Scheduled recommendation to run an upgrade path."""

    id: str
    recommended_date: datetime
    priority: Priority
    reason: str
    affected_components: List[str] = Field(default_factory=list)
    estimated_duration: str
    upgrade_path: UpgradePath


class UpgradeRecommendations(CamelModel):
    """Complete recommendation bundle for one snapshot."""

    platform_status: PlatformStatus
    recommended_paths: List[UpgradePath] = Field(default_factory=list)
    maintenance_windows: List[MaintenanceWindow] = Field(default_factory=list)
    generated_at: datetime

    def find_path(self, path_id: str) -> Optional[UpgradePath]:
        for path in self.recommended_paths:
            if path.id == path_id:
                return path
        return None
