"""Cluster-related models."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .operator import HealthStatus, IssueSeverity, OperatorStatus


class ClusterVersion(CamelModel):
    """OpenShift cluster version and update channel."""

    current_version: str
    desired_version: str
    channel: str = "unknown"
    # Ordered by release: index 0 is the next update, the last entry the latest
    available_updates: List[str] = Field(default_factory=list)
    is_eus: bool = Field(default=False, alias="isEUS")
    full_support_ends_at: Optional[datetime] = None
    maintenance_support_ends_at: Optional[datetime] = None
    eol_at: Optional[datetime] = None

    @property
    def next_update(self) -> Optional[str]:
        return self.available_updates[0] if self.available_updates else None

    @property
    def latest_update(self) -> Optional[str]:
        return self.available_updates[-1] if self.available_updates else None


class OperatorOmission(CamelModel):
    """Operator left out of a snapshot because its details could not be read."""

    name: str
    namespace: str
    reason: str


class PlatformStatus(CamelModel):
    """Point-in-time snapshot of the cluster and every installed operator."""

    cluster: ClusterVersion
    operators: List[OperatorStatus] = Field(default_factory=list)
    overall_health: HealthStatus = HealthStatus.HEALTHY
    total_issues: int = 0
    critical_issues: int = 0
    support_expires_in: Optional[int] = None  # days
    omitted_operators: List[OperatorOmission] = Field(default_factory=list)
    captured_at: Optional[datetime] = None

    def find_operator(self, namespace: str, name: str) -> Optional[OperatorStatus]:
        """Find an operator status by namespace and name."""
        for operator in self.operators:
            if operator.installation.namespace == namespace and operator.installation.name == name:
                return operator
        return None

    def operators_with(self, severity: IssueSeverity) -> List[OperatorStatus]:
        """Operators carrying at least one issue of the given severity."""
        return [op for op in self.operators if op.has_severity(severity)]
