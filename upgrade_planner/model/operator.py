"""Operator-related models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field

from .base import CamelModel


class LifecycleModel(str, Enum):
    """How an operator's support lifecycle relates to the platform."""

    PLATFORM_ALIGNED = "platform-aligned"
    PLATFORM_AGNOSTIC = "platform-agnostic"
    ROLLING_RELEASE = "rolling-release"
    UNKNOWN = "unknown"


class SupportPhase(str, Enum):
    """Support phase of an operator or platform version."""

    FULL_SUPPORT = "full-support"
    MAINTENANCE_SUPPORT = "maintenance-support"
    END_OF_LIFE = "end-of-life"
    DEPRECATED = "deprecated"
    UNKNOWN = "unknown"


class IssueSeverity(str, Enum):
    """Severity of an upgrade issue."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class IssueType(str, Enum):
    """Kind of upgrade issue."""

    VERSION_CEILING = "version-ceiling"
    STALE_CHANNEL = "stale-channel"
    OUTDATED_VERSION = "outdated-version"
    LIFECYCLE_EXPIRING = "lifecycle-expiring"
    INCOMPATIBLE_CLUSTER = "incompatible-cluster"


class HealthStatus(str, Enum):
    """Health derived from the issues of an operator or the whole platform."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class OperatorInstallation(CamelModel):
    """Operator installation as reported by its OLM subscription."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    namespace: str
    current_version: str
    current_channel: str
    catalog_source: str = "unknown"
    catalog_namespace: str = "unknown"
    installed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    approved: bool = False  # Automatic install plan approval
    package_name: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def package(self) -> str:
        """Catalog package the subscription follows."""
        return self.package_name or self.name


class OperatorLifecycleInfo(CamelModel):
    """Lifecycle facts for one operator version."""

    model_config = ConfigDict(frozen=True)

    operator_name: str
    version: str
    lifecycle_model: LifecycleModel = LifecycleModel.UNKNOWN
    support_phase: SupportPhase = SupportPhase.FULL_SUPPORT
    full_support_ends_at: Optional[datetime] = None
    maintenance_support_ends_at: Optional[datetime] = None
    eol_at: Optional[datetime] = None
    min_ocp_version: Optional[str] = Field(default=None, alias="minOCPVersion")
    max_ocp_version: Optional[str] = Field(default=None, alias="maxOCPVersion")
    recommended_for_ocp_version: Optional[str] = Field(
        default=None, alias="recommendedForOCPVersion"
    )


class OperatorChannel(CamelModel):
    """Update channel of an operator package."""

    name: str
    current_csv: str = Field(alias="currentCSV")
    available_versions: List[str] = Field(default_factory=list)
    deprecated: bool = False
    deprecation_message: Optional[str] = None
    available_in_ocp_versions: Optional[List[str]] = Field(
        default=None, alias="availableInOCPVersion"
    )


class AvailableUpgrade(CamelModel):
    """Candidate upgrade found on one of the operator's channels."""

    operator_name: str
    current_version: str
    target_version: str
    channel: str
    requires_intermediate_upgrades: bool = False
    intermediate_versions: List[str] = Field(default_factory=list)
    lifecycle_info: OperatorLifecycleInfo


class UpgradeIssue(CamelModel):
    """Risk finding for an operator."""

    id: str
    operator_name: str
    severity: IssueSeverity
    type: IssueType
    title: str
    description: str
    recommendation: str
    affects_cluster_upgrade: bool = False
    detected_at: datetime


class OperatorStatus(CamelModel):
    """Installation, lifecycle, upgrades and issues of one operator."""

    installation: OperatorInstallation
    lifecycle_info: OperatorLifecycleInfo
    available_upgrades: List[AvailableUpgrade] = Field(default_factory=list)
    current_channel: OperatorChannel
    available_channels: List[OperatorChannel] = Field(default_factory=list)
    issues: List[UpgradeIssue] = Field(default_factory=list)
    health_status: HealthStatus = HealthStatus.HEALTHY

    def has_severity(self, severity: IssueSeverity) -> bool:
        """Check whether any issue carries the given severity."""
        return any(issue.severity == severity for issue in self.issues)
