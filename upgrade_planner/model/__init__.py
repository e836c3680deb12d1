"""Data models for the upgrade planner."""

from .cluster import ClusterVersion, OperatorOmission, PlatformStatus
from .operator import (
    AvailableUpgrade,
    HealthStatus,
    IssueSeverity,
    IssueType,
    LifecycleModel,
    OperatorChannel,
    OperatorInstallation,
    OperatorLifecycleInfo,
    OperatorStatus,
    SupportPhase,
    UpgradeIssue,
)
from .plan import (
    Confidence,
    MaintenanceWindow,
    Priority,
    StepType,
    UpgradePath,
    UpgradeRecommendations,
    UpgradeStep,
)
from .report import ReportFormat

__all__ = [
    "AvailableUpgrade",
    "ClusterVersion",
    "Confidence",
    "HealthStatus",
    "IssueSeverity",
    "IssueType",
    "LifecycleModel",
    "MaintenanceWindow",
    "OperatorChannel",
    "OperatorInstallation",
    "OperatorLifecycleInfo",
    "OperatorOmission",
    "OperatorStatus",
    "PlatformStatus",
    "Priority",
    "ReportFormat",
    "StepType",
    "SupportPhase",
    "UpgradeIssue",
    "UpgradePath",
    "UpgradeRecommendations",
    "UpgradeStep",
]
