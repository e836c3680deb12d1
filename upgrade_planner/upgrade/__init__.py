"""Upgrade planning: version comparison, issue detection, paths and windows."""

from .issues import IssueDetector, calculate_health_status, detect_available_upgrades
from .planner import UpgradePlanner
from .scheduler import MaintenanceScheduler

__all__ = [
    "IssueDetector",
    "MaintenanceScheduler",
    "UpgradePlanner",
    "calculate_health_status",
    "detect_available_upgrades",
]
