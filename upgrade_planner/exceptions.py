"""
Exceptions raised by the upgrade planner.

Only I/O-facing code raises these. Version comparison, issue detection and
path generation degrade silently on bad data instead.
"""

from typing import Optional


class UpgradePlannerError(Exception):
    """Base exception for all upgrade planner errors."""

    pass


class InventoryError(UpgradePlannerError):
    """Raised when the inventory source cannot be read."""

    def __init__(self, message: str, resource: Optional[str] = None):
        self.resource = resource

        if resource:
            message = f"Failed to read {resource}: {message}"

        super().__init__(message)


class SnapshotError(UpgradePlannerError):
    """Raised when a platform snapshot cannot be assembled at all."""

    pass


class LifecycleLookupError(UpgradePlannerError):
    """Raised by lifecycle providers when lifecycle data cannot be resolved."""

    def __init__(self, message: str, operator_name: Optional[str] = None, version: Optional[str] = None):
        self.operator_name = operator_name
        self.version = version

        if operator_name and version:
            message = f"Lifecycle lookup failed for '{operator_name}' {version}: {message}"

        super().__init__(message)
