"""Test configuration and fixtures."""

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from upgrade_planner.core.snapshot import build_platform_status
from upgrade_planner.model.cluster import ClusterVersion
from upgrade_planner.model.operator import (
    AvailableUpgrade,
    IssueSeverity,
    IssueType,
    OperatorChannel,
    OperatorInstallation,
    OperatorLifecycleInfo,
    OperatorStatus,
    UpgradeIssue,
)
from upgrade_planner.upgrade.issues import calculate_health_status

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed clock for deterministic dates."""
    return NOW


@pytest.fixture
def make_installation():
    """Factory for operator installations."""

    def _make(
        name: str = "test-operator",
        version: str = "test-operator.v1.2.0",
        channel: str = "stable",
        namespace: str = "openshift-operators",
    ) -> OperatorInstallation:
        return OperatorInstallation(
            name=name,
            display_name=name.replace("-", " ").title(),
            namespace=namespace,
            current_version=version,
            current_channel=channel,
            catalog_source="redhat-operators",
            catalog_namespace="openshift-marketplace",
            installed_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            updated_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
            approved=True,
        )

    return _make


@pytest.fixture
def make_issue():
    """Factory for upgrade issues."""

    def _make(
        operator_name: str,
        severity: IssueSeverity = IssueSeverity.WARNING,
        issue_type: IssueType = IssueType.STALE_CHANNEL,
    ) -> UpgradeIssue:
        return UpgradeIssue(
            id=f"{operator_name}-{issue_type.value}",
            operator_name=operator_name,
            severity=severity,
            type=issue_type,
            title=f"{issue_type.value} issue",
            description="Test issue",
            recommendation="Fix it",
            affects_cluster_upgrade=severity == IssueSeverity.CRITICAL,
            detected_at=NOW,
        )

    return _make


@pytest.fixture
def make_operator(make_installation):
    """Factory for operator statuses.

    ``upgrades`` is a list of ``(target_version, channel)`` pairs.
    """

    def _make(
        name: str = "test-operator",
        version: str = "1.2.0",
        upgrades: Optional[List[tuple]] = None,
        issues: Optional[List[UpgradeIssue]] = None,
        channel: str = "stable",
        deprecated: bool = False,
        lifecycle: Optional[OperatorLifecycleInfo] = None,
    ) -> OperatorStatus:
        installation = make_installation(name=name, version=version, channel=channel)
        issues = issues or []
        available = [
            AvailableUpgrade(
                operator_name=name,
                current_version=version,
                target_version=target,
                channel=upgrade_channel,
                lifecycle_info=OperatorLifecycleInfo(operator_name=name, version=target),
            )
            for target, upgrade_channel in (upgrades or [])
        ]
        current_channel = OperatorChannel(
            name=channel, current_csv=version, deprecated=deprecated
        )
        return OperatorStatus(
            installation=installation,
            lifecycle_info=lifecycle or OperatorLifecycleInfo(operator_name=name, version=version),
            available_upgrades=available,
            current_channel=current_channel,
            available_channels=[current_channel],
            issues=issues,
            health_status=calculate_health_status(issues),
        )

    return _make


@pytest.fixture
def make_cluster():
    """Factory for cluster versions."""

    def _make(
        version: str = "4.16.0",
        updates: Optional[List[str]] = None,
        channel: str = "stable-4.16",
        maintenance_ends: Optional[datetime] = None,
    ) -> ClusterVersion:
        return ClusterVersion(
            current_version=version,
            desired_version=version,
            channel=channel,
            available_updates=updates or [],
            is_eus="eus" in channel,
            maintenance_support_ends_at=maintenance_ends,
        )

    return _make


@pytest.fixture
def make_status(make_cluster):
    """Factory for platform snapshots built from operator statuses."""

    def _make(operators: List[OperatorStatus], cluster: Optional[ClusterVersion] = None, **kwargs):
        status = build_platform_status(cluster or make_cluster(), operators, now=NOW)
        if kwargs:
            status = status.model_copy(update=kwargs)
        return status

    return _make


def _subscription(name: str, csv: str, channel: str, package: Optional[str] = None) -> Dict[str, Any]:
    return {
        "apiVersion": "operators.coreos.com/v1alpha1",
        "kind": "Subscription",
        "metadata": {
            "name": name,
            "namespace": "openshift-operators",
            "creationTimestamp": "2024-01-10T08:00:00Z",
        },
        "spec": {
            "name": package or name,
            "channel": channel,
            "source": "redhat-operators",
            "sourceNamespace": "openshift-marketplace",
            "installPlanApproval": "Automatic",
        },
        "status": {"currentCSV": csv, "lastUpdated": "2024-04-02T09:30:00Z"},
    }


def _package(name: str, channels: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "apiVersion": "packages.operators.coreos.com/v1",
        "kind": "PackageManifest",
        "metadata": {"name": name, "namespace": "openshift-marketplace"},
        "status": {"channels": channels},
    }


@pytest.fixture
def inventory_dump() -> Dict[str, Any]:
    """Raw cluster dump in the shape kubectl returns it."""
    return {
        "clusterVersion": {
            "apiVersion": "config.openshift.io/v1",
            "kind": "ClusterVersion",
            "metadata": {"name": "version"},
            "spec": {"channel": "stable-4.15"},
            "status": {
                "desired": {"version": "4.15.10"},
                "history": [
                    {"state": "Completed", "version": "4.15.10"},
                    {"state": "Completed", "version": "4.15.2"},
                ],
                "availableUpdates": [
                    {"version": "4.15.20", "image": "quay.io/openshift-release-dev/ocp-release"},
                    {"version": "4.15.12", "image": "quay.io/openshift-release-dev/ocp-release"},
                ],
            },
        },
        "subscriptions": {
            "items": [
                _subscription(
                    "openshift-gitops-operator", "openshift-gitops-operator.v1.10.0", "gitops-1.10"
                ),
                _subscription("web-terminal", "web-terminal.v1.8.0", "fast"),
            ]
        },
        "packageManifests": [
            _package(
                "openshift-gitops-operator",
                [
                    {
                        "name": "gitops-1.10",
                        "currentCSV": "openshift-gitops-operator.v1.10.3",
                        "entries": [
                            {"name": "openshift-gitops-operator.v1.10.3", "version": "1.10.3"},
                            {"name": "openshift-gitops-operator.v1.10.0", "version": "1.10.0"},
                        ],
                        "deprecation": {"message": "gitops-1.10 is deprecated, use latest"},
                    },
                    {
                        "name": "latest",
                        "currentCSV": "openshift-gitops-operator.v1.12.1",
                        "entries": [
                            {"name": "openshift-gitops-operator.v1.12.1", "version": "1.12.1"}
                        ],
                        "currentCSVDesc": {
                            "annotations": {"com.redhat.openshift.versions": "v4.12-v4.16"}
                        },
                    },
                ],
            ),
            _package(
                "web-terminal",
                [
                    {
                        "name": "fast",
                        "currentCSV": "web-terminal.v1.8.0",
                        "entries": [{"name": "web-terminal.v1.8.0", "version": "1.8.0"}],
                    }
                ],
            ),
        ],
    }
