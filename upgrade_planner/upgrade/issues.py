"""Operator issue detection."""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..model.operator import (
    AvailableUpgrade,
    HealthStatus,
    IssueSeverity,
    IssueType,
    OperatorChannel,
    OperatorInstallation,
    OperatorLifecycleInfo,
    SupportPhase,
    UpgradeIssue,
)
from ..utils.logger import get_logger
from .versions import clean_version, compare_versions, is_newer, VersionOrder

logger = get_logger(__name__)

LifecycleLookup = Callable[[str, str], OperatorLifecycleInfo]


def _maintenance_issue(installation: OperatorInstallation, now: datetime) -> UpgradeIssue:
    return UpgradeIssue(
        id=f"{installation.name}-maintenance",
        operator_name=installation.name,
        severity=IssueSeverity.WARNING,
        type=IssueType.LIFECYCLE_EXPIRING,
        title="Operator in maintenance support",
        description="This operator version is in maintenance support phase.",
        recommendation="Plan an upgrade to a version in full support.",
        affects_cluster_upgrade=False,
        detected_at=now,
    )


def _end_of_life_issue(installation: OperatorInstallation, now: datetime) -> UpgradeIssue:
    return UpgradeIssue(
        id=f"{installation.name}-eol",
        operator_name=installation.name,
        severity=IssueSeverity.CRITICAL,
        type=IssueType.LIFECYCLE_EXPIRING,
        title="Operator end of life",
        description="This operator version has reached end of life.",
        recommendation="Upgrade immediately to a supported version.",
        affects_cluster_upgrade=True,
        detected_at=now,
    )


def _deprecated_issue(installation: OperatorInstallation, now: datetime) -> UpgradeIssue:
    return UpgradeIssue(
        id=f"{installation.name}-deprecated",
        operator_name=installation.name,
        severity=IssueSeverity.WARNING,
        type=IssueType.LIFECYCLE_EXPIRING,
        title="Operator version deprecated",
        description="This operator version has been deprecated by its maintainers.",
        recommendation="Move to a currently supported version before support ends.",
        affects_cluster_upgrade=False,
        detected_at=now,
    )


# Support phases that produce a lifecycle issue; other phases are quiet
LIFECYCLE_ISSUE_RULES: Dict[
    SupportPhase, Callable[[OperatorInstallation, datetime], UpgradeIssue]
] = {
    SupportPhase.MAINTENANCE_SUPPORT: _maintenance_issue,
    SupportPhase.END_OF_LIFE: _end_of_life_issue,
    SupportPhase.DEPRECATED: _deprecated_issue,
}


class IssueDetector:
    """Detects upgrade risks for a single operator."""

    def detect(
        self,
        installation: OperatorInstallation,
        lifecycle_info: OperatorLifecycleInfo,
        current_channel: OperatorChannel,
        next_cluster_update: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[UpgradeIssue]:
        """Detect issues in a fixed order: channel, lifecycle, version ceiling."""
        now = now or datetime.now(timezone.utc)
        issues: List[UpgradeIssue] = []

        stale = self.check_stale_channel(installation, current_channel, now)
        if stale:
            issues.append(stale)

        rule = LIFECYCLE_ISSUE_RULES.get(lifecycle_info.support_phase)
        if rule:
            issues.append(rule(installation, now))

        ceiling = self.check_version_ceiling(installation, lifecycle_info, next_cluster_update, now)
        if ceiling:
            issues.append(ceiling)

        if issues:
            logger.debug(f"Detected {len(issues)} issue(s) for {installation.name}")
        return issues

    def check_stale_channel(
        self, installation: OperatorInstallation, channel: OperatorChannel, now: datetime
    ) -> Optional[UpgradeIssue]:
        """Flag a subscription that still points at a deprecated channel."""
        if not channel.deprecated:
            return None

        return UpgradeIssue(
            id=f"{installation.name}-stale-channel",
            operator_name=installation.name,
            severity=IssueSeverity.WARNING,
            type=IssueType.STALE_CHANNEL,
            title="Channel is deprecated",
            description=channel.deprecation_message
            or "The current subscription channel has been deprecated.",
            recommendation=f"Switch to a supported channel: {channel.name}",
            affects_cluster_upgrade=False,
            detected_at=now,
        )

    def check_version_ceiling(
        self,
        installation: OperatorInstallation,
        lifecycle_info: OperatorLifecycleInfo,
        next_cluster_update: Optional[str],
        now: datetime,
    ) -> Optional[UpgradeIssue]:
        """Flag an operator whose max OCP version is below the next cluster update."""
        max_version = lifecycle_info.max_ocp_version
        if not max_version or not next_cluster_update:
            return None

        # Missing or unparsable bounds never count as a block
        if compare_versions(next_cluster_update, max_version) != VersionOrder.GT:
            return None

        next_version = clean_version(next_cluster_update)
        return UpgradeIssue(
            id=f"{installation.name}-version-ceiling",
            operator_name=installation.name,
            severity=IssueSeverity.CRITICAL,
            type=IssueType.VERSION_CEILING,
            title="Operator blocks cluster upgrade",
            description=(
                f"This operator version does not support OCP {next_version}. "
                f"Max supported: {max_version}"
            ),
            recommendation=(
                f"Upgrade operator to a version compatible with OCP {next_version} "
                "before upgrading the cluster."
            ),
            affects_cluster_upgrade=True,
            detected_at=now,
        )


def detect_available_upgrades(
    installation: OperatorInstallation,
    channels: List[OperatorChannel],
    lookup: LifecycleLookup,
) -> List[AvailableUpgrade]:
    """One candidate per channel whose head is strictly newer than the installed version."""
    upgrades = []

    for channel in channels:
        if not is_newer(channel.current_csv, installation.current_version):
            continue

        target = clean_version(channel.current_csv)
        upgrades.append(
            AvailableUpgrade(
                operator_name=installation.name,
                current_version=installation.current_version,
                target_version=channel.current_csv,
                channel=channel.name,
                lifecycle_info=lookup(installation.name, target),
            )
        )

    return upgrades


def calculate_health_status(issues: List[UpgradeIssue]) -> HealthStatus:
    """Worst severity wins."""
    if any(issue.severity == IssueSeverity.CRITICAL for issue in issues):
        return HealthStatus.CRITICAL
    if any(issue.severity == IssueSeverity.WARNING for issue in issues):
        return HealthStatus.WARNING
    return HealthStatus.HEALTHY
