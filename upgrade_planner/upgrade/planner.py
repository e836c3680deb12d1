"""Upgrade path generation.

Four independent strategies each turn a platform snapshot into an ordered
list of steps. Every path opens with the same verification step; a strategy
that has nothing to add after it returns None instead of a no-op path.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..model.cluster import PlatformStatus
from ..model.operator import AvailableUpgrade, IssueSeverity, OperatorStatus
from ..model.plan import Confidence, StepType, UpgradePath, UpgradeStep
from ..utils.logger import get_logger
from .estimates import calculate_total_duration, FixedOffsetSupportEstimator, SupportEstimator
from .versions import is_newer, parse_version, version_diff, VersionDiff

logger = get_logger(__name__)

CLUSTER_TARGET = "OpenShift Cluster"

VERIFICATION_DURATION = "15 minutes"
OPERATOR_DURATION = "10-20 minutes"
CLUSTER_DURATION = "45-90 minutes"

# Substrings that mark a channel as the supported/stable track
STABLE_CHANNEL_MARKERS = ("stable", "recommended")

# Smaller jumps rank first when picking a conservative upgrade
CONSERVATIVE_RANK: Dict[VersionDiff, int] = {
    VersionDiff.PATCH: 0,
    VersionDiff.MINOR: 1,
}


def find_critical_upgrade(operator: OperatorStatus) -> Optional[AvailableUpgrade]:
    """First listed upgrade, the earliest known fix."""
    return operator.available_upgrades[0] if operator.available_upgrades else None


def find_conservative_upgrade(operator: OperatorStatus) -> Optional[AvailableUpgrade]:
    """Smallest upgrade: any patch before any minor, lowest target within a kind.

    Major jumps and candidates whose magnitude cannot be computed are never
    chosen.
    """
    current = operator.installation.current_version
    candidates = []

    for position, upgrade in enumerate(operator.available_upgrades):
        diff = version_diff(current, upgrade.target_version)
        if diff not in CONSERVATIVE_RANK:
            continue
        key = (CONSERVATIVE_RANK[diff], parse_version(upgrade.target_version), position)
        candidates.append((key, upgrade))

    if not candidates:
        return None
    return min(candidates, key=lambda item: item[0])[1]


def find_latest_upgrade(operator: OperatorStatus) -> Optional[AvailableUpgrade]:
    """Numerically highest target; the first one listed wins a tie."""
    latest = None
    for upgrade in operator.available_upgrades:
        if parse_version(upgrade.target_version) is None:
            continue
        if latest is None or is_newer(upgrade.target_version, latest.target_version):
            latest = upgrade
    return latest


def find_balanced_upgrade(operator: OperatorStatus) -> Optional[AvailableUpgrade]:
    """Last upgrade on a stable/recommended channel, else the middle one by position."""
    upgrades = operator.available_upgrades
    if not upgrades:
        return None

    stable = [
        upgrade
        for upgrade in upgrades
        if any(marker in upgrade.channel for marker in STABLE_CHANNEL_MARKERS)
    ]
    if stable:
        return stable[-1]

    return upgrades[len(upgrades) // 2]


def is_significantly_outdated(operator: OperatorStatus) -> bool:
    """Behind the last listed upgrade by at least a minor version."""
    if not operator.available_upgrades:
        return False

    diff = version_diff(
        operator.installation.current_version,
        operator.available_upgrades[-1].target_version,
    )
    return diff in (VersionDiff.MINOR, VersionDiff.MAJOR)


class UpgradePlanner:
    """Generates the critical, conservative, aggressive and balanced upgrade paths."""

    def __init__(self, support_estimator: Optional[SupportEstimator] = None):
        self.support_estimator = support_estimator or FixedOffsetSupportEstimator()

    def generate_paths(
        self, status: PlatformStatus, now: Optional[datetime] = None
    ) -> List[UpgradePath]:
        """Run every strategy and keep the paths that were proposed."""
        now = now or datetime.now(timezone.utc)
        strategies = [
            self.critical_issues_path,
            self.conservative_path,
            self.aggressive_path,
            self.balanced_path,
        ]

        paths = []
        for strategy in strategies:
            path = strategy(status, now)
            if path:
                paths.append(path)

        logger.info(f"Generated {len(paths)} upgrade path(s)")
        return paths

    def critical_issues_path(self, status: PlatformStatus, now: datetime) -> Optional[UpgradePath]:
        """Fix operators with critical issues, then move the cluster to its next update."""
        critical_operators = status.operators_with(IssueSeverity.CRITICAL)
        if not critical_operators:
            return None

        steps = [self._verification_step()]
        for operator in critical_operators:
            upgrade = find_critical_upgrade(operator)
            if upgrade:
                self._add_operator_step(
                    steps,
                    operator,
                    upgrade,
                    f"Upgrade {operator.installation.display_name} to resolve critical issues",
                    ["Review operator documentation", "Check for breaking changes"],
                    "Uninstall and reinstall previous version",
                )

        if status.cluster.next_update:
            self._add_cluster_step(
                steps,
                status,
                status.cluster.next_update,
                f"Upgrade OpenShift to {status.cluster.next_update}",
                ["All operators compatible", "Cluster health verified", "Backup completed"],
            )

        return self._build_path(
            "critical-issues-path",
            "Address critical issues that block cluster operations and upgrades",
            Confidence.HIGH,
            steps,
            ["Resolves blocking issues", "Enables cluster upgrade", "Reduces immediate risks"],
            ["May require multiple operator updates", "Some downtime expected"],
            status,
            now,
        )

    def conservative_path(self, status: PlatformStatus, now: datetime) -> Optional[UpgradePath]:
        """Smallest possible upgrade for operators with warnings; never touches the cluster."""
        warning_operators = status.operators_with(IssueSeverity.WARNING)
        if not warning_operators:
            return None

        steps = [self._verification_step()]
        for operator in warning_operators:
            upgrade = find_conservative_upgrade(operator)
            if upgrade:
                self._add_operator_step(
                    steps,
                    operator,
                    upgrade,
                    f"Conservative upgrade of {operator.installation.display_name}",
                    ["Review release notes"],
                    "Reinstall previous version",
                )

        return self._build_path(
            "conservative-path",
            "Minimal upgrades to extend support without major version changes",
            Confidence.HIGH,
            steps,
            ["Minimal risk", "Extends support period", "Small scope of changes"],
            ["May need another upgrade soon", "Not addressing all available updates"],
            status,
            now,
        )

    def aggressive_path(self, status: PlatformStatus, now: datetime) -> Optional[UpgradePath]:
        """Everything to its newest version, cluster included."""
        steps = [self._verification_step()]
        for operator in status.operators:
            upgrade = find_latest_upgrade(operator)
            if upgrade:
                self._add_operator_step(
                    steps,
                    operator,
                    upgrade,
                    f"Upgrade {operator.installation.display_name} to latest version",
                    ["Review all release notes", "Check for breaking changes"],
                    "Reinstall previous version",
                )

        latest = status.cluster.latest_update
        if latest:
            self._add_cluster_step(
                steps,
                status,
                latest,
                f"Upgrade OpenShift to latest version {latest}",
                ["All operators compatible", "Cluster health verified", "Backup completed"],
            )

        return self._build_path(
            "aggressive-path",
            "Upgrade all components to latest versions for maximum support duration",
            Confidence.MEDIUM,
            steps,
            [
                "Maximum support duration",
                "Latest features and fixes",
                "Fewest future maintenance windows",
            ],
            [
                "More potential for breaking changes",
                "Longer maintenance window",
                "More testing required",
            ],
            status,
            now,
        )

    def balanced_path(self, status: PlatformStatus, now: datetime) -> Optional[UpgradePath]:
        """Operators with issues or real drift to a stable target, then the next cluster update."""
        steps = [self._verification_step()]
        qualified = False
        for operator in status.operators:
            if not (operator.issues or is_significantly_outdated(operator)):
                continue
            qualified = True
            upgrade = find_balanced_upgrade(operator)
            if upgrade:
                self._add_operator_step(
                    steps,
                    operator,
                    upgrade,
                    f"Upgrade {operator.installation.display_name} to recommended version",
                    ["Review release notes"],
                    "Reinstall previous version",
                )

        # No operator has issues or real drift
        if not qualified:
            return None

        if status.cluster.next_update:
            self._add_cluster_step(
                steps,
                status,
                status.cluster.next_update,
                f"Upgrade OpenShift to {status.cluster.next_update}",
                ["All operators compatible", "Cluster health verified"],
                rollback="Not supported",
            )

        return self._build_path(
            "balanced-path",
            "Optimal balance of risk, effort, and support duration",
            Confidence.HIGH,
            steps,
            [
                "Good balance of risk and reward",
                "Addresses key issues",
                "Reasonable maintenance window",
                "Extended support period",
            ],
            ["Some operator updates required", "Moderate testing effort"],
            status,
            now,
        )

    def _verification_step(self) -> UpgradeStep:
        return UpgradeStep(
            order=1,
            type=StepType.VERIFICATION,
            target="cluster",
            description="Verify cluster health and backup current state",
            estimated_duration=VERIFICATION_DURATION,
            required_prerequisites=["Cluster backup", "etcd snapshot"],
            rollback_strategy="Restore from backup",
        )

    def _add_operator_step(
        self,
        steps: List[UpgradeStep],
        operator: OperatorStatus,
        upgrade: AvailableUpgrade,
        description: str,
        prerequisites: List[str],
        rollback: str,
    ) -> None:
        steps.append(
            UpgradeStep(
                order=len(steps) + 1,
                type=StepType.OPERATOR,
                target=operator.installation.name,
                from_version=operator.installation.current_version,
                to_version=upgrade.target_version,
                channel=upgrade.channel,
                description=description,
                estimated_duration=OPERATOR_DURATION,
                required_prerequisites=prerequisites,
                rollback_strategy=rollback,
            )
        )

    def _add_cluster_step(
        self,
        steps: List[UpgradeStep],
        status: PlatformStatus,
        target_version: str,
        description: str,
        prerequisites: List[str],
        rollback: str = "Not supported - ensure all prerequisites are met",
    ) -> None:
        steps.append(
            UpgradeStep(
                order=len(steps) + 1,
                type=StepType.CLUSTER,
                target=CLUSTER_TARGET,
                from_version=status.cluster.current_version,
                to_version=target_version,
                channel=status.cluster.channel,
                description=description,
                estimated_duration=CLUSTER_DURATION,
                required_prerequisites=prerequisites,
                rollback_strategy=rollback,
            )
        )

    def _build_path(
        self,
        path_id: str,
        description: str,
        confidence: Confidence,
        steps: List[UpgradeStep],
        benefits: List[str],
        risks: List[str],
        status: PlatformStatus,
        now: datetime,
    ) -> Optional[UpgradePath]:
        if len(steps) == 1:
            logger.debug(f"Skipping {path_id}: nothing to upgrade")
            return None

        return UpgradePath(
            id=path_id,
            description=description,
            estimated_duration=calculate_total_duration(steps),
            confidence=confidence,
            steps=steps,
            benefits=benefits,
            risks=risks,
            supported_until=self.support_estimator.estimate(status, steps, now),
        )
