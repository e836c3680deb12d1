"""Platform snapshot assembly."""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from ..exceptions import InventoryError, SnapshotError
from ..k8s.inventory import InventoryProvider
from ..lifecycle.providers import LifecycleProvider
from ..model.cluster import ClusterVersion, OperatorOmission, PlatformStatus
from ..model.operator import (
    HealthStatus,
    IssueSeverity,
    OperatorChannel,
    OperatorInstallation,
    OperatorStatus,
)
from ..upgrade.estimates import as_utc
from ..upgrade.issues import calculate_health_status, detect_available_upgrades, IssueDetector
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_WORKERS = 8
DEFAULT_DEADLINE_SECONDS = 30.0


def calculate_support_expiry(
    cluster: ClusterVersion, operators: List[OperatorStatus], now: datetime
) -> Optional[int]:
    """Days until the earliest maintenance-support end across cluster and operators."""
    dates = []

    if cluster.maintenance_support_ends_at:
        dates.append(cluster.maintenance_support_ends_at)

    for operator in operators:
        if operator.lifecycle_info.maintenance_support_ends_at:
            dates.append(operator.lifecycle_info.maintenance_support_ends_at)

    if not dates:
        return None

    earliest = min(as_utc(date) for date in dates)
    return (earliest - as_utc(now)).days


def build_platform_status(
    cluster: ClusterVersion,
    operators: List[OperatorStatus],
    omitted: Optional[List[OperatorOmission]] = None,
    now: Optional[datetime] = None,
) -> PlatformStatus:
    """Aggregate issue counts, overall health and support expiry."""
    now = now or datetime.now(timezone.utc)

    total_issues = sum(len(op.issues) for op in operators)
    critical_issues = sum(
        1 for op in operators for issue in op.issues if issue.severity == IssueSeverity.CRITICAL
    )

    if critical_issues > 0:
        overall_health = HealthStatus.CRITICAL
    elif total_issues > 0:
        overall_health = HealthStatus.WARNING
    else:
        overall_health = HealthStatus.HEALTHY

    return PlatformStatus(
        cluster=cluster,
        operators=operators,
        overall_health=overall_health,
        total_issues=total_issues,
        critical_issues=critical_issues,
        support_expires_in=calculate_support_expiry(cluster, operators, now),
        omitted_operators=omitted or [],
        captured_at=now,
    )


class SnapshotBuilder:
    """Gathers per-operator facts into a PlatformStatus.

    Cluster version and subscription list are required; without them the
    snapshot fails as a whole. Operator details are fetched concurrently and
    an operator whose details fail or arrive after the deadline is left out
    and recorded as omitted.
    """

    def __init__(
        self,
        inventory: InventoryProvider,
        lifecycle: LifecycleProvider,
        detector: Optional[IssueDetector] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        deadline_seconds: Optional[float] = DEFAULT_DEADLINE_SECONDS,
    ):
        self.inventory = inventory
        self.lifecycle = lifecycle
        self.detector = detector or IssueDetector()
        self.max_workers = max_workers
        self.deadline_seconds = deadline_seconds

    def build(self, now: Optional[datetime] = None) -> PlatformStatus:
        """Take a snapshot of the cluster and every subscribed operator."""
        now = now or datetime.now(timezone.utc)
        cluster = self.get_cluster_version()

        try:
            installations = self.inventory.list_subscriptions()
        except InventoryError as e:
            logger.error(f"Failed to list operator subscriptions: {e}")
            raise SnapshotError(f"Failed to list operator subscriptions: {e}") from e

        logger.info(f"Building status for {len(installations)} operator(s)")
        operators, omitted = self._gather(installations, cluster, now)

        if omitted:
            logger.warning(f"Omitted {len(omitted)} operator(s) from the snapshot")
        return build_platform_status(cluster, operators, omitted, now)

    def get_cluster_version(self) -> ClusterVersion:
        try:
            return self.inventory.get_cluster_version()
        except InventoryError as e:
            logger.error(f"Failed to get cluster version: {e}")
            raise SnapshotError(f"Failed to get cluster version: {e}") from e

    def build_operator_status(
        self,
        installation: OperatorInstallation,
        cluster: ClusterVersion,
        now: Optional[datetime] = None,
    ) -> OperatorStatus:
        """Resolve lifecycle, channels, upgrades and issues for one operator."""
        now = now or datetime.now(timezone.utc)

        lifecycle_info = self.lifecycle.get_lifecycle_info(
            installation.name, installation.current_version
        )
        channels = self.inventory.get_channels(installation)

        current_channel = next(
            (channel for channel in channels if channel.name == installation.current_channel),
            None,
        ) or OperatorChannel(
            name=installation.current_channel,
            current_csv=installation.current_version,
        )

        upgrades = detect_available_upgrades(installation, channels, self.lifecycle)
        issues = self.detector.detect(
            installation, lifecycle_info, current_channel, cluster.next_update, now
        )

        return OperatorStatus(
            installation=installation,
            lifecycle_info=lifecycle_info,
            available_upgrades=upgrades,
            current_channel=current_channel,
            available_channels=channels,
            issues=issues,
            health_status=calculate_health_status(issues),
        )

    def _gather(
        self,
        installations: List[OperatorInstallation],
        cluster: ClusterVersion,
        now: datetime,
    ) -> Tuple[List[OperatorStatus], List[OperatorOmission]]:
        if not installations:
            return [], []

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        futures: List[Tuple[OperatorInstallation, Future]] = []
        try:
            for installation in installations:
                future = executor.submit(self.build_operator_status, installation, cluster, now)
                futures.append((installation, future))
            wait([future for _, future in futures], timeout=self.deadline_seconds)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        operators = []
        omitted = []
        # Keep subscription order regardless of completion order
        for installation, future in futures:
            # Work still queued at the deadline was cancelled by the shutdown
            if future.cancelled() or not future.done():
                logger.warning(f"Operator {installation.key} missed the snapshot deadline")
                omitted.append(self._omission(installation, "deadline exceeded"))
                continue

            try:
                operators.append(future.result())
            except Exception as e:
                logger.error(f"Failed to get operator status for {installation.key}: {e}")
                omitted.append(self._omission(installation, str(e)))

        return operators, omitted

    def _omission(self, installation: OperatorInstallation, reason: str) -> OperatorOmission:
        return OperatorOmission(
            name=installation.name, namespace=installation.namespace, reason=reason
        )
