"""Upgrade recommendation orchestration."""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..config import Settings
from ..k8s.client import K8sClient
from ..k8s.inventory import FileInventory, InventoryProvider, KubectlInventory
from ..lifecycle.cache import CachedLifecycleProvider
from ..lifecycle.providers import DefaultLifecycleProvider, LifecycleProvider, StaticLifecycleProvider
from ..model.cluster import PlatformStatus
from ..model.operator import OperatorLifecycleInfo, OperatorStatus
from ..model.plan import MaintenanceWindow, UpgradePath, UpgradeRecommendations
from ..upgrade.estimates import (
    FixedOffsetSupportEstimator,
    LifecycleSupportEstimator,
    SupportEstimator,
)
from ..upgrade.planner import UpgradePlanner
from ..upgrade.scheduler import MaintenanceScheduler
from ..utils.logger import get_logger
from .snapshot import SnapshotBuilder

logger = get_logger(__name__)


class RecommendationEngine:
    """Turns one platform snapshot into paths and maintenance windows.

    Pure with respect to its input: the same snapshot and ``now`` always give
    the same recommendations.
    """

    def __init__(
        self,
        planner: Optional[UpgradePlanner] = None,
        scheduler: Optional[MaintenanceScheduler] = None,
    ):
        self.planner = planner or UpgradePlanner()
        self.scheduler = scheduler or MaintenanceScheduler()

    def recommend(
        self, status: PlatformStatus, now: Optional[datetime] = None
    ) -> UpgradeRecommendations:
        now = now or datetime.now(timezone.utc)

        paths = self.planner.generate_paths(status, now)
        windows = self.scheduler.schedule(status, paths, now)

        return UpgradeRecommendations(
            platform_status=status,
            recommended_paths=paths,
            maintenance_windows=windows,
            generated_at=now,
        )


class UpgradePlannerService:
    """Request-level entry point: snapshot the platform, then recommend."""

    def __init__(
        self,
        inventory: InventoryProvider,
        lifecycle: LifecycleProvider,
        engine: Optional[RecommendationEngine] = None,
        snapshot_builder: Optional[SnapshotBuilder] = None,
    ):
        self.inventory = inventory
        self.lifecycle = lifecycle
        self.engine = engine or RecommendationEngine()
        self.snapshot_builder = snapshot_builder or SnapshotBuilder(inventory, lifecycle)

    def get_platform_status(self) -> PlatformStatus:
        return self.snapshot_builder.build()

    def get_operator_status(self, namespace: str, name: str) -> Optional[OperatorStatus]:
        """Status of a single operator, or None if it is not subscribed."""
        installation = self.inventory.get_subscription(namespace, name)
        if not installation:
            return None

        cluster = self.snapshot_builder.get_cluster_version()
        return self.snapshot_builder.build_operator_status(installation, cluster)

    def get_lifecycle_info(self, operator_name: str, version: str) -> OperatorLifecycleInfo:
        return self.lifecycle.get_lifecycle_info(operator_name, version)

    def get_recommendations(self) -> UpgradeRecommendations:
        logger.info("Generating upgrade recommendations")
        status = self.get_platform_status()
        return self.engine.recommend(status)

    def get_upgrade_path(self, path_id: str) -> Optional[UpgradePath]:
        return self.get_recommendations().find_path(path_id)

    def get_maintenance_windows(self) -> List[MaintenanceWindow]:
        return self.get_recommendations().maintenance_windows


def build_service(
    settings: Settings,
    snapshot_file: Optional[Path] = None,
    context: Optional[str] = None,
) -> UpgradePlannerService:
    """Wire a service from settings: offline dump or live cluster."""
    if snapshot_file:
        inventory: InventoryProvider = FileInventory.from_file(snapshot_file)
    else:
        client = K8sClient(context=context or settings.kube_context)
        inventory = KubectlInventory(client, request_timeout=settings.snapshot_deadline_seconds)

    if settings.lifecycle_data_file:
        source: LifecycleProvider = StaticLifecycleProvider.from_file(settings.lifecycle_data_file)
    else:
        source = DefaultLifecycleProvider()
    lifecycle = CachedLifecycleProvider(source, ttl_seconds=settings.lifecycle_cache_ttl_seconds)

    estimator: SupportEstimator = FixedOffsetSupportEstimator(settings.support_horizon_months)
    if settings.support_estimator == "lifecycle":
        estimator = LifecycleSupportEstimator(fallback=estimator)

    planner = UpgradePlanner(estimator)
    snapshot_builder = SnapshotBuilder(
        inventory,
        lifecycle,
        max_workers=settings.max_workers,
        deadline_seconds=settings.snapshot_deadline_seconds,
    )
    return UpgradePlannerService(
        inventory,
        lifecycle,
        engine=RecommendationEngine(planner=planner),
        snapshot_builder=snapshot_builder,
    )
