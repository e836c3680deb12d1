"""Core business logic."""

from .recommender import RecommendationEngine, UpgradePlannerService, build_service
from .reporter import RecommendationReporter
from .snapshot import SnapshotBuilder, build_platform_status

__all__ = [
    "RecommendationEngine",
    "RecommendationReporter",
    "SnapshotBuilder",
    "UpgradePlannerService",
    "build_platform_status",
    "build_service",
]
