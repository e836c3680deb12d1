"""Maintenance window scheduling."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..model.cluster import PlatformStatus
from ..model.plan import MaintenanceWindow, Priority, UpgradePath
from ..utils.logger import get_logger

logger = get_logger(__name__)

CRITICAL_WINDOW_DAYS = 7
LIFECYCLE_WINDOW_DAYS = 14
REGULAR_WINDOW_DAYS = 30

# Support expiring sooner than this pulls the aggressive path forward
SUPPORT_EXPIRY_THRESHOLD_DAYS = 90


def _find_path(paths: List[UpgradePath], path_id: str) -> Optional[UpgradePath]:
    return next((path for path in paths if path.id == path_id), None)


class MaintenanceScheduler:
    """Turns generated paths into prioritized maintenance windows.

    Windows come out in escalation order: immediate critical work, regular
    maintenance, then lifecycle-driven work. They are not re-sorted by date.
    """

    def schedule(
        self,
        status: PlatformStatus,
        paths: List[UpgradePath],
        now: Optional[datetime] = None,
    ) -> List[MaintenanceWindow]:
        now = now or datetime.now(timezone.utc)
        windows = []

        critical_path = _find_path(paths, "critical-issues-path")
        if status.critical_issues > 0 and critical_path:
            windows.append(
                self._window(
                    "immediate-window",
                    now + timedelta(days=CRITICAL_WINDOW_DAYS),
                    Priority.HIGH,
                    "Critical issues detected that may block cluster operations",
                    critical_path,
                )
            )

        balanced_path = _find_path(paths, "balanced-path")
        if balanced_path:
            windows.append(
                self._window(
                    "regular-maintenance",
                    now + timedelta(days=REGULAR_WINDOW_DAYS),
                    Priority.HIGH if status.critical_issues > 0 else Priority.MEDIUM,
                    "Regular maintenance to keep platform current and supported",
                    balanced_path,
                )
            )

        aggressive_path = _find_path(paths, "aggressive-path")
        expires_in = status.support_expires_in
        if (
            expires_in is not None
            and expires_in < SUPPORT_EXPIRY_THRESHOLD_DAYS
            and aggressive_path
        ):
            windows.append(
                self._window(
                    "lifecycle-maintenance",
                    now + timedelta(days=LIFECYCLE_WINDOW_DAYS),
                    Priority.HIGH,
                    f"Platform support expires in {expires_in} days",
                    aggressive_path,
                )
            )

        logger.info(f"Scheduled {len(windows)} maintenance window(s)")
        return windows

    def _window(
        self,
        window_id: str,
        recommended_date: datetime,
        priority: Priority,
        reason: str,
        path: UpgradePath,
    ) -> MaintenanceWindow:
        return MaintenanceWindow(
            id=window_id,
            recommended_date=recommended_date,
            priority=priority,
            reason=reason,
            affected_components=path.affected_components,
            estimated_duration=path.estimated_duration,
            upgrade_path=path,
        )
