"""Duration and supported-lifetime estimates for upgrade paths."""

import calendar
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..model.cluster import PlatformStatus
from ..model.plan import StepType, UpgradeStep

DURATION_PATTERN = re.compile(r"(\d+)\s*(?:-\s*(\d+))?\s*minutes?")

DEFAULT_SUPPORT_MONTHS = 18


def step_upper_bound(estimate: str) -> int:
    """Upper bound in minutes of an estimate like ``15 minutes`` or ``10-20 minutes``."""
    match = DURATION_PATTERN.search(estimate or "")
    if not match:
        return 0
    return int(match.group(2) or match.group(1))


def total_minutes(steps: Iterable[UpgradeStep]) -> int:
    return sum(step_upper_bound(step.estimated_duration) for step in steps)


def format_duration(minutes: int) -> str:
    """Minutes-only below an hour, ``Hh Mm`` from there on."""
    if minutes < 60:
        return f"{minutes} minutes"
    hours, remainder = divmod(minutes, 60)
    return f"{hours}h {remainder}m"


def calculate_total_duration(steps: Iterable[UpgradeStep]) -> str:
    """Sum of each step's maximum estimate, formatted for display."""
    return format_duration(total_minutes(steps))


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift a datetime by whole months, clamping the day to the target month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class SupportEstimator(ABC):
    """Estimates how long the platform stays supported once a path is applied."""

    @abstractmethod
    def estimate(
        self, status: PlatformStatus, steps: List[UpgradeStep], now: datetime
    ) -> datetime:
        pass


class FixedOffsetSupportEstimator(SupportEstimator):
    """Provisional estimate: a typical OCP support cycle from today."""

    def __init__(self, months: int = DEFAULT_SUPPORT_MONTHS):
        self.months = months

    def estimate(
        self, status: PlatformStatus, steps: List[UpgradeStep], now: datetime
    ) -> datetime:
        return add_months(now, self.months)


class LifecycleSupportEstimator(SupportEstimator):
    """Earliest support end among the versions a path lands on.

    Operator steps are matched against the lifecycle info already resolved for
    their candidate upgrade. When none of the targets carry a date the
    fallback estimator decides.
    """

    def __init__(self, fallback: Optional[SupportEstimator] = None):
        self.fallback = fallback or FixedOffsetSupportEstimator()

    def estimate(
        self, status: PlatformStatus, steps: List[UpgradeStep], now: datetime
    ) -> datetime:
        dates = []

        for step in steps:
            if step.type != StepType.OPERATOR:
                continue
            end = self._support_end(status, step)
            if end:
                dates.append(as_utc(end))

        if not dates:
            return self.fallback.estimate(status, steps, now)
        return min(dates)

    def _support_end(self, status: PlatformStatus, step: UpgradeStep) -> Optional[datetime]:
        for operator in status.operators:
            if operator.installation.name != step.target:
                continue
            for upgrade in operator.available_upgrades:
                if upgrade.target_version == step.to_version and upgrade.channel == step.channel:
                    info = upgrade.lifecycle_info
                    return info.maintenance_support_ends_at or info.eol_at
        return None
