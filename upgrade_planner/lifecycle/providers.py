"""Lifecycle metadata providers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from ..exceptions import LifecycleLookupError
from ..model.operator import LifecycleModel, OperatorLifecycleInfo
from ..upgrade.versions import clean_version
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Operators shipped with OpenShift Platform Plus follow the platform lifecycle
PLATFORM_ALIGNED_OPERATORS: List[str] = [
    "advanced-cluster-management",
    "multicluster-engine",
    "odf-operator",
    "quay-operator",
    "acs-operator",
]

ROLLING_RELEASE_OPERATORS: List[str] = [
    "compliance-operator",
    "cost-management-metrics-operator",
]


def infer_lifecycle_model(operator_name: str) -> LifecycleModel:
    """Guess the lifecycle model from well-known operator names."""
    if any(pattern in operator_name for pattern in PLATFORM_ALIGNED_OPERATORS):
        return LifecycleModel.PLATFORM_ALIGNED
    if any(pattern in operator_name for pattern in ROLLING_RELEASE_OPERATORS):
        return LifecycleModel.ROLLING_RELEASE
    return LifecycleModel.PLATFORM_AGNOSTIC


class LifecycleProvider(ABC):
    """Resolves lifecycle facts for an operator version."""

    @abstractmethod
    def get_lifecycle_info(self, operator_name: str, version: str) -> OperatorLifecycleInfo:
        pass

    def __call__(self, operator_name: str, version: str) -> OperatorLifecycleInfo:
        return self.get_lifecycle_info(operator_name, version)


class DefaultLifecycleProvider(LifecycleProvider):
    """Naming-pattern defaults: full support, no dates, no platform bounds."""

    def get_lifecycle_info(self, operator_name: str, version: str) -> OperatorLifecycleInfo:
        return OperatorLifecycleInfo(
            operator_name=operator_name,
            version=version,
            lifecycle_model=infer_lifecycle_model(operator_name),
        )


class StaticLifecycleProvider(LifecycleProvider):
    """Lifecycle facts read from a YAML file.

    Expected layout::

        operators:
          odf-operator:
            lifecycleModel: platform-aligned
            versions:
              "4.14.0":
                supportPhase: maintenance-support
                maintenanceSupportEndsAt: 2025-05-01T00:00:00Z
                maxOCPVersion: 4.15.0

    Operators or versions missing from the file fall back to the defaults.
    """

    def __init__(
        self,
        data: Optional[Dict[str, Any]] = None,
        fallback: Optional[LifecycleProvider] = None,
    ):
        self.operators: Dict[str, Any] = (data or {}).get("operators") or {}
        self.fallback = fallback or DefaultLifecycleProvider()

    @classmethod
    def from_file(
        cls, path: Path, fallback: Optional[LifecycleProvider] = None
    ) -> "StaticLifecycleProvider":
        """Load lifecycle data from a YAML (or JSON) file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LifecycleLookupError(f"Cannot load lifecycle data from {path}: {e}")

        if not isinstance(data, dict):
            raise LifecycleLookupError(f"Lifecycle data in {path} must be a mapping")

        logger.info(f"Loaded lifecycle data for {len(data.get('operators') or {})} operator(s)")
        return cls(data, fallback)

    def get_lifecycle_info(self, operator_name: str, version: str) -> OperatorLifecycleInfo:
        entry = self.operators.get(operator_name)
        if not entry:
            return self.fallback.get_lifecycle_info(operator_name, version)

        versions = entry.get("versions") or {}
        facts = versions.get(version) or versions.get(clean_version(version))
        if facts is None:
            return self.fallback.get_lifecycle_info(operator_name, version)

        payload = {
            "lifecycleModel": entry.get("lifecycleModel", infer_lifecycle_model(operator_name)),
            **facts,
            "operatorName": operator_name,
            "version": version,
        }
        try:
            return OperatorLifecycleInfo.model_validate(payload)
        except ValidationError as e:
            raise LifecycleLookupError(str(e), operator_name, version)
