"""Test lifecycle providers and caching."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from upgrade_planner.exceptions import LifecycleLookupError
from upgrade_planner.lifecycle import (
    CachedLifecycleProvider,
    DefaultLifecycleProvider,
    StaticLifecycleProvider,
)
from upgrade_planner.lifecycle.providers import infer_lifecycle_model
from upgrade_planner.model.operator import LifecycleModel, OperatorLifecycleInfo, SupportPhase

LIFECYCLE_YAML = """
operators:
  odf-operator:
    versions:
      "4.14.0":
        supportPhase: maintenance-support
        maintenanceSupportEndsAt: "2025-05-01T00:00:00Z"
        maxOCPVersion: 4.15.0
  openshift-gitops-operator:
    lifecycleModel: platform-agnostic
    versions:
      "1.10.0":
        supportPhase: end-of-life
        eolAt: "2024-05-01T00:00:00Z"
"""


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestDefaultLifecycleProvider:
    def test_naming_patterns(self):
        assert infer_lifecycle_model("odf-operator") == LifecycleModel.PLATFORM_ALIGNED
        assert infer_lifecycle_model("compliance-operator") == LifecycleModel.ROLLING_RELEASE
        assert infer_lifecycle_model("web-terminal") == LifecycleModel.PLATFORM_AGNOSTIC

    def test_defaults(self):
        info = DefaultLifecycleProvider().get_lifecycle_info("web-terminal", "1.8.0")

        assert info.operator_name == "web-terminal"
        assert info.version == "1.8.0"
        assert info.support_phase == SupportPhase.FULL_SUPPORT
        assert info.max_ocp_version is None
        assert info.maintenance_support_ends_at is None


class TestStaticLifecycleProvider:
    @pytest.fixture
    def lifecycle_file(self, tmp_path):
        path = tmp_path / "lifecycle.yaml"
        path.write_text(LIFECYCLE_YAML)
        return path

    def test_from_file(self, lifecycle_file):
        provider = StaticLifecycleProvider.from_file(lifecycle_file)

        info = provider.get_lifecycle_info("odf-operator", "odf-operator.v4.14.0")

        assert info.version == "odf-operator.v4.14.0"
        assert info.lifecycle_model == LifecycleModel.PLATFORM_ALIGNED
        assert info.support_phase == SupportPhase.MAINTENANCE_SUPPORT
        assert info.maintenance_support_ends_at == datetime(2025, 5, 1, tzinfo=timezone.utc)
        assert info.max_ocp_version == "4.15.0"

    def test_explicit_lifecycle_model(self, lifecycle_file):
        provider = StaticLifecycleProvider.from_file(lifecycle_file)

        info = provider.get_lifecycle_info("openshift-gitops-operator", "1.10.0")

        assert info.lifecycle_model == LifecycleModel.PLATFORM_AGNOSTIC
        assert info.support_phase == SupportPhase.END_OF_LIFE

    def test_unknown_entries_fall_back(self, lifecycle_file):
        provider = StaticLifecycleProvider.from_file(lifecycle_file)

        assert provider.get_lifecycle_info("odf-operator", "4.15.0").support_phase == (
            SupportPhase.FULL_SUPPORT
        )
        assert provider.get_lifecycle_info("web-terminal", "1.8.0").max_ocp_version is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(LifecycleLookupError):
            StaticLifecycleProvider.from_file(tmp_path / "missing.yaml")

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "lifecycle.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(LifecycleLookupError):
            StaticLifecycleProvider.from_file(path)

    def test_invalid_facts(self):
        provider = StaticLifecycleProvider(
            {"operators": {"x": {"versions": {"1.0.0": {"supportPhase": "forever"}}}}}
        )

        with pytest.raises(LifecycleLookupError) as exc_info:
            provider.get_lifecycle_info("x", "1.0.0")

        assert exc_info.value.operator_name == "x"
        assert exc_info.value.version == "1.0.0"


class TestCachedLifecycleProvider:
    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.backend = Mock()
        self.backend.get_lifecycle_info.side_effect = lambda name, version: OperatorLifecycleInfo(
            operator_name=name, version=version, support_phase=SupportPhase.MAINTENANCE_SUPPORT
        )
        self.provider = CachedLifecycleProvider(self.backend, ttl_seconds=60, clock=self.clock)

    def test_caches_within_ttl(self):
        first = self.provider.get_lifecycle_info("x", "1.0.0")
        self.clock.now = 59
        second = self.provider.get_lifecycle_info("x", "1.0.0")

        assert first is second
        assert self.backend.get_lifecycle_info.call_count == 1
        assert len(self.provider) == 1

    def test_refreshes_after_ttl(self):
        self.provider.get_lifecycle_info("x", "1.0.0")
        self.clock.now = 60
        self.provider.get_lifecycle_info("x", "1.0.0")

        assert self.backend.get_lifecycle_info.call_count == 2

    def test_keys_by_name_and_version(self):
        self.provider.get_lifecycle_info("x", "1.0.0")
        self.provider.get_lifecycle_info("x", "1.1.0")
        self.provider.get_lifecycle_info("y", "1.0.0")

        assert self.backend.get_lifecycle_info.call_count == 3
        assert len(self.provider) == 3

    def test_invalidate(self):
        self.provider.get_lifecycle_info("x", "1.0.0")
        self.provider.invalidate()
        self.provider.get_lifecycle_info("x", "1.0.0")

        assert self.backend.get_lifecycle_info.call_count == 2

    def test_lookup_failure_uses_defaults_uncached(self):
        """Test a failed lookup degrades to defaults and is retried next time."""
        self.backend.get_lifecycle_info.side_effect = LifecycleLookupError("boom", "x", "1.0.0")

        info = self.provider.get_lifecycle_info("x", "1.0.0")

        assert info.support_phase == SupportPhase.FULL_SUPPORT
        assert len(self.provider) == 0

    def test_callable(self):
        assert self.provider("x", "1.0.0").support_phase == SupportPhase.MAINTENANCE_SUPPORT
