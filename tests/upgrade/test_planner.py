"""Test upgrade path generation."""

from datetime import datetime, timezone

from upgrade_planner.model.operator import IssueSeverity, IssueType
from upgrade_planner.model.plan import Confidence, StepType
from upgrade_planner.upgrade.planner import (
    CLUSTER_TARGET,
    find_balanced_upgrade,
    find_conservative_upgrade,
    find_critical_upgrade,
    find_latest_upgrade,
    is_significantly_outdated,
    UpgradePlanner,
)


def _ids(paths):
    return [path.id for path in paths]


def _moves(path):
    return [(step.type, step.target, step.to_version) for step in path.steps]


class TestStrategySelection:
    def test_critical_takes_first_listed(self, make_operator):
        operator = make_operator(upgrades=[("1.4.0", "fast"), ("1.3.0", "stable")])
        assert find_critical_upgrade(operator).target_version == "1.4.0"
        assert find_critical_upgrade(make_operator()) is None

    def test_conservative_prefers_patch_then_lowest(self, make_operator):
        """Test a patch wins over a minor and the lowest patch wins among patches."""
        operator = make_operator(
            upgrades=[
                ("2.0.0", "fast"),
                ("1.3.0", "stable"),
                ("1.2.9", "candidate"),
                ("1.2.4", "stable-1.2"),
            ]
        )
        assert find_conservative_upgrade(operator).target_version == "1.2.4"

    def test_conservative_falls_back_to_minor(self, make_operator):
        operator = make_operator(upgrades=[("2.1.0", "fast"), ("1.5.0", "stable"), ("1.3.0", "x")])
        assert find_conservative_upgrade(operator).target_version == "1.3.0"

    def test_conservative_never_picks_major(self, make_operator):
        operator = make_operator(upgrades=[("2.0.0", "fast"), ("3.1.0", "latest")])
        assert find_conservative_upgrade(operator) is None

    def test_conservative_skips_unparsable(self, make_operator):
        operator = make_operator(version="unknown", upgrades=[("1.2.1", "stable")])
        assert find_conservative_upgrade(operator) is None

    def test_latest_highest_target(self, make_operator):
        operator = make_operator(
            upgrades=[("1.3.0", "stable"), ("1.10.0", "fast"), ("nightly", "dev"), ("1.9.9", "x")]
        )
        assert find_latest_upgrade(operator).target_version == "1.10.0"

    def test_latest_tie_keeps_first(self, make_operator):
        operator = make_operator(upgrades=[("op.v1.3.0", "stable"), ("v1.3.0", "fast")])
        assert find_latest_upgrade(operator).channel == "stable"

    def test_balanced_prefers_last_stable_channel(self, make_operator):
        operator = make_operator(
            upgrades=[
                ("1.3.0", "stable-1.3"),
                ("1.4.0", "recommended"),
                ("1.5.0", "fast"),
            ]
        )
        assert find_balanced_upgrade(operator).target_version == "1.4.0"

    def test_balanced_middle_without_stable(self, make_operator):
        operator = make_operator(
            upgrades=[("1.3.0", "fast"), ("1.4.0", "candidate"), ("1.5.0", "preview")]
        )
        assert find_balanced_upgrade(operator).target_version == "1.4.0"

        two = make_operator(upgrades=[("1.3.0", "fast"), ("1.4.0", "candidate")])
        assert find_balanced_upgrade(two).target_version == "1.4.0"

    def test_significantly_outdated(self, make_operator):
        assert is_significantly_outdated(make_operator(upgrades=[("1.3.0", "fast")]))
        assert is_significantly_outdated(make_operator(upgrades=[("2.0.0", "fast")]))
        assert not is_significantly_outdated(make_operator(upgrades=[("1.2.5", "fast")]))
        assert not is_significantly_outdated(make_operator())


class TestUpgradePlanner:
    def setup_method(self):
        """Set up test fixtures."""
        self.planner = UpgradePlanner()

    def test_healthy_operator_with_patch(self, make_operator, make_status, now):
        """Test a healthy operator with one patch only gets the aggressive path."""
        status = make_status([make_operator("x", "1.2.0", upgrades=[("1.2.5", "stable")])])

        paths = self.planner.generate_paths(status, now)

        assert _ids(paths) == ["aggressive-path"]
        aggressive = paths[0]
        assert _moves(aggressive) == [
            (StepType.VERIFICATION, "cluster", None),
            (StepType.OPERATOR, "x", "1.2.5"),
        ]
        assert aggressive.steps[1].from_version == "1.2.0"
        assert aggressive.confidence == Confidence.MEDIUM
        assert aggressive.estimated_duration == "35 minutes"

    def test_blocking_operator(self, make_operator, make_issue, make_cluster, make_status, now):
        """Test a version ceiling puts the operator ahead of the next cluster update."""
        issue = make_issue("y", IssueSeverity.CRITICAL, IssueType.VERSION_CEILING)
        operator = make_operator("y", "1.2.0", upgrades=[("2.0.0", "stable")], issues=[issue])
        status = make_status(
            [operator], cluster=make_cluster("4.16.0", updates=["4.16.1", "4.16.5"])
        )

        paths = self.planner.generate_paths(status, now)

        assert _ids(paths) == ["critical-issues-path", "aggressive-path", "balanced-path"]
        critical = paths[0]
        assert _moves(critical) == [
            (StepType.VERIFICATION, "cluster", None),
            (StepType.OPERATOR, "y", "2.0.0"),
            (StepType.CLUSTER, CLUSTER_TARGET, "4.16.1"),
        ]
        assert critical.steps[2].from_version == "4.16.0"
        assert critical.steps[2].channel == "stable-4.16"
        assert critical.estimated_duration == "2h 5m"
        assert critical.confidence == Confidence.HIGH

        aggressive = paths[1]
        assert aggressive.steps[-1].to_version == "4.16.5"

        balanced = paths[2]
        assert _moves(balanced)[-1] == (StepType.CLUSTER, CLUSTER_TARGET, "4.16.1")
        assert balanced.steps[-1].rollback_strategy == "Not supported"

    def test_stale_channel_without_upgrades(
        self, make_operator, make_issue, make_cluster, make_status, now
    ):
        """Test an operator with nothing to move to never appears in a path."""
        operator = make_operator("z", deprecated=True, issues=[make_issue("z")])

        assert self.planner.generate_paths(make_status([operator]), now) == []

        status = make_status([operator], cluster=make_cluster(updates=["4.16.2"]))
        paths = self.planner.generate_paths(status, now)

        assert _ids(paths) == ["aggressive-path", "balanced-path"]
        for path in paths:
            assert "z" not in [step.target for step in path.steps]

        balanced = paths[1]
        assert _moves(balanced) == [
            (StepType.VERIFICATION, "cluster", None),
            (StepType.CLUSTER, CLUSTER_TARGET, "4.16.2"),
        ]

    def test_conservative_path_covers_warnings_only(
        self, make_operator, make_issue, make_status, now
    ):
        warned = make_operator(
            "w",
            "1.2.0",
            upgrades=[("1.3.0", "fast"), ("1.2.1", "fast")],
            issues=[make_issue("w")],
        )
        quiet = make_operator("q", "1.0.0", upgrades=[("1.0.1", "stable")])
        status = make_status([warned, quiet], cluster=None)

        path = self.planner.conservative_path(status, now)

        assert _moves(path) == [
            (StepType.VERIFICATION, "cluster", None),
            (StepType.OPERATOR, "w", "1.2.1"),
        ]

    def test_conservative_path_never_touches_cluster(
        self, make_operator, make_issue, make_cluster, make_status, now
    ):
        warned = make_operator(
            "w", "1.2.0", upgrades=[("1.2.1", "fast")], issues=[make_issue("w")]
        )
        status = make_status([warned], cluster=make_cluster(updates=["4.16.3"]))

        path = self.planner.conservative_path(status, now)

        assert all(step.type != StepType.CLUSTER for step in path.steps)

    def test_balanced_includes_drifted_operators(
        self, make_operator, make_cluster, make_status, now
    ):
        drifted = make_operator("d", "1.2.0", upgrades=[("1.4.0", "stable")])
        patched = make_operator("p", "1.2.0", upgrades=[("1.2.3", "stable")])
        status = make_status([drifted, patched], cluster=make_cluster(updates=["4.16.1"]))

        path = self.planner.balanced_path(status, now)

        assert [step.target for step in path.steps] == ["cluster", "d", CLUSTER_TARGET]

    def test_balanced_needs_operator_steps(self, make_operator, make_cluster, make_status, now):
        """Test the cluster alone does not make a balanced path."""
        status = make_status(
            [make_operator("x", upgrades=[("1.2.1", "stable")])],
            cluster=make_cluster(updates=["4.16.1"]),
        )
        assert self.planner.balanced_path(status, now) is None

    def test_critical_path_with_only_verification_is_dropped(
        self, make_operator, make_issue, make_status, now
    ):
        issue = make_issue("y", IssueSeverity.CRITICAL, IssueType.LIFECYCLE_EXPIRING)
        status = make_status([make_operator("y", issues=[issue])])

        assert self.planner.critical_issues_path(status, now) is None

    def test_step_orders_are_contiguous(
        self, make_operator, make_issue, make_cluster, make_status, now
    ):
        operators = [
            make_operator(
                name,
                "1.0.0",
                upgrades=[("1.0.1", "stable"), ("1.1.0", "fast"), ("2.0.0", "candidate")],
                issues=[make_issue(name, severity)],
            )
            for name, severity in [
                ("a", IssueSeverity.CRITICAL),
                ("b", IssueSeverity.WARNING),
                ("c", IssueSeverity.CRITICAL),
            ]
        ]
        status = make_status(operators, cluster=make_cluster(updates=["4.16.1", "4.17.0"]))

        paths = self.planner.generate_paths(status, now)

        assert _ids(paths) == [
            "critical-issues-path",
            "conservative-path",
            "aggressive-path",
            "balanced-path",
        ]
        for path in paths:
            assert [step.order for step in path.steps] == list(range(1, len(path.steps) + 1))
            assert path.steps[0].type == StepType.VERIFICATION
            assert len(path.steps) >= 2

    def test_generation_is_idempotent(
        self, make_operator, make_issue, make_cluster, make_status, now
    ):
        issue = make_issue("y", IssueSeverity.CRITICAL, IssueType.VERSION_CEILING)
        status = make_status(
            [make_operator("y", upgrades=[("2.0.0", "stable")], issues=[issue])],
            cluster=make_cluster(updates=["4.16.1"]),
        )

        assert self.planner.generate_paths(status, now) == self.planner.generate_paths(status, now)

    def test_supported_until_defaults_to_eighteen_months(self, make_operator, make_status, now):
        status = make_status([make_operator("x", upgrades=[("1.2.5", "stable")])])

        path = self.planner.aggressive_path(status, now)

        assert path.supported_until == datetime(2025, 12, 1, 12, 0, tzinfo=timezone.utc)
