"""Recommendation report generator."""

import json
from typing import Any, Dict, List

import yaml

from ..model.cluster import PlatformStatus
from ..model.plan import UpgradePath, UpgradeRecommendations
from ..model.report import ReportFormat
from ..utils.logger import get_logger

logger = get_logger(__name__)

SEVERITY_MARKERS = {"critical": "✖", "warning": "⚠️ ", "info": "•"}


def to_wire(recommendations: UpgradeRecommendations) -> Dict[str, Any]:
    """JSON-safe dict with camelCase keys and ISO-8601 dates."""
    return recommendations.model_dump(mode="json", by_alias=True)


def from_wire(data: Dict[str, Any]) -> UpgradeRecommendations:
    return UpgradeRecommendations.model_validate(data)


class RecommendationReporter:
    """Renders upgrade recommendations."""

    def generate_report(
        self, recommendations: UpgradeRecommendations, output_format: ReportFormat
    ) -> str:
        logger.info(f"Generating {output_format.value} recommendation report")

        if output_format == ReportFormat.JSON:
            return json.dumps(to_wire(recommendations), indent=2)
        elif output_format == ReportFormat.YAML:
            return yaml.safe_dump(to_wire(recommendations), default_flow_style=False, sort_keys=False)
        else:
            return self._format_text_report(recommendations)

    def _format_text_report(self, recommendations: UpgradeRecommendations) -> str:
        lines = []
        lines.append("=" * 80)
        lines.append("OPERATOR UPGRADE PLAN")
        lines.append("=" * 80)
        lines.append(f"Generated: {recommendations.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("")

        lines.extend(self.format_status(recommendations.platform_status))

        lines.append("UPGRADE PATHS")
        lines.append("-" * 40)
        if not recommendations.recommended_paths:
            lines.append("No upgrades recommended")
            lines.append("")
        for path in recommendations.recommended_paths:
            lines.extend(self.format_path(path))

        if recommendations.maintenance_windows:
            lines.append("MAINTENANCE WINDOWS")
            lines.append("-" * 40)
            for window in recommendations.maintenance_windows:
                lines.append(
                    f"- {window.recommended_date.strftime('%Y-%m-%d')} "
                    f"[{window.priority.value}] {window.reason}"
                )
                lines.append(f"  Path: {window.upgrade_path.id} ({window.estimated_duration})")
                if window.affected_components:
                    lines.append(f"  Affects: {', '.join(window.affected_components)}")

        return "\n".join(lines)

    def format_status(self, status: PlatformStatus) -> List[str]:
        lines = []
        cluster = status.cluster

        lines.append("CLUSTER")
        lines.append("-" * 40)
        lines.append(f"Version: {cluster.current_version} (channel {cluster.channel})")
        if cluster.available_updates:
            lines.append(f"Available Updates: {', '.join(cluster.available_updates)}")
        lines.append(f"Overall Health: {status.overall_health.value}")
        lines.append(f"Issues: {status.total_issues} ({status.critical_issues} critical)")
        if status.support_expires_in is not None:
            lines.append(f"Support Expires In: {status.support_expires_in} days")
        lines.append("")

        if status.operators:
            lines.append("OPERATORS")
            lines.append("-" * 40)
            for operator in status.operators:
                installation = operator.installation
                lines.append(
                    f"- {installation.display_name} ({installation.namespace}): "
                    f"{installation.current_version} on {installation.current_channel} "
                    f"- {operator.health_status.value}"
                )
                for issue in operator.issues:
                    marker = SEVERITY_MARKERS.get(issue.severity.value, "•")
                    lines.append(f"  {marker} {issue.title}: {issue.recommendation}")
            lines.append("")

        if status.omitted_operators:
            lines.append(f"Omitted: {len(status.omitted_operators)} operator(s)")
            for omission in status.omitted_operators:
                lines.append(f"  - {omission.namespace}/{omission.name}: {omission.reason}")
            lines.append("")

        return lines

    def format_path(self, path: UpgradePath) -> List[str]:
        lines = [
            f"{path.id}: {path.description}",
            f"  Duration: {path.estimated_duration}, Confidence: {path.confidence.value}, "
            f"Supported Until: {path.supported_until.strftime('%Y-%m-%d')}",
        ]
        for step in path.steps:
            versions = ""
            if step.from_version and step.to_version:
                versions = f" {step.from_version} → {step.to_version}"
            lines.append(f"  {step.order}. [{step.type.value}] {step.target}{versions}")
        lines.append("")
        return lines
