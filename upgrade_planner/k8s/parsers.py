"""Conversion of raw OLM and cluster payloads into typed models.

Inventory payloads are loosely structured nested dicts. Everything the
planner consumes goes through these functions first so that defaults and
validation happen once, at the boundary.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..exceptions import InventoryError
from ..model.cluster import ClusterVersion
from ..model.operator import OperatorChannel, OperatorInstallation
from ..upgrade.versions import parse_version
from ..utils.logger import get_logger

logger = get_logger(__name__)

OCP_VERSIONS_ANNOTATION = "com.redhat.openshift.versions"


def _get(data: Any, *keys: str, default: Any = None) -> Any:
    """Walk nested dicts, returning ``default`` at the first missing key."""
    for key in keys:
        if not isinstance(data, dict):
            return default
        data = data.get(key)
        if data is None:
            return default
    return data


def parse_subscription(raw: Dict[str, Any]) -> OperatorInstallation:
    """Map an OLM Subscription to an operator installation."""
    name = _get(raw, "metadata", "name")
    namespace = _get(raw, "metadata", "namespace")
    if not name or not namespace:
        raise InventoryError("subscription without metadata.name/namespace", "subscription")

    created = _get(raw, "metadata", "creationTimestamp")
    try:
        return OperatorInstallation(
            name=name,
            display_name=_get(raw, "spec", "name", default=name),
            namespace=namespace,
            current_version=_get(raw, "status", "currentCSV", default="unknown"),
            current_channel=_get(raw, "spec", "channel", default="unknown"),
            catalog_source=_get(raw, "spec", "source", default="unknown"),
            catalog_namespace=_get(raw, "spec", "sourceNamespace", default="unknown"),
            installed_at=created,
            updated_at=_get(raw, "status", "lastUpdated", default=created),
            approved=_get(raw, "spec", "installPlanApproval") == "Automatic",
            package_name=_get(raw, "spec", "name"),
        )
    except ValidationError as e:
        raise InventoryError(str(e), f"subscription {namespace}/{name}")


def parse_ocp_versions(raw_channel: Dict[str, Any]) -> Optional[List[str]]:
    """Read the OCP compatibility annotation, e.g. ``v4.14-v4.16``."""
    annotation = _get(raw_channel, "currentCSVDesc", "annotations", OCP_VERSIONS_ANNOTATION)
    if not annotation:
        return None
    return [value.strip() for value in annotation.split(",") if value.strip()]


def parse_channels(raw_package: Dict[str, Any]) -> List[OperatorChannel]:
    """Map the channels of a PackageManifest."""
    channels = []

    for raw_channel in _get(raw_package, "status", "channels", default=[]):
        name = raw_channel.get("name")
        if not name:
            logger.warning("Skipping package channel without a name")
            continue

        message = _get(raw_channel, "deprecation", "message")
        channels.append(
            OperatorChannel(
                name=name,
                current_csv=raw_channel.get("currentCSV") or "unknown",
                available_versions=[
                    entry["version"]
                    for entry in raw_channel.get("entries") or []
                    if entry.get("version")
                ],
                deprecated=bool(message),
                deprecation_message=message,
                available_in_ocp_versions=parse_ocp_versions(raw_channel),
            )
        )

    return channels


def order_updates(versions: List[str]) -> List[str]:
    """Sort updates oldest first, dropping entries without a version."""
    parsable = []
    for version in versions:
        if parse_version(version) is None:
            logger.warning(f"Ignoring cluster update without a version: {version}")
            continue
        parsable.append(version)
    return sorted(parsable, key=parse_version)


def parse_cluster_version(raw: Dict[str, Any]) -> ClusterVersion:
    """Map the ClusterVersion resource."""
    if not isinstance(raw, dict):
        raise InventoryError("unexpected payload", "clusterversion")

    desired = _get(raw, "status", "desired", "version", default="unknown")

    # The newest completed history entry is what is actually running
    current = desired
    for entry in _get(raw, "status", "history", default=[]):
        if entry.get("state") == "Completed" and entry.get("version"):
            current = entry["version"]
            break

    channel = _get(raw, "spec", "channel", default="unknown")
    updates = []
    for update in _get(raw, "status", "availableUpdates", default=[]):
        version = update if isinstance(update, str) else (update or {}).get("version")
        if version:
            updates.append(version)

    return ClusterVersion(
        current_version=current,
        desired_version=desired,
        channel=channel,
        available_updates=order_updates(updates),
        is_eus="eus" in channel,
    )
