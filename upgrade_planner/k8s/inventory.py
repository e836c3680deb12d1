"""Inventory providers: where cluster and operator facts come from."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..exceptions import InventoryError
from ..model.cluster import ClusterVersion
from ..model.operator import OperatorChannel, OperatorInstallation
from ..utils.logger import get_logger
from .client import K8sClient
from .parsers import parse_channels, parse_cluster_version, parse_subscription

logger = get_logger(__name__)

SUBSCRIPTIONS = "subscriptions.operators.coreos.com"
PACKAGE_MANIFESTS = "packagemanifests.packages.operators.coreos.com"
CLUSTER_VERSIONS = "clusterversions.config.openshift.io"


class InventoryProvider(ABC):
    """Source of cluster version, subscriptions and channel catalogs."""

    @abstractmethod
    def get_cluster_version(self) -> ClusterVersion:
        pass

    @abstractmethod
    def list_subscriptions(self) -> List[OperatorInstallation]:
        pass

    @abstractmethod
    def get_channels(self, installation: OperatorInstallation) -> List[OperatorChannel]:
        pass

    def get_subscription(self, namespace: str, name: str) -> Optional[OperatorInstallation]:
        """Find one subscription; None when it does not exist."""
        for installation in self.list_subscriptions():
            if installation.namespace == namespace and installation.name == name:
                return installation
        return None


class KubectlInventory(InventoryProvider):
    """Reads OLM and cluster version resources through kubectl."""

    def __init__(self, client: K8sClient, request_timeout: Optional[float] = None):
        self.client = client
        self.request_timeout = request_timeout

    def get_cluster_version(self) -> ClusterVersion:
        data = self.client.get_json(CLUSTER_VERSIONS, name="version", timeout=self.request_timeout)
        if not data:
            raise InventoryError("kubectl returned no data", "cluster version")
        return parse_cluster_version(data)

    def list_subscriptions(self) -> List[OperatorInstallation]:
        data = self.client.get_json(
            SUBSCRIPTIONS, all_namespaces=True, timeout=self.request_timeout
        )
        if data is None:
            raise InventoryError("kubectl returned no data", "operator subscriptions")
        return _parse_subscription_items(data.get("items", []))

    def get_subscription(self, namespace: str, name: str) -> Optional[OperatorInstallation]:
        data = self.client.get_json(
            SUBSCRIPTIONS, name=name, namespace=namespace, timeout=self.request_timeout
        )
        if not data:
            return None
        return parse_subscription(data)

    def get_channels(self, installation: OperatorInstallation) -> List[OperatorChannel]:
        data = self.client.get_json(
            PACKAGE_MANIFESTS,
            name=installation.package,
            namespace=installation.catalog_namespace,
            timeout=self.request_timeout,
        )
        if data is None:
            raise InventoryError(
                "package manifest unavailable", f"channels for {installation.package}"
            )
        return parse_channels(data)


class FileInventory(InventoryProvider):
    """Offline inventory read from a JSON or YAML dump.

    The dump holds the raw resources as kubectl prints them::

        clusterVersion: {...}        # ClusterVersion "version"
        subscriptions: [...]         # or a List with "items"
        packageManifests: [...]      # or a List with "items"
    """

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    @classmethod
    def from_file(cls, path: Path) -> "FileInventory":
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise InventoryError(str(e), str(path))

        if not isinstance(data, dict):
            raise InventoryError("inventory dump must be a mapping", str(path))
        return cls(data)

    def get_cluster_version(self) -> ClusterVersion:
        raw = self.data.get("clusterVersion")
        if not raw:
            raise InventoryError("missing clusterVersion", "cluster version")
        return parse_cluster_version(raw)

    def list_subscriptions(self) -> List[OperatorInstallation]:
        return _parse_subscription_items(_items(self.data.get("subscriptions")))

    def get_channels(self, installation: OperatorInstallation) -> List[OperatorChannel]:
        for package in _items(self.data.get("packageManifests")):
            metadata = package.get("metadata") or {}
            if metadata.get("name") != installation.package:
                continue
            namespace = metadata.get("namespace")
            if namespace and namespace != installation.catalog_namespace:
                continue
            return parse_channels(package)

        raise InventoryError(
            "package manifest not in dump", f"channels for {installation.package}"
        )


def _items(value: Any) -> List[Dict[str, Any]]:
    if isinstance(value, dict):
        return value.get("items") or []
    return value or []


def _parse_subscription_items(items: List[Dict[str, Any]]) -> List[OperatorInstallation]:
    installations = []
    for item in items:
        try:
            installations.append(parse_subscription(item))
        except InventoryError as e:
            logger.error(f"Failed to parse subscription: {e}")
    return installations
