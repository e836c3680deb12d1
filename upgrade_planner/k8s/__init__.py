"""Kubernetes and OLM inventory access."""

from .client import K8sClient
from .inventory import FileInventory, InventoryProvider, KubectlInventory

__all__ = ["FileInventory", "InventoryProvider", "K8sClient", "KubectlInventory"]
