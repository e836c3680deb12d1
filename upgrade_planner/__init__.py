"""Upgrade planning for operator-managed OpenShift platforms."""

__version__ = "0.1.0"
