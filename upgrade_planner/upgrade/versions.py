"""Version parsing and comparison for operator and cluster versions.

Versions arrive in many shapes: ``4.16.3``, ``v1.10.0`` or a full CSV name such
as ``openshift-gitops-operator.v1.10.0``. Every helper here extracts the first
dotted numeric triple and works on that. None of them raise on malformed
input; a version that cannot be parsed makes the pair incomparable.
"""

import re
from enum import Enum
from typing import Any, Optional, Tuple

VERSION_PATTERN = re.compile(r"v?(\d+\.\d+\.\d+)")

VersionTuple = Tuple[int, int, int]


class VersionOrder(str, Enum):
    """Result of comparing two versions."""

    LT = "lt"
    EQ = "eq"
    GT = "gt"
    INCOMPARABLE = "incomparable"


class VersionDiff(str, Enum):
    """Magnitude of the jump between two versions."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


def clean_version(raw: Any) -> Any:
    """Return the embedded ``N.N.N`` token, or the input unchanged."""
    if not isinstance(raw, str):
        return raw
    match = VERSION_PATTERN.search(raw)
    return match.group(1) if match else raw


def parse_version(raw: Any) -> Optional[VersionTuple]:
    """Parse a version string to a (major, minor, patch) tuple."""
    if not isinstance(raw, str):
        return None
    match = VERSION_PATTERN.search(raw)
    if not match:
        return None
    major, minor, patch = (int(part) for part in match.group(1).split("."))
    return major, minor, patch


def compare_versions(a: Any, b: Any) -> VersionOrder:
    """Compare two versions; ``INCOMPARABLE`` if either cannot be parsed."""
    left = parse_version(a)
    right = parse_version(b)
    if left is None or right is None:
        return VersionOrder.INCOMPARABLE
    if left < right:
        return VersionOrder.LT
    if left > right:
        return VersionOrder.GT
    return VersionOrder.EQ


def is_newer(candidate: Any, baseline: Any) -> bool:
    """True only when both parse and ``candidate`` is strictly greater."""
    return compare_versions(candidate, baseline) == VersionOrder.GT


def version_diff(a: Any, b: Any) -> Optional[VersionDiff]:
    """Classify the jump between two versions, or None if incomparable."""
    left = parse_version(a)
    right = parse_version(b)
    if left is None or right is None:
        return None
    if left[0] != right[0]:
        return VersionDiff.MAJOR
    if left[1] != right[1]:
        return VersionDiff.MINOR
    if left[2] != right[2]:
        return VersionDiff.PATCH
    return VersionDiff.NONE
