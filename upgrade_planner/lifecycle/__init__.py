"""Lifecycle metadata lookup."""

from .cache import CachedLifecycleProvider
from .providers import (
    DefaultLifecycleProvider,
    LifecycleProvider,
    StaticLifecycleProvider,
    infer_lifecycle_model,
)

__all__ = [
    "CachedLifecycleProvider",
    "DefaultLifecycleProvider",
    "LifecycleProvider",
    "StaticLifecycleProvider",
    "infer_lifecycle_model",
]
