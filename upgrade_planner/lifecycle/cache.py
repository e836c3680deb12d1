"""Time-bounded cache in front of a lifecycle provider."""

import threading
import time
from typing import Callable, Dict, Optional, Tuple

from ..exceptions import LifecycleLookupError
from ..model.operator import OperatorLifecycleInfo
from ..utils.logger import get_logger
from .providers import DefaultLifecycleProvider, LifecycleProvider

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 3600


class CachedLifecycleProvider(LifecycleProvider):
    """Caches lookups per operator and version for ``ttl_seconds``.

    Each instance owns its cache, so concurrent requests and tests can use
    independent ones. Failed lookups fall back to the default facts and are
    not cached.
    """

    def __init__(
        self,
        provider: LifecycleProvider,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        fallback: Optional[LifecycleProvider] = None,
    ):
        self.provider = provider
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.fallback = fallback or DefaultLifecycleProvider()
        self._entries: Dict[Tuple[str, str], Tuple[float, OperatorLifecycleInfo]] = {}
        self._lock = threading.Lock()

    def get_lifecycle_info(self, operator_name: str, version: str) -> OperatorLifecycleInfo:
        key = (operator_name, version)

        with self._lock:
            cached = self._entries.get(key)
            if cached and self.clock() - cached[0] < self.ttl_seconds:
                return cached[1]

        try:
            info = self.provider.get_lifecycle_info(operator_name, version)
        except LifecycleLookupError as e:
            logger.warning(f"Failed to fetch lifecycle info, using defaults: {e}")
            return self.fallback.get_lifecycle_info(operator_name, version)

        with self._lock:
            self._entries[key] = (self.clock(), info)
        return info

    def invalidate(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
