"""Tracks module cache entries created by interception so they can be purged."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from .errors import InvalidModeError
from .models import Mode

logger = logging.getLogger(__name__)


class CacheTracker:
    """Owns the list of cache keys served through interception.

    Keys are only recorded in development mode. Duplicates are kept since
    invalidation only needs coverage.
    """

    def __init__(
        self,
        module_cache: MutableMapping[str, Any],
        mode: Mode,
        manifest_key: str | None = None,
    ) -> None:
        """
        Args:
            module_cache: Host cache that recorded keys are purged from.
            mode: Runtime mode; invalidation is development-only.
            manifest_key: Cache key of the manifest itself, purged as well.
        """
        self._module_cache = module_cache
        self.mode = mode
        self.manifest_key = manifest_key
        self._keys: list[str] = []

    @property
    def keys(self) -> list[str]:
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def record(self, key: str) -> None:
        if self.mode is not Mode.DEVELOPMENT:
            return
        self._keys.append(key)

    def invalidate_all(self) -> None:
        """
        Purge every recorded key and the manifest entry from the module cache.

        Raises:
            InvalidModeError: Called outside development mode.
        """
        if self.mode is not Mode.DEVELOPMENT:
            raise InvalidModeError(
                "Cache invalidation called in production mode. It shouldn't be "
                "called in production mode because that would degrade performance "
                "by discarding caches."
            )

        logger.debug("Flushing require() caches")

        if self.manifest_key is not None:
            self._module_cache.pop(self.manifest_key, None)

        for key in self._keys:
            logger.debug(f" flushing require() cache for {key}")
            self._module_cache.pop(key, None)

        self._keys = []
