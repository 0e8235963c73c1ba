"""Error taxonomy for manifest-require.

Configuration and mode errors are programmer errors and propagate to the
caller. Manifest readiness and asset misses are expected while a bundler is
still running; the library catches them internally and logs them.
"""

from __future__ import annotations


class ManifestRequireError(Exception):
    """Base for all manifest-require errors."""


class ConfigurationError(ManifestRequireError):
    """Setup has not been completed (e.g. project path unknown)."""


class ManifestMissing(ManifestRequireError):
    """Production mode could not locate the asset manifest.

    Attributes:
        path: Location the manifest was expected at.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ManifestNotReady(ManifestRequireError):
    """Development manifest is absent or its server is unreachable.

    Attributes:
        source: Human-readable description of the manifest source.
    """

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class AssetNotFound(ManifestRequireError):
    """No manifest entry matched any candidate key.

    Attributes:
        key: The canonical key that was looked up.
        candidates: Every manifest key that was tried, in order.
    """

    def __init__(
        self, message: str, *, key: str, candidates: list[str] | None = None
    ) -> None:
        super().__init__(message)
        self.key = key
        self.candidates = candidates or []


class InvalidModeError(ManifestRequireError):
    """Operation is not allowed in the current mode."""
