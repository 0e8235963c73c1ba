"""Asset manifest sources and the mode-aware accessor.

Development mode re-reads the manifest on every call so rebuilt assets show
up without a restart, and falls back to an empty manifest while the bundler
has not produced one yet. Production mode loads the manifest once.
"""

from __future__ import annotations

import json
import logging
import socket
from http.client import HTTPException
from pathlib import Path
from typing import Any
from typing import Protocol
from urllib.error import HTTPError
from urllib.error import URLError
from urllib.request import urlopen

from .errors import ConfigurationError
from .errors import ManifestMissing
from .errors import ManifestNotReady
from .errors import ManifestRequireError
from .models import Mode
from .models import ToolsConfig

logger = logging.getLogger(__name__)


def default_manifest() -> dict[str, Any]:
    """Empty manifest used while the real one is unavailable."""
    return {"javascript": {}, "styles": {}, "assets": {}}


class ManifestSource(Protocol):
    """Where a manifest comes from."""

    def load(self) -> dict[str, Any]:
        """Load the manifest.

        Raises:
            ManifestNotReady: The manifest has not been generated yet.
            ManifestRequireError: Any other failure.
        """
        ...

    def describe(self) -> str:
        """Human-readable location, used in log messages."""
        ...


class FileManifestSource:
    """Manifest JSON file written to disk by the bundler."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def describe(self) -> str:
        return str(self.path)

    def load(self) -> dict[str, Any]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ManifestNotReady(
                f'"{self.path}" not found', source=self.describe()
            ) from e
        except UnicodeDecodeError as e:
            # Cut off inside a multibyte character while being written
            raise ManifestNotReady(
                f'"{self.path}" is not valid UTF-8: {e}', source=self.describe()
            ) from e

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            # The bundler may still be writing the file
            raise ManifestNotReady(
                f'"{self.path}" is not valid JSON: {e}', source=self.describe()
            ) from e


class HttpManifestSource:
    """Manifest served over HTTP by the bundler plugin on a local port."""

    def __init__(self, port: int, host: str = "localhost", timeout: float = 2.0) -> None:
        self.port = port
        self.host = host
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    def describe(self) -> str:
        return self.url

    def load(self) -> dict[str, Any]:
        try:
            with urlopen(self.url, timeout=self.timeout) as response:  # noqa: S310
                body = response.read()
        except HTTPError as e:
            if e.code == 404:
                raise ManifestNotReady(
                    "Webpack assets not generated yet", source=self.url
                ) from e
            raise ManifestRequireError(
                f"Server responded with status code {e.code} for {self.url}"
            ) from e
        except URLError as e:
            if isinstance(e.reason, (ConnectionRefusedError, TimeoutError, socket.timeout)):
                raise ManifestNotReady(
                    f"Couldn't connect to {self.url}: {e.reason}", source=self.url
                ) from e
            raise ManifestRequireError(f"Couldn't fetch {self.url}: {e.reason}") from e
        except (ConnectionError, TimeoutError, socket.timeout) as e:
            # Includes a dev server restarting mid-request (RemoteDisconnected)
            raise ManifestNotReady(
                f"Couldn't connect to {self.url}: {e}", source=self.url
            ) from e
        except (HTTPException, OSError) as e:
            raise ManifestRequireError(f"Couldn't fetch {self.url}: {e}") from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise ManifestRequireError(f"Invalid manifest JSON from {self.url}: {e}") from e


def source_from_config(config: ToolsConfig) -> ManifestSource:
    """HTTP source in development when a port is configured, file otherwise."""
    if config.development and config.port:
        return HttpManifestSource(config.port, timeout=config.http_timeout)

    manifest_path = config.manifest_path
    if manifest_path is None:
        raise ConfigurationError(
            "Manifest location is unknown: call AssetTools.server() with your "
            "project's base path first"
        )
    return FileManifestSource(manifest_path)


class ManifestAccessor:
    """Returns the current manifest according to the mode's freshness policy."""

    def __init__(self, source: ManifestSource, mode: Mode) -> None:
        self.source = source
        self.mode = mode
        self._manifest: dict[str, Any] | None = None

    def get_manifest(self) -> dict[str, Any]:
        """
        Return the current manifest.

        Raises:
            ManifestMissing: Production mode and the manifest is unavailable.
        """
        if self.mode is Mode.PRODUCTION:
            if self._manifest is None:
                try:
                    self._manifest = self.source.load()
                except ManifestRequireError as e:
                    raise ManifestMissing(
                        f"Asset manifest unavailable at {self.source.describe()}: {e}",
                        path=self.source.describe(),
                    ) from e
                logger.debug(f"Loaded asset manifest from {self.source.describe()}")
            return self._manifest

        try:
            return self.source.load()
        except ManifestNotReady as e:
            logger.warning(
                f"{e}. Most likely it hasn't yet been generated by the bundler; "
                "wait for AssetTools.server() to finish before requiring assets. "
                "Using an empty stub instead."
            )
        except ManifestRequireError as e:
            logger.warning(
                f"Couldn't load the asset manifest from {self.source.describe()} "
                f"({e}). Using an empty stub instead."
            )
        return default_manifest()

    def is_ready(self) -> bool:
        """True once the source can produce a manifest."""
        try:
            self.source.load()
        except ManifestNotReady:
            return False
        except ManifestRequireError as e:
            logger.error(f"Couldn't contact the asset manifest source: {e}")
            return False
        return True
