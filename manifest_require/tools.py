"""
Server-side entry point.

Typical use::

    tools = AssetTools({"assets": {"images": {"extensions": ["png", "svg"]}}})
    await tools.server(project_path)
    logo_url = tools.require("./images/logo.png", __file__)
"""

import logging
from collections.abc import Awaitable
from collections.abc import Callable
from pathlib import Path
from typing import Any

from . import __version__
from .cache import CacheTracker
from .dispatcher import InterceptionDispatcher
from .errors import ConfigurationError
from .host import RequireHost
from .manifest import ManifestAccessor
from .manifest import source_from_config
from .models import Mode
from .models import ToolsConfig
from .waiting import wait_for_assets

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "manifest_require"


class AssetTools:
    """
    Serves bundler-built assets through a RequireHost.

    Nothing is intercepted until server() is called with the project path
    (the bundler's context directory); undo() removes every hook again.
    """

    def __init__(
        self,
        config: ToolsConfig | dict[str, Any] | None = None,
        host: RequireHost | None = None,
    ):
        """
        Initialize tools.

        Args:
            config: Settings, as a model or a plain dict
            host: Require chain to hook into (a new one by default)
        """
        if config is None:
            config = ToolsConfig()
        elif isinstance(config, dict):
            config = ToolsConfig.model_validate(config)
        self.config = config

        self.host = host or RequireHost()
        for directory in config.modules_directories or []:
            self.host.add_modules_directory(directory)

        if config.debug:
            logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)

        self.accessor: ManifestAccessor | None = None
        self.tracker: CacheTracker | None = None
        self.dispatcher: InterceptionDispatcher | None = None

        logger.debug(
            f"Instantiated manifest-require v{__version__} in "
            f"{config.mode.value} mode with asset types {list(config.assets)}"
        )

    @property
    def manifest_path(self) -> Path | None:
        return self.config.manifest_path

    def development(self) -> "AssetTools":
        """Deprecated: the mode comes from configuration; this has no effect."""
        logger.error(
            "`.development()` is deprecated and has no effect. Set the mode in "
            "the configuration or through the MANIFEST_REQUIRE_ENV environment "
            f"variable instead. The currently used mode is: {self.config.mode.value}."
        )
        return self

    def server(
        self,
        project_path: str | Path,
        callback: Callable[[], Any] | None = None,
    ) -> Awaitable[Any]:
        """
        Set the project path, register hooks and wait for the manifest.

        Hooks are active as soon as this returns; the returned awaitable
        completes (after calling callback) once the manifest is available.

        Args:
            project_path: Bundler context directory
            callback: Called when the manifest is ready
        """
        self.setup(project_path)
        return self.wait_for_assets(callback)

    def setup(self, project_path: str | Path) -> "AssetTools":
        """Set the project path and register hooks without waiting."""
        if self.dispatcher is not None:
            self.undo()
        if self.tracker is not None and self.tracker.mode is Mode.DEVELOPMENT:
            # Entries served under the previous setup must not outlive it
            self.tracker.invalidate_all()

        self.config.project_path = Path(project_path).resolve()

        self.accessor = ManifestAccessor(source_from_config(self.config), self.config.mode)
        self.tracker = CacheTracker(
            self.host.module_cache,
            self.config.mode,
            manifest_key=str(self.config.manifest_path),
        )
        self.dispatcher = InterceptionDispatcher(
            self.host, self.config, self.accessor, self.tracker
        )
        self.dispatcher.register()

        if self.config.alias:
            self.dispatcher.enable_aliasing()

        return self

    def _setup(self) -> InterceptionDispatcher:
        if self.dispatcher is None:
            raise ConfigurationError(
                "You seem to have forgotten to call the .server() method"
            )
        return self.dispatcher

    async def wait_for_assets(self, done: Callable[[], Any] | None = None) -> Any:
        """Wait until the manifest can be loaded, then call done()."""
        dispatcher = self._setup()
        return await wait_for_assets(
            dispatcher.accessor.is_ready,
            done,
            description=dispatcher.accessor.source.describe(),
        )

    def assets(self) -> dict[str, Any]:
        """The current asset manifest."""
        return self._setup().accessor.get_manifest()

    def require(self, request: str, importer: str | None = None) -> Any:
        """Load a request through the host, returning what it exports."""
        return self.host.require(request, importer)

    def refresh(self) -> None:
        """
        Forget every asset served so far (development only).

        Raises:
            InvalidModeError: Called in production mode
        """
        self._setup().tracker.invalidate_all()

    invalidate_all = refresh

    def undo(self) -> None:
        """Unregister every hook; safe to call when nothing is registered."""
        if self.dispatcher is not None:
            self.dispatcher.undo()
