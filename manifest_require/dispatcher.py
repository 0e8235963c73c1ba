"""
Interception of asset requests.

Registers one RequireHost hook per configured file extension, plus a global
hook for loader-chain requests such as ``"style!css?modules!./app.css"``.
Both kinds normalize the requested file to a canonical key, look it up in the
asset manifest and wrap the artifact descriptor as a module.
"""

import logging
from pathlib import Path
from types import ModuleType
from typing import Any

from .cache import CacheTracker
from .errors import AssetNotFound
from .filters import is_handled
from .host import HookHandle
from .host import RequireHost
from .host import to_module
from .manifest import ManifestAccessor
from .models import AssetType
from .models import ToolsConfig
from .paths import alias_request
from .paths import normalize_asset_path
from .resolver import AssetResolver

logger = logging.getLogger(__name__)

LOADERS_HOOK_NAME = "webpack-loaders"
LOADER_SUFFIX = "-loader"
LOADER_PREFIX = "./~/"


def normalize_loader(loader: str) -> str:
    """Complete a loader name ("style" -> "./~/style-loader"), keeping any query."""
    name, separator, query = loader.partition("?")
    if not name.endswith(LOADER_SUFFIX):
        name += LOADER_SUFFIX
    return f"{LOADER_PREFIX}{name}{separator}{query}"


def split_loader_request(request: str) -> tuple[list[str], str] | None:
    """
    Split a loader-chain request into its loaders and local asset path.

    Returns None for anything that is not a loader chain: absolute or
    relative paths, requests with a scheme-like colon before the first "!",
    requests without "!", and chains whose last part is not relative.
    """
    if request.startswith(("/", "\\", "./", "../")):
        return None

    bang = request.find("!")
    if bang < 0:
        return None

    colon = request.find(":")
    if 0 <= colon < bang:
        return None

    *loaders, local_asset_path = request.split("!")

    # Guards against legit requests that merely contain "!"
    if not local_asset_path.startswith(("./", "../")):
        return None

    return loaders, local_asset_path


class InterceptionDispatcher:
    """Owns the RequireHost hooks and routes intercepted requests to the manifest."""

    def __init__(
        self,
        host: RequireHost,
        config: ToolsConfig,
        accessor: ManifestAccessor,
        tracker: CacheTracker,
        resolver: AssetResolver | None = None,
    ):
        self.host = host
        self.config = config
        self.accessor = accessor
        self.tracker = tracker
        self.resolver = resolver or AssetResolver()
        self.hooks: list[HookHandle] = []
        self.loaders_hook: HookHandle | None = None
        self.alias_hook: HookHandle | None = None
        self._extension_owners: dict[str, AssetType] = {}

    def register(self) -> "InterceptionDispatcher":
        """Register extension hooks for every asset type and the loader-chain hook."""
        logger.debug("Registering require() hooks for assets")

        for asset_type_name, asset_type in self.config.assets.items():
            for extension in asset_type.extensions:
                if extension in self._extension_owners:
                    logger.warning(
                        f"Extension '{extension}' of asset type '{asset_type_name}' "
                        "is already registered by another asset type, ignoring"
                    )
                    continue
                self.register_extension(extension, asset_type)

        self.loaders_hook = self.host.global_hook(
            LOADERS_HOOK_NAME, self.require_loader_chain
        )
        return self

    def register_extension(self, extension: str, asset_type: AssetType) -> None:
        logger.debug(f" registering a require() hook for *.{extension}")
        self._extension_owners[extension] = asset_type

        if extension == "json":

            def handler(path: str) -> ModuleType | None:
                # The manifest itself is a .json file too
                if self._is_manifest(path):
                    return None
                return self.require(path, asset_type)

        else:

            def handler(path: str) -> ModuleType | None:
                return self.require(path, asset_type)

        self.hooks.append(self.host.hook(extension, handler))

    def enable_aliasing(self) -> "InterceptionDispatcher":
        """Rewrite bare requests through the configured aliases."""

        def alias(request: str, importer: str | None) -> str | None:
            return alias_request(request, self.config.alias, self.config.project_path)

        self.alias_hook = self.host.resolver(alias, name="webpack-alias")
        return self

    def undo(self) -> None:
        """Unmount every hook registered by this dispatcher."""
        for hook in self.hooks:
            hook.unmount()
        self.hooks = []
        self._extension_owners = {}

        if self.alias_hook is not None:
            self.alias_hook.unmount()
            self.alias_hook = None

        if self.loaders_hook is not None:
            self.loaders_hook.unmount()
            self.loaders_hook = None

    def owner_of(self, extension: str) -> AssetType | None:
        return self._extension_owners.get(extension.lstrip("."))

    def _is_manifest(self, path: str) -> bool:
        manifest_path = self.config.manifest_path
        return manifest_path is not None and Path(path).resolve() == manifest_path

    def normalize_asset_path(self, global_asset_path: str) -> str:
        return normalize_asset_path(global_asset_path, self.config.project_path)

    def require(self, global_asset_path: str, asset_type: AssetType) -> ModuleType | None:
        """Extension hook body: serve an asset file from the manifest."""
        logger.debug(f"require() called for {global_asset_path}")

        asset_path = self.normalize_asset_path(global_asset_path)

        if not is_handled(asset_path, asset_type):
            logger.debug(f" skipping require call for {asset_path}")
            return None

        asset = self.asset_source(asset_path)
        if asset is None:
            return None

        return self.require_asset(asset, cache_key=global_asset_path)

    def require_loader_chain(
        self, request: str, importer: str | None
    ) -> ModuleType | None:
        """Global hook body: serve a loader-chain request from the manifest."""
        parsed = split_loader_request(request)
        if parsed is None:
            return None

        loaders, local_asset_path = parsed
        global_asset_path = self.host.resolve(local_asset_path, importer)

        chain = "!".join(normalize_loader(loader) for loader in loaders)
        asset_path = f"{chain}!{self.normalize_asset_path(global_asset_path)}"

        asset = self.asset_source(asset_path)
        if asset is None:
            return None

        return self.require_asset(
            asset, cache_key=f"{request}.{LOADERS_HOOK_NAME}"
        )

    def asset_source(self, asset_path: str) -> Any | None:
        """Look up a canonical key in the current manifest; None on a miss."""
        logger.debug(f" requiring {asset_path}")
        manifest = self.accessor.get_manifest()
        try:
            return self.resolver.lookup(asset_path, manifest)
        except AssetNotFound as e:
            logger.error(str(e))
            return None

    def require_asset(self, asset: Any, cache_key: str) -> ModuleType:
        """Wrap an artifact descriptor as a module and track its cache key."""
        self.tracker.record(cache_key)
        return to_module(asset, cache_key)
