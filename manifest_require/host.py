"""
Pluggable require() chain.

Python's import statement cannot name non-identifier files such as
"styles/app.css", so asset requests go through an explicit RequireHost
instead of a patched global loader. Hooks run before default resolution and
may fully replace the result; each registration returns a handle that
unmounts it.

Lookup order for ``require(request, importer)``:
1. global hooks (see the raw request string)
2. resolver hooks rewrite the request, then it is resolved to a path
3. module cache
4. extension hooks for the resolved path's extension
5. default loaders (.json parsed, .py executed)
"""

import importlib.util
import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from types import ModuleType
from typing import Any

logger = logging.getLogger(__name__)

ExtensionHook = Callable[[str], ModuleType | None]
GlobalHook = Callable[[str, str | None], ModuleType | None]
ResolverHook = Callable[[str, str | None], str | None]

DEFAULT_MODULES_DIRECTORY = "node_modules"


@dataclass
class HookHandle:
    """Registered hook; unmount() removes it and is safe to call twice."""

    kind: str
    name: str
    _release: Callable[[], None] = field(repr=False)
    mounted: bool = True

    def unmount(self) -> None:
        if not self.mounted:
            return
        self._release()
        self.mounted = False
        logger.debug(f"Unmounted {self.kind} hook '{self.name}'")


@dataclass
class _Registration:
    name: str
    handler: Callable[..., Any]


def to_module(value: Any, filename: str) -> ModuleType:
    """Wrap a computed value as a loadable module exporting it."""
    module = ModuleType(os.path.basename(filename) or filename)
    module.__file__ = filename
    module.exports = value  # type: ignore[attr-defined]
    return module


class RequireHost:
    """Resolves and loads requests, consulting registered hooks first."""

    def __init__(self, modules_directories: list[str] | None = None):
        """
        Initialize an empty host.

        Args:
            modules_directories: Directory names searched for bare requests in
                addition to "node_modules", walking up from the importer.
        """
        self.module_cache: dict[str, ModuleType] = {}
        self._extension_hooks: dict[str, list[_Registration]] = {}
        self._global_hooks: list[_Registration] = []
        self._resolvers: list[_Registration] = []
        self.modules_directories = [DEFAULT_MODULES_DIRECTORY]
        for directory in modules_directories or []:
            self.add_modules_directory(directory)

    def add_modules_directory(self, directory: str) -> None:
        if directory not in self.modules_directories:
            self.modules_directories.append(directory)

    # Registration

    def hook(self, extension: str, handler: ExtensionHook) -> HookHandle:
        """Register a hook for files ending in ``.<extension>``."""
        extension = extension.lstrip(".")
        registration = _Registration(name=f"*.{extension}", handler=handler)
        self._extension_hooks.setdefault(extension, []).append(registration)
        logger.debug(f"Registered require() hook for *.{extension}")

        def release() -> None:
            registrations = self._extension_hooks.get(extension, [])
            if registration in registrations:
                registrations.remove(registration)
            if not registrations:
                self._extension_hooks.pop(extension, None)

        return HookHandle(kind="extension", name=registration.name, _release=release)

    def global_hook(self, name: str, handler: GlobalHook) -> HookHandle:
        """Register a hook seeing every raw request before resolution.

        Modules returned by the hook are cached under ``<request>.<name>``.
        """
        registration = _Registration(name=name, handler=handler)
        self._global_hooks.append(registration)
        logger.debug(f"Registered global require() hook '{name}'")

        def release() -> None:
            if registration in self._global_hooks:
                self._global_hooks.remove(registration)

        return HookHandle(kind="global", name=name, _release=release)

    def resolver(self, handler: ResolverHook, name: str | None = None) -> HookHandle:
        """Register a hook that may rewrite a request before path resolution."""
        registration = _Registration(name=name or handler.__name__, handler=handler)
        self._resolvers.append(registration)
        logger.debug(f"Registered resolver hook '{registration.name}'")

        def release() -> None:
            if registration in self._resolvers:
                self._resolvers.remove(registration)

        return HookHandle(kind="resolver", name=registration.name, _release=release)

    def has_hook(self, extension: str) -> bool:
        return bool(self._extension_hooks.get(extension.lstrip(".")))

    @property
    def global_hook_names(self) -> list[str]:
        return [registration.name for registration in self._global_hooks]

    # Resolution

    def resolve(self, request: str, importer: str | None = None) -> str:
        """
        Resolve a request to an absolute filesystem path.

        Relative requests resolve against the importer's directory (or the
        working directory); bare requests are searched in the modules
        directories of every ancestor of that directory.

        Raises:
            ModuleNotFoundError: A bare request matched no modules directory
        """
        for registration in self._resolvers:
            rewritten = registration.handler(request, importer)
            if rewritten:
                request = rewritten
                break

        request = request.replace("\\", "/")
        base = Path(importer).parent if importer else Path.cwd()

        if os.path.isabs(request):
            return os.path.normpath(request)

        if request in (".", "..") or request.startswith(("./", "../")):
            return os.path.normpath(os.path.join(os.path.abspath(base), request))

        directory = Path(os.path.abspath(base))
        for ancestor in (directory, *directory.parents):
            for modules_directory in self.modules_directories:
                candidate = ancestor / modules_directory / request
                if candidate.exists():
                    return str(candidate)

        raise ModuleNotFoundError(f"Cannot find module '{request}'")

    # Loading

    def load(self, request: str, importer: str | None = None) -> ModuleType:
        """Load a request and return its module (cached)."""
        for registration in self._global_hooks:
            cache_key = f"{request}.{registration.name}"
            if cache_key in self.module_cache:
                return self.module_cache[cache_key]

            module = registration.handler(request, importer)
            if module is not None:
                self.module_cache[cache_key] = module
                return module

        path = self.resolve(request, importer)
        if path in self.module_cache:
            return self.module_cache[path]

        for registration in self._hooks_for(path):
            module = registration.handler(path)
            if module is not None:
                self.module_cache[path] = module
                return module

        module = self._load_default(path, request)
        self.module_cache[path] = module
        return module

    def _hooks_for(self, path: str) -> list[_Registration]:
        """Extension hooks whose extension ends the path, longest extension first."""
        matching = [
            extension
            for extension in self._extension_hooks
            if path.endswith(f".{extension}")
        ]
        matching.sort(key=len, reverse=True)
        return [
            registration
            for extension in matching
            for registration in self._extension_hooks[extension]
        ]

    def require(self, request: str, importer: str | None = None) -> Any:
        """Load a request and return what its module exports."""
        return self.load(request, importer).exports

    def _load_default(self, path: str, request: str) -> ModuleType:
        if not os.path.isfile(path):
            raise ModuleNotFoundError(f"Cannot find module '{request}'")

        if path.endswith(".json"):
            with open(path, encoding="utf-8") as f:
                return to_module(json.load(f), path)

        if path.endswith(".py"):
            name = Path(path).stem
            spec = importlib.util.spec_from_file_location(name, path)
            if spec is None or spec.loader is None:
                raise ModuleNotFoundError(f"Cannot load module '{request}'")
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
            module.exports = module  # type: ignore[attr-defined]
            return module

        raise ModuleNotFoundError(
            f"No require() hook or default loader for '{request}'"
        )
