"""Path normalization and request aliasing.

Canonical keys are what the bundler writes into its manifest: paths relative
to the bundler context, always "/"-delimited and always starting with "./"
or "../".
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def _posix(path: str | Path) -> str:
    return str(path).replace("\\", "/")


def is_relative_request(request: str) -> bool:
    """True for "./x", "../x" (either separator), "." and ".."."""
    request = _posix(request)
    return request in (".", "..") or request.startswith(("./", "../"))


def is_package_request(request: str) -> bool:
    """True for bare requests like "lodash/fp" (neither relative nor absolute)."""
    posix = _posix(request)
    if is_relative_request(posix) or posix.startswith("/"):
        return False
    # Windows drive letter ("C:/...")
    return not (len(posix) > 1 and posix[1] == ":")


def uniform_path(asset_path: str | Path) -> str:
    """Convert a relative path to canonical form ("./" prefix, "/" separators)."""
    asset_path = _posix(asset_path)
    if asset_path in ("", "."):
        return "./"
    if asset_path == ".." or asset_path.startswith(("./", "../")):
        return asset_path
    return f"./{asset_path}"


def normalize_asset_path(
    global_asset_path: str | Path, project_path: str | Path | None
) -> str:
    """Convert an absolute filesystem path to a canonical manifest key.

    Args:
        global_asset_path: Absolute path of the requested file.
        project_path: Bundler context directory.

    Returns:
        Project-relative key, e.g. "./styles/app.css".

    Raises:
        ConfigurationError: If the project path has not been configured yet.
    """
    if not project_path:
        raise ConfigurationError(
            "Project path is not set: call AssetTools.server() with your "
            "project's base path before requiring assets"
        )

    asset = posixpath.normpath(_posix(global_asset_path))
    base = posixpath.normpath(_posix(project_path))

    return uniform_path(posixpath.relpath(asset, base))


def alias_request(
    request: str, aliases: dict[str, str] | None, project_path: str | Path | None
) -> str | None:
    """Apply bundler-style aliases to a bare request.

    Only the first path segment is matched: with ``{"lib": "./src/lib"}``,
    "lib/button.css" becomes "<project>/src/lib/button.css". Relative alias
    targets are resolved against the project path.

    Returns:
        The rewritten request, or None when no alias applies.
    """
    if not aliases or not is_package_request(request):
        return None

    module_name, slash, rest = _posix(request).partition("/")
    target = aliases.get(module_name)
    if target is None:
        return None

    if is_relative_request(target):
        if not project_path:
            raise ConfigurationError(
                f"Alias '{module_name}' points to a relative path but the "
                "project path is not set"
            )
        target = _posix(Path(project_path) / target)
        target = posixpath.normpath(target)

    aliased = f"{target}{slash}{rest}"
    logger.debug(f"Aliased '{request}' to '{aliased}'")
    return aliased
