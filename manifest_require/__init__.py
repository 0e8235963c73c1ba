"""
manifest-require - serve bundler-built assets through require() hooks.
"""

__version__ = "1.0.0"

from .cache import CacheTracker
from .config import load_config
from .config import parse_config
from .dispatcher import InterceptionDispatcher
from .errors import AssetNotFound
from .errors import ConfigurationError
from .errors import InvalidModeError
from .errors import ManifestMissing
from .errors import ManifestNotReady
from .errors import ManifestRequireError
from .filters import is_handled
from .host import HookHandle
from .host import RequireHost
from .manifest import FileManifestSource
from .manifest import HttpManifestSource
from .manifest import ManifestAccessor
from .manifest import default_manifest
from .models import AssetType
from .models import Mode
from .models import ToolsConfig
from .paths import normalize_asset_path
from .resolver import AssetResolver
from .resolver import candidate_keys
from .tools import AssetTools
from .waiting import wait_for_assets

__all__ = [
    "AssetTools",
    "AssetType",
    "ToolsConfig",
    "Mode",
    "load_config",
    "parse_config",
    "RequireHost",
    "HookHandle",
    "InterceptionDispatcher",
    "CacheTracker",
    "AssetResolver",
    "candidate_keys",
    "is_handled",
    "normalize_asset_path",
    "ManifestAccessor",
    "FileManifestSource",
    "HttpManifestSource",
    "default_manifest",
    "wait_for_assets",
    # Error taxonomy
    "ManifestRequireError",
    "ConfigurationError",
    "ManifestMissing",
    "ManifestNotReady",
    "AssetNotFound",
    "InvalidModeError",
]
