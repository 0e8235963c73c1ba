"""
Configuration models for manifest-require.
Uses Pydantic for validation.
"""

import os
import re
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

MODE_ENV_VAR = "MANIFEST_REQUIRE_ENV"
DEFAULT_ASSETS_FILE = "webpack-assets.json"

# A rule is an exact string, a compiled pattern, or a predicate over the key
Rule = str | re.Pattern | Callable[[str], bool]


class Mode(str, Enum):
    """Runtime mode: development reloads everything, production caches."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"

    @classmethod
    def from_environment(cls) -> "Mode":
        """Read the mode from MANIFEST_REQUIRE_ENV ("production" or anything else)."""
        if os.environ.get(MODE_ENV_VAR) == "production":
            return cls.PRODUCTION
        return cls.DEVELOPMENT


def _coerce_rule(rule: Any) -> Rule:
    if isinstance(rule, dict):
        if set(rule) != {"regex"}:
            raise ValueError(f"Rule mappings only support a 'regex' key, got {rule!r}")
        return re.compile(rule["regex"])
    if isinstance(rule, (str, re.Pattern)) or callable(rule):
        return rule
    raise ValueError(f"Unsupported rule type: {type(rule).__name__}")


class AssetType(BaseModel):
    """One asset type: its extensions and optional include/exclude rules."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    extensions: list[str] = Field(..., min_length=1, description="File extensions")
    include: list[Any] | None = Field(
        default=None, description="Rules a key must match at least one of"
    )
    exclude: list[Any] | None = Field(
        default=None, description="Rules excluding a key when any matches"
    )

    @field_validator("extensions", mode="before")
    @classmethod
    def _strip_dots(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        return [ext.lstrip(".") if isinstance(ext, str) else ext for ext in value]

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _compile_rules(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [_coerce_rule(rule) for rule in value]


class ToolsConfig(BaseModel):
    """Settings for an AssetTools instance."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    assets: dict[str, AssetType] = Field(
        default_factory=dict, description="Asset types keyed by name"
    )
    webpack_assets_file_path: str = Field(
        default=DEFAULT_ASSETS_FILE,
        description="Manifest location, relative to the project path",
    )
    port: int | None = Field(
        default=None, description="Local port serving the manifest in development"
    )
    alias: dict[str, str] | None = Field(
        default=None, description="Request prefix aliases (bundler resolve.alias)"
    )
    modules_directories: list[str] | None = Field(
        default=None, description="Extra directory names searched for bare requests"
    )
    project_path: Path | None = Field(
        default=None, description="Bundler context directory"
    )
    mode: Mode = Field(default_factory=Mode.from_environment)
    debug: bool = False
    http_timeout: float = Field(default=2.0, gt=0, description="Seconds")

    @property
    def development(self) -> bool:
        return self.mode is Mode.DEVELOPMENT

    @property
    def manifest_path(self) -> Path | None:
        """Absolute manifest path, once the project path is known."""
        if self.project_path is None:
            return None
        return (Path(self.project_path) / self.webpack_assets_file_path).resolve()
