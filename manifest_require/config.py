"""Loading ToolsConfig from YAML files.

Example::

    webpack_assets_file_path: build/webpack-assets.json
    alias:
      styles: ./src/styles
    assets:
      images:
        extensions: [png, jpg, svg]
        exclude:
          - regex: "\\.inline\\.svg$"
      style_modules:
        extensions: [css, scss]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import ConfigurationError
from .models import ToolsConfig


def parse_config(data: dict[str, Any] | None) -> ToolsConfig:
    """Validate a raw mapping into a ToolsConfig.

    Raises:
        ConfigurationError: The mapping is not a valid configuration.
    """
    try:
        return ToolsConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_config(path: str | Path) -> ToolsConfig:
    """Read a YAML configuration file.

    Relative ``project_path`` values are resolved against the file's directory.

    Raises:
        ConfigurationError: The file is missing, unparsable or invalid.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")

    config = parse_config(data)
    if config.project_path is not None and not config.project_path.is_absolute():
        config.project_path = (path.parent / config.project_path).resolve()
    return config
