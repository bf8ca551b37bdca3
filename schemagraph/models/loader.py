"""Builder configuration loader."""

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from schemagraph.core.exceptions import ConfigError
from schemagraph.models.builder_config import BuilderConfig


def load_config(path: str) -> BuilderConfig:
    """
    Load builder configuration from a YAML file.

    The file may hold the settings at the top level or under a
    ``schemagraph`` key.

    Args:
        path: Path to the YAML file

    Returns:
        Validated BuilderConfig instance

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or fails validation
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}", context={"path": str(path)})

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in config file: {e}", context={"path": str(path)}
        ) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(
            "Config file must contain a YAML dictionary", context={"path": str(path)}
        )

    settings: Dict[str, Any] = raw.get("schemagraph", raw)
    try:
        return BuilderConfig(**settings)
    except ValidationError as e:
        raise ConfigError(
            f"Config validation failed: {e}", context={"path": str(path)}
        ) from e
