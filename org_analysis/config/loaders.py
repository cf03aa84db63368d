# org_analysis/config/loaders.py
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from org_analysis.config.models import AnalysisSettings

# Configure logger for this module
logger = logging.getLogger(__name__)

SETTINGS_SCHEMA = {
    "analysis": {
        "type": "dict",
        "required": False,
        "schema": {
            "batch_size": {"type": "integer", "required": False},
            "max_workers": {"type": "integer", "required": False, "nullable": True},
        },
    },
    "logging": {
        "type": "dict",
        "required": False,
        "schema": {
            "level": {"type": "string", "required": False},
            "directory": {"type": "string", "required": False},
        },
    },
}


class ConfigLoadError(Exception):
    """Custom exception for errors during config loading."""

    pass


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads configuration data from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        The parsed mapping. An empty file yields an empty dict.

    Raises:
        ConfigLoadError: If the file cannot be found or parsed, or is not a mapping.
    """
    if not isinstance(config_path, Path):
        config_path = Path(config_path)

    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e
    except OSError as e:
        logger.error(f"Error reading configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Cannot read configuration file {config_path}") from e

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        logger.error(f"Configuration file {config_path} did not parse into a dictionary.")
        raise ConfigLoadError(
            f"Invalid configuration format in {config_path}: Expected a dictionary."
        )

    logger.info(f"Successfully loaded configuration from {config_path}")
    return config_data


def settings_from_dict(config_data: Dict[str, Any]) -> AnalysisSettings:
    """
    Validates a raw config mapping and flattens it into AnalysisSettings.

    Raises:
        ConfigLoadError: On unknown keys, wrong types, or out-of-range values.
    """
    v = Validator(SETTINGS_SCHEMA)
    if not v.validate(config_data):
        raise ConfigLoadError(f"Config validation failed: {v.errors}")

    analysis = config_data.get("analysis") or {}
    log_cfg = config_data.get("logging") or {}
    flat: Dict[str, Any] = {}
    if "batch_size" in analysis:
        flat["batch_size"] = analysis["batch_size"]
    if analysis.get("max_workers") is not None:
        flat["max_workers"] = analysis["max_workers"]
    if "level" in log_cfg:
        flat["log_level"] = log_cfg["level"]
    if "directory" in log_cfg:
        flat["log_dir"] = Path(log_cfg["directory"])

    try:
        settings = AnalysisSettings(**flat)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid settings: {e}") from e

    logger.debug(f"Settings resolved: {settings}")
    return settings


def load_settings(config_path: Optional[Union[str, Path]] = None) -> AnalysisSettings:
    """Load settings from ``config_path``, or return defaults when no path is given."""
    if config_path is None:
        return AnalysisSettings()
    return settings_from_dict(load_yaml_config(config_path))


__all__ = [
    "ConfigLoadError",
    "load_settings",
    "load_yaml_config",
    "settings_from_dict",
]
