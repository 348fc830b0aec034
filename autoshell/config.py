"""Autoshell config loader.

Reads autoshell.config (YAML) from the working directory.
Caches result after first load. Call _reset_config() in tests.
"""

import copy
import os

import yaml

from autoshell.errors import ConfigError

_config = None

CONFIG_FILENAME = "autoshell.config"
OUTPUT_FORMATS = ("tree", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULTS = {
    "diagnostics": {
        "marker": "^",
        "fill": "-",
        "suffix": "",
    },
    "output": {
        "format": "tree",
        "indent": 2,
    },
    "logging": {
        "level": "WARNING",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def get_config(config_dir: str | None = None) -> dict:
    """Load and return the autoshell config, caching after first call."""
    global _config
    if _config is not None:
        return _config

    if config_dir is None:
        config_dir = os.getcwd()

    config_path = os.path.join(config_dir, CONFIG_FILENAME)

    config = copy.deepcopy(DEFAULTS)
    if os.path.exists(config_path):
        with open(config_path) as f:
            try:
                user_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if user_config and isinstance(user_config, dict):
            config = _deep_merge(config, user_config)

    _validate(config)
    _config = config
    return _config


def _validate(config: dict) -> None:
    fmt = config["output"]["format"]
    if fmt not in OUTPUT_FORMATS:
        raise ConfigError(f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got {fmt!r}")
    level = str(config["logging"]["level"]).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Unknown logging.level: {config['logging']['level']!r}")
    if not isinstance(config["output"]["indent"], int) or config["output"]["indent"] < 0:
        raise ConfigError("output.indent must be a non-negative integer")


def _reset_config():
    """Clear cached config. Call this in tests."""
    global _config
    _config = None
