#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("trenza")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']

# Everything else in the config is a string
NUMERIC_SETTINGS = {('git', 'timeout')}


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. TRENZA_CONFIG environment variable
    2. ~/.trenza/ directory
    """
    if 'TRENZA_CONFIG' in os.environ:
        path = Path(os.environ['TRENZA_CONFIG'])
        if path.exists():
            return path

    trenza_dir = Path.home() / '.trenza'
    for filename in CONFIG_FILENAMES:
        path = trenza_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return trenza_dir / 'config.json'


def load_config():
    """Load configuration from file.

    Raises:
        ConfigError: If the config file exists but cannot be parsed
    """
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f)
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if file_config is None:
            file_config = {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        config = merge_configs(config, file_config)

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config):
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.suffix.lower() in ['.yaml', '.yml']:
        with open(config_path, 'w') as f:
            yaml.safe_dump(config, f, default_flow_style=False)
    else:
        if config_path.suffix.lower() == '.toml':
            # tomllib is read-only
            logger.warning("Cannot write TOML configuration. Saving as JSON instead.")
            config_path = config_path.with_suffix('.json')
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "join": {
            "suffix": "_joined",
            "branch": None,
            "commit_message": "Move {alias} repo contents",
        },
        "manifest": {
            # Remote-tracking line written by repo-style manifests, e.g.
            # "m/master -> origin/release-1.0"
            "pattern": r"m/\S* -> (\S*)",
            "tag_branch": "tmp_join_branch",
        },
        "git": {
            "executable": "git",
            "timeout": None,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


def configure_logging(config, verbose=False):
    """Apply the logging section of ``config`` to the trenza logger."""
    logging_config = config.get("logging", {})
    level_name = "DEBUG" if verbose else str(logging_config.get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level: {level_name}")
    logger.setLevel(level)

    fmt = logging_config.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def _numeric_setting(env_key, value):
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{env_key} must be a number, got {value!r}") from None


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.

    Every ``section.key`` setting can be overridden by ``TRENZA_SECTION_KEY``,
    e.g. TRENZA_JOIN_SUFFIX=_mono or TRENZA_MANIFEST_TAG_BRANCH=join_tmp.
    Values are kept as strings, so numeric branch names like ``2024`` stay
    branch names; only the settings in NUMERIC_SETTINGS are parsed.

    Raises:
        ConfigError: If a numeric setting gets a non-numeric value
    """
    for section, values in config.items():
        if not isinstance(values, dict):
            continue
        for key in values:
            env_key = f"TRENZA_{section}_{key}".upper()
            if env_key not in os.environ:
                continue
            value = os.environ[env_key]
            if (section, key) in NUMERIC_SETTINGS:
                values[key] = _numeric_setting(env_key, value)
            else:
                values[key] = value

    return config


def get_setting(config, section, key, default=None):
    """Read a string setting, tolerating non-string values from YAML or TOML files."""
    value = config.get(section, {}).get(key)
    if value is None:
        return default
    return str(value)
