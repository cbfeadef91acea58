#!/usr/bin/env python3

import os
import re
import json
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

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
logger = logging.getLogger("repochangelog")

ENV_PREFIX = "REPOCHANGELOG_"

# Dedicated config files, searched in the repository root
CONFIG_FILENAMES = ['.changelog.json', '.changelog.toml', '.changelog.yaml', '.changelog.yml']

# Shared manifests that may carry a "changelog" section
MANIFEST_FILENAMES = ['lerna.json', 'package.json']

# Keys as written in lerna.json / package.json
CAMEL_CASE_KEYS = {
    'ignoreCommitters': 'ignore_committers',
    'cacheDir': 'cache_dir',
    'packagesDir': 'packages_dir',
}


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "repo": "",
        "labels": {},
        "ignore_committers": [],
        "packages_dir": "packages/",
        "cache_dir": "",
        "concurrency": 5,
        "github": {
            "token": "",
            "api_url": "https://api.github.com",
            "web_url": "https://github.com",
            "timeout_seconds": 30
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


def _has_changelog_section(path: Path) -> bool:
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        return False
    return isinstance(data, dict) and isinstance(data.get('changelog'), dict)


def get_config_path(root: Optional[str] = None) -> Optional[Path]:
    """Get the path to the configuration file.

    Checks in order:
    1. REPOCHANGELOG_CONFIG environment variable
    2. .changelog.{json,toml,yaml,yml} in the repository root
    3. lerna.json / package.json with a "changelog" section

    Returns None when no configuration file exists.
    """
    if 'REPOCHANGELOG_CONFIG' in os.environ:
        path = Path(os.environ['REPOCHANGELOG_CONFIG']).expanduser()
        if not path.exists():
            raise ConfigError(f"REPOCHANGELOG_CONFIG points to a missing file: {path}")
        return path

    base = Path(root) if root else Path.cwd()

    for filename in CONFIG_FILENAMES:
        path = base / filename
        if path.exists():
            return path

    for filename in MANIFEST_FILENAMES:
        path = base / filename
        if path.exists() and _has_changelog_section(path):
            logger.debug(f"Using changelog section of {path}")
            return path

    return None


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a configuration file.

    Manifests (lerna.json, package.json) contribute only their
    "changelog" section.

    Raises:
        ConfigError: if the file cannot be read or parsed
    """
    suffix = path.suffix.lower()
    try:
        if suffix == '.toml':
            with open(path, 'rb') as f:
                file_config = tomllib.load(f)
        elif suffix in ('.yaml', '.yml'):
            with open(path, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        else:
            with open(path, 'r') as f:
                file_config = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {path}: {e}")

    if path.name in MANIFEST_FILENAMES:
        file_config = file_config.get('changelog', {})

    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    return normalize_keys(file_config)


def normalize_keys(config: Dict[str, Any]) -> Dict[str, Any]:
    """Rename camelCase top-level keys to their snake_case form."""
    return {CAMEL_CASE_KEYS.get(key, key): value for key, value in config.items()}


def load_config(root: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration: defaults, then the config file, then environment."""
    config = get_default_config()

    config_path = get_config_path(root)
    if config_path is not None:
        logger.debug(f"Loading config from {config_path}")
        config = merge_configs(config, read_config_file(config_path))

    config = apply_env_overrides(config)
    return config


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check the parts of the configuration the changelog cannot do without.

    Raises:
        ConfigError: on a missing or malformed label mapping, ignore list
            or concurrency setting
    """
    labels = config.get('labels')
    if not labels:
        raise ConfigError(
            "Missing 'labels' in changelog configuration; "
            "map GitHub label names to headings, e.g. {\"bug\": \":bug: Bug Fix\"}"
        )
    if not isinstance(labels, dict):
        raise ConfigError("'labels' must be a mapping of label name to heading")
    for label, heading in labels.items():
        if not isinstance(label, str) or not isinstance(heading, str):
            raise ConfigError(f"Label {label!r} must map to a heading string, got {heading!r}")

    ignore = config.get('ignore_committers') or []
    if not isinstance(ignore, list) or not all(isinstance(t, str) for t in ignore):
        raise ConfigError("'ignore_committers' must be a list of strings")

    concurrency = config.get('concurrency')
    if not isinstance(concurrency, int) or isinstance(concurrency, bool) or concurrency < 1:
        raise ConfigError(f"'concurrency' must be a positive integer, got {concurrency!r}")

    return config


def repo_from_remote_url(url: str) -> Optional[str]:
    """
    Extract "owner/name" from a git remote URL.

    Handles:
        https://github.com/owner/repo.git -> owner/repo
        git@github.com:owner/repo.git     -> owner/repo
        ssh://git@github.com/owner/repo   -> owner/repo
    """
    match = re.search(r'[:/]([^/:]+/[^/]+?)(?:\.git)?/?$', url.strip())
    if match:
        return match.group(1)
    return None


def configure_logging(config: Dict[str, Any], verbose: bool = False) -> None:
    """Apply the logging section of the configuration."""
    level_name = 'DEBUG' if verbose else str(config.get('logging', {}).get('level', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)

    fmt = config.get('logging', {}).get('format')
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
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict) and key != 'labels':
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: REPOCHANGELOG_SECTION_KEY
    For example: REPOCHANGELOG_GITHUB_TIMEOUT_SECONDS=10
    """
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue

        key_parts = env_key[len(ENV_PREFIX):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that prefixes the remaining parts wins
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config
