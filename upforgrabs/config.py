#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("upforgrabs")

# Variables provided by the GitHub Actions runner, mapped onto config keys
ACTIONS_ENV = {
    "GITHUB_TOKEN": ("github", "token"),
    "GITHUB_API_URL": ("github", "api_url"),
    "GITHUB_REPOSITORY": ("github", "repository"),
    "GITHUB_SHA": ("github", "sha"),
    "GITHUB_WORKSPACE": ("registry", "root"),
}


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. UPFORGRABS_CONFIG environment variable
    2. ~/.upforgrabs/ directory
    """
    if 'UPFORGRABS_CONFIG' in os.environ:
        path = Path(os.environ['UPFORGRABS_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.upforgrabs'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists():
            return path

    return config_dir / 'config.json'


def load_config():
    """Load configuration from file, environment and Actions variables."""
    config_path = get_config_path()

    config = apply_actions_env(get_default_config())

    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    configure_logging(config)
    return config


def get_default_config():
    """Get default configuration."""
    return {
        "github": {
            "token": "",
            "api_url": "https://api.github.com",
            "repository": "",
            "sha": "",
            "publishing_branch": "gh-pages",
            "timeout_seconds": 30
        },
        "registry": {
            "root": ".",
            "projects_glob": "_data/projects/*.yml",
            "schema": "schema.json"
        },
        "rate_limit": {
            "low_fraction": 0.2,
            "warn_every": 10
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
        "event_path": "",
        "verbose": False
    }


def configure_logging(config):
    """Apply the logging section to the package logger."""
    settings = config.get("logging", {})
    level = str(settings.get("level", "INFO")).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    fmt = settings.get("format")
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
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def coerce_env_value(value, current):
    """
    Convert an environment string to the type of the setting it replaces.

    String settings (tokens, shas, branch names) stay strings whatever
    they look like.
    """
    if isinstance(current, str):
        return value

    if not isinstance(current, bool):
        if value.isdigit():
            return int(value)
        if isinstance(current, float):
            try:
                return float(value)
            except ValueError:
                return value

    if value.lower() in ('true', '1', 'yes', 'on'):
        return True
    if value.lower() in ('false', '0', 'no', 'off'):
        return False
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: UPFORGRABS_SECTION_KEY
    For example: UPFORGRABS_GITHUB_PUBLISHING_BRANCH=main
    """
    env_prefix = "UPFORGRABS_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "UPFORGRABS_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that prefixes the remaining parts wins
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = coerce_env_value(value, current_level[matched_key])
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    break
            else:
                break

    return config


def apply_actions_env(config):
    """
    Apply values provided by the GitHub Actions runner on top of defaults.

    Runs before the config file and UPFORGRABS_* overrides are merged,
    so explicit configuration wins.
    """
    for env_key, (section, key) in ACTIONS_ENV.items():
        value = os.environ.get(env_key)
        if value:
            config[section][key] = value

    if os.environ.get("GITHUB_EVENT_PATH"):
        config["event_path"] = os.environ["GITHUB_EVENT_PATH"]

    if os.environ.get("VERBOSE_OUTPUT"):
        config["verbose"] = True

    return config
