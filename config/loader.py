"""Configuration loading utilities."""

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from .defaults import CONFIG_DIRNAME, CONFIG_FILENAMES, DEFAULT_CORS_ORIGINS, GLOBAL_CONFIG_FILENAME
from .main_config import Config

logger = logging.getLogger(__name__)

# Environment variable names
MODEL_ENV = "AGENT_MODEL"
WORKING_DIR_ENV = "WORKING_DIR"
LOG_LEVEL_ENV = "LOG_LEVEL"
CORS_ORIGINS_ENV = "CORS_ORIGINS"


def strip_jsonc_comments(content: str) -> str:
    """
    Strip comments from JSONC content to convert to valid JSON.

    Handles:
    - Single-line comments: // comment
    - Multi-line comments: /* comment */

    Args:
        content: JSONC content string

    Returns:
        JSON string with comments removed
    """
    content = re.sub(r"^\s*//.*?$", "", content, flags=re.MULTILINE)
    content = re.sub(r"/\*.*?\*/", "", content, flags=re.DOTALL)
    return content


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Load a config file from the given path.

    Supports both .json and .jsonc files with comment stripping.

    Args:
        path: Path to the config file

    Returns:
        Parsed config dictionary or None if the file is missing or unreadable
    """
    if not path.exists():
        return None

    try:
        content = path.read_text()
        if path.suffix == ".jsonc":
            content = strip_jsonc_comments(content)
        data = json.loads(content)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return None
    return data


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """
    Collect configuration overrides from environment variables.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Partial config dictionary
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}

    agent: dict[str, Any] = {}
    if env.get(MODEL_ENV):
        agent["model"] = env[MODEL_ENV]
    if env.get(WORKING_DIR_ENV):
        agent["workspace_path"] = env[WORKING_DIR_ENV]
    if agent:
        overrides["agent"] = agent

    if env.get(LOG_LEVEL_ENV):
        overrides["log_level"] = env[LOG_LEVEL_ENV].upper()

    origins = env.get(CORS_ORIGINS_ENV)
    if origins and origins != DEFAULT_CORS_ORIGINS:
        overrides["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    return overrides


def load_config(project_root: Path | None = None, environ: dict[str, str] | None = None) -> Config:
    """
    Load configuration from multiple sources with precedence.

    Sources, lowest precedence first:
    1. Global: ~/.agentstream/agentstream.jsonc
    2. Project-level: agentstream.jsonc, agentstream.json, .agentstream/agentstream.jsonc
       (first one found)
    3. Environment variables (AGENT_MODEL, WORKING_DIR, LOG_LEVEL, CORS_ORIGINS)

    Args:
        project_root: Project root directory (defaults to current working directory)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Loaded and merged Config model
    """
    if project_root is None:
        project_root = Path.cwd()

    global_config_path = Path.home() / CONFIG_DIRNAME / GLOBAL_CONFIG_FILENAME
    config_data = load_config_file(global_config_path) or {}

    for name in CONFIG_FILENAMES:
        project_config = load_config_file(project_root / name)
        if project_config:
            config_data = merge_configs(config_data, project_config)
            break

    config_data = merge_configs(config_data, env_overrides(environ))
    return Config(**config_data)


def get_working_directory() -> str:
    """
    Get the working directory from environment or default to cwd.

    Returns:
        The working directory path as a string
    """
    return os.environ.get(WORKING_DIR_ENV, os.getcwd())


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> Config:
    """
    Get cached configuration.

    This function caches the config to avoid repeated file I/O.
    To reload the config, clear the cache with get_config.cache_clear().

    Args:
        project_root: Project root directory (defaults to current working directory)

    Returns:
        Cached Config model
    """
    return load_config(project_root or Path.cwd())
