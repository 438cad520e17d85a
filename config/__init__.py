"""
Configuration module for the agent stream server.

Exports the main configuration classes and functions for use throughout the application.
"""

from .agent_config import AgentConfig
from .defaults import CHANNEL_PREFIX, DEFAULT_MODEL
from .loader import (
    env_overrides,
    get_config,
    get_working_directory,
    load_config,
    load_config_file,
    merge_configs,
    strip_jsonc_comments,
)
from .main_config import Config

__all__ = [
    # Constants
    "DEFAULT_MODEL",
    "CHANNEL_PREFIX",
    # Config models
    "Config",
    "AgentConfig",
    # Loader functions
    "load_config",
    "get_config",
    "get_working_directory",
    "load_config_file",
    "merge_configs",
    "env_overrides",
    "strip_jsonc_comments",
]
