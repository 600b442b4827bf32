"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging (Loguru)
- Console management (Rich)

Clean architecture principle: The core layer has no dependencies on
the domain layer.
"""

# Configuration
from .config import (
    Config,
    ExportConfig,
    LoggingConfig,
    TournamentConfig,
    load_config,
    save_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
    ensure_directories,
)

# Console
from .console import get_console, safe_print, set_console

# Output
from .output import log, setup_loguru, setup_from_config

__all__ = [
    # Config
    "Config",
    "ExportConfig",
    "LoggingConfig",
    "TournamentConfig",
    "load_config",
    "save_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    "ensure_directories",
    # Console
    "get_console",
    "safe_print",
    "set_console",
    # Output
    "log",
    "setup_loguru",
    "setup_from_config",
]
