"""
Configuration management for trackduel
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class TournamentConfig:
    """Configuration for battle generation."""

    seed: Optional[int] = None  # Fixed seed for reproducible battle order
    restart_when_complete: bool = True  # Reset a finished playlist when battling again


@dataclass
class ExportConfig:
    """Configuration for JSON import/export."""

    directory: str = field(default_factory=lambda: str(Path.home() / "Music" / "trackduel"))
    indent: int = 2
    strict_import: bool = True  # Reject imports whose stats disagree with battles

    def validate(self) -> None:
        """Validate export configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.indent < 0:
            raise ValueError(f"Invalid export indent: {self.indent}. Must be >= 0")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: ~/.local/share/trackduel/trackduel.log
    rotation_mb: int = 10  # Maximum log file size before rotation
    retention: int = 5  # Number of rotated files to keep
    console_output: bool = False  # Also log to stderr

    def validate(self) -> None:
        """Validate logging configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.level}. "
                f"Valid levels are: {sorted(VALID_LOG_LEVELS)}"
            )
        if self.rotation_mb <= 0:
            raise ValueError(f"Invalid rotation size: {self.rotation_mb} MB")


@dataclass
class Config:
    """Main configuration object."""

    tournament: TournamentConfig = field(default_factory=TournamentConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        self.export.validate()
        self.logging.validate()


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "trackduel"
    return Path.home() / ".config" / "trackduel"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/trackduel (or ~/.config/trackduel)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "trackduel"
    return Path.home() / ".local" / "share" / "trackduel"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# trackduel Configuration

[tournament]
# Fixed random seed for reproducible battle order (omit for random)
# seed = 42

# Reset a finished playlist when starting to battle it again
restart_when_complete = true

[export]
# Default directory for exported playlists
directory = "~/Music/trackduel"

# JSON indentation
indent = 2

# Reject imported playlists whose stats disagree with their battle history.
# When false, such playlists are repaired by replaying their battles.
strict_import = true

[logging]
# TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
level = "INFO"

# Rotate the log file after this many MB, keeping this many old files
rotation_mb = 10
retention = 5

# Also log to stderr
console_output = false
""".strip()


def config_from_dict(toml_data: dict) -> Config:
    """Build a Config from parsed TOML, falling back to defaults per key."""
    config = Config()

    if "tournament" in toml_data:
        data = toml_data["tournament"]
        config.tournament = TournamentConfig(
            seed=data.get("seed", config.tournament.seed),
            restart_when_complete=data.get(
                "restart_when_complete", config.tournament.restart_when_complete
            ),
        )

    if "export" in toml_data:
        data = toml_data["export"]
        config.export = ExportConfig(
            directory=str(Path(data.get("directory", config.export.directory)).expanduser()),
            indent=data.get("indent", config.export.indent),
            strict_import=data.get("strict_import", config.export.strict_import),
        )

    if "logging" in toml_data:
        data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=data.get("level", config.logging.level),
            log_file=data.get("log_file"),
            rotation_mb=data.get("rotation_mb", config.logging.rotation_mb),
            retention=data.get("retention", config.logging.retention),
            console_output=data.get("console_output", config.logging.console_output),
        )

    return config


def apply_env_overrides(config: Config) -> Config:
    """Apply TRACKDUEL_* environment variables on top of file values."""
    seed = os.environ.get("TRACKDUEL_SEED")
    if seed:
        try:
            config.tournament.seed = int(seed)
        except ValueError:
            raise ValueError(f"TRACKDUEL_SEED must be an integer, got {seed!r}") from None

    level = os.environ.get("TRACKDUEL_LOG_LEVEL")
    if level:
        config.logging.level = level.upper()

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - TRACKDUEL_SEED
    - TRACKDUEL_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        config = Config()
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            config = config_from_dict(toml_data)
            config.validate()
        except (OSError, tomllib.TOMLDecodeError, ValueError, TypeError) as e:
            print(f"Error loading configuration from {config_path}: {e}")
            print("Using default configuration.")
            config = Config()

    apply_env_overrides(config)
    config.validate()
    return config


def save_config(config: Config, config_path: Optional[Path] = None) -> bool:
    """Save configuration to file."""
    config_path = config_path or get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        toml_content = "# trackduel Configuration\n\n[tournament]\n"
        if config.tournament.seed is not None:
            toml_content += f"seed = {config.tournament.seed}\n"
        toml_content += f"""restart_when_complete = {str(config.tournament.restart_when_complete).lower()}

[export]
directory = "{config.export.directory}"
indent = {config.export.indent}
strict_import = {str(config.export.strict_import).lower()}

[logging]
level = "{config.logging.level}"
rotation_mb = {config.logging.rotation_mb}
retention = {config.logging.retention}
console_output = {str(config.logging.console_output).lower()}"""

        if config.logging.log_file:
            toml_content += f'\nlog_file = "{config.logging.log_file}"'

        toml_content += "\n"

        with open(config_path, "w", encoding="utf-8") as f:
            f.write(toml_content)

        return True

    except OSError as e:
        print(f"Error saving configuration to {config_path}: {e}")
        return False


def ensure_directories(config: Optional[Config] = None) -> None:
    """Ensure the config, data and export directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
    if config is not None:
        Path(config.export.directory).expanduser().mkdir(parents=True, exist_ok=True)
