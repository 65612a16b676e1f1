"""Configuration management for jobpool.

This module provides configuration for pools created from settings rather
than from explicit arguments. It supports:
- Configuration files in TOML format
- Environment variables
- Project and user configuration file locations
- Type-safe configuration using Pydantic

Configuration Priority (highest to lowest):
1. Environment variables
2. Project configuration file (.jobpool/config.toml or jobpool.toml)
3. User configuration file (e.g. ~/.config/jobpool/config.toml)
4. Values passed to the constructor
5. Default values

Environment Variable Naming:
- Flat fields: JOBPOOL_<FIELD_NAME> (e.g., JOBPOOL_NUM_WORKERS)
- Nested fields: JOBPOOL_<SECTION>__<FIELD> (e.g., JOBPOOL_LOGGING__LOG_LEVEL)
"""

import logging
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from jobpool.logging import setup_logging
from jobpool.pool import DEFAULT_THREAD_NAME_PREFIX, WorkerPool, default_worker_count

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    console_logging: bool = Field(
        default=False,
        description="Also log to the console",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        v_upper = v.upper()
        if v_upper not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {LOG_LEVELS}, got {v}")
        return v_upper


class PoolConfig(BaseSettings):
    """Configuration of a job pool.

    Environment Variables:
        - JOBPOOL_NUM_WORKERS: Number of worker threads
        - JOBPOOL_QUEUE_SIZE: Capacity of the job queue
        - JOBPOOL_THREAD_NAME_PREFIX: Prefix of the thread names
        - JOBPOOL_DAEMON_THREADS: Whether pool threads are daemon threads
        - JOBPOOL_LOGGING__LOG_LEVEL: Logging level
        - JOBPOOL_LOGGING__CONSOLE_LOGGING: Also log to the console
    """

    model_config = SettingsConfigDict(
        env_prefix="JOBPOOL_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    num_workers: int | None = Field(
        default=None,
        ge=0,
        description="Number of worker threads (default: number of logical CPUs)",
    )

    queue_size: int = Field(
        default=0,
        ge=0,
        description="Capacity of the job queue (0: a worker must be idle to accept a job)",
    )

    thread_name_prefix: str = Field(
        default=DEFAULT_THREAD_NAME_PREFIX,
        description="Prefix of worker and supervisor thread names",
    )

    daemon_threads: bool = Field(
        default=True,
        description="Run pool threads as daemon threads",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    @property
    def effective_num_workers(self) -> int:
        """Configured worker count, or the logical CPU count if unset."""
        if self.num_workers is None:
            return default_worker_count()
        return self.num_workers

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources and their priority for settings.

        Priority order (highest to lowest):
        1. Environment variables
        2. Project configuration file
        3. User configuration file
        4. Init settings (programmatic)
        """
        config_files = find_config_files()

        # pydantic-settings gives sources on the left higher priority
        toml_sources = []
        for location in ("project", "user"):
            config_file = config_files[location]
            if config_file is None:
                continue
            toml_sources.append(TomlConfigSettingsSource(settings_cls, toml_file=config_file))
            logger.debug(f"Loaded {location} config: {config_file}")

        return (
            env_settings,
            *toml_sources,
            init_settings,
        )


def find_config_files() -> dict[str, Path | None]:
    """Find configuration files in standard locations.

    Returns:
        Dictionary with keys 'user' and 'project', each containing a Path to
        the config file if it exists, or None otherwise.
    """
    config_files: dict[str, Path | None] = {
        "user": None,
        "project": None,
    }

    user_config_dir = Path(platformdirs.user_config_dir("jobpool", appauthor=False))
    user_config = user_config_dir / "config.toml"
    if user_config.exists():
        config_files["user"] = user_config

    # .jobpool/config.toml takes precedence over jobpool.toml
    cwd = Path.cwd()
    for project_config in (cwd / ".jobpool" / "config.toml", cwd / "jobpool.toml"):
        if project_config.exists():
            config_files["project"] = project_config
            break

    return config_files


def get_config_file_locations() -> dict[str, Path]:
    """Get the standard configuration file locations.

    Returns:
        Dictionary with keys 'user' and 'project', each containing the Path
        where the config file should be located (may not exist).
    """
    user_config_dir = Path(platformdirs.user_config_dir("jobpool", appauthor=False))
    return {
        "user": user_config_dir / "config.toml",
        "project": Path.cwd() / ".jobpool" / "config.toml",
    }


# Lazily initialized on first access
_config: PoolConfig | None = None


def get_config(reload: bool = False) -> PoolConfig:
    """Get the global configuration instance.

    Args:
        reload: If True, reload the configuration from files and environment.

    Returns:
        The global PoolConfig instance.
    """
    global _config

    if _config is None or reload:
        _config = PoolConfig()

    return _config


def setup_logging_from_config(config: PoolConfig | None = None) -> None:
    """Apply the logging section of ``config`` to the jobpool logger.

    Args:
        config: Pool configuration; the global configuration if None
    """
    if config is None:
        config = get_config()

    setup_logging(config.logging.log_level, config.logging.console_logging)
    logger.debug(f"Logging configured: level {config.logging.log_level}")


def new_pool_from_config(
    config: PoolConfig | None = None, configure_logging: bool = True
) -> WorkerPool:
    """Create and start a pool configured by ``config``.

    Args:
        config: Pool configuration; the global configuration if None
        configure_logging: Also apply the logging section of the configuration

    Returns:
        The running WorkerPool
    """
    if config is None:
        config = get_config()

    if configure_logging:
        setup_logging_from_config(config)

    return WorkerPool(
        config.effective_num_workers,
        config.queue_size,
        thread_name_prefix=config.thread_name_prefix,
        daemon=config.daemon_threads,
    )


def create_example_config() -> str:
    """Create an example configuration file content.

    Returns:
        String containing an example TOML configuration with all options
        documented.
    """
    return """# jobpool Configuration File
#
# Configuration files are loaded from (in priority order):
#   1. .jobpool/config.toml or jobpool.toml (project directory)
#   2. ~/.config/jobpool/config.toml (user directory)
#
# Environment variables override any setting (highest priority).
# Nested settings use double underscores: JOBPOOL_<SECTION>__<KEY>

# Number of worker threads (default: number of logical CPUs)
# Environment variable: JOBPOOL_NUM_WORKERS
# num_workers = 4

# Capacity of the job queue. With 0, a worker must be idle for a
# submission to succeed.
# Environment variable: JOBPOOL_QUEUE_SIZE
queue_size = 0

# Prefix of worker and supervisor thread names
# Environment variable: JOBPOOL_THREAD_NAME_PREFIX
thread_name_prefix = "jobpool"

# Run pool threads as daemon threads
# Environment variable: JOBPOOL_DAEMON_THREADS
daemon_threads = true

[logging]
# Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL
# Environment variable: JOBPOOL_LOGGING__LOG_LEVEL
log_level = "INFO"

# Also log to the console
# Environment variable: JOBPOOL_LOGGING__CONSOLE_LOGGING
console_logging = false
"""


def write_example_config(location: str = "user") -> Path:
    """Write an example configuration file to a standard location.

    Args:
        location: Where to write the config file. One of:
            - "user": User config directory
            - "project": Project config directory (.jobpool/config.toml)

    Returns:
        Path to the created configuration file.

    Raises:
        ValueError: If location is invalid.
    """
    locations = get_config_file_locations()

    if location not in locations:
        raise ValueError(f"Invalid location '{location}'. Must be one of: user, project")

    config_path = locations[location]
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(create_example_config())

    logger.info(f"Created example configuration at: {config_path}")

    return config_path
