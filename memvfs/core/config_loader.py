"""
memvfs Configuration Loader

Configuration management for the filesystem engine:
- JSON configuration file loading
- Configuration validation
- Default value handling
- Runtime configuration updates through dot-notation keys

Author: YSNRFD
Version: 1.0.0
"""

import json
import os
import threading
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Optional

from memvfs.exceptions import ConfigLoadError, ConfigValidationError
from memvfs.logger import LogLevel, Logger, get_logger


@dataclass
class FilesystemConfig:
    """Defaults applied to newly created nodes."""
    default_file_mode: int = 0o644
    default_dir_mode: int = 0o755
    default_uid: Optional[int] = None  # None: owner of the current process
    default_gid: Optional[int] = None  # None: group of the current process

    def owner(self) -> int:
        """Effective default owner id."""
        if self.default_uid is not None:
            return self.default_uid
        return os.getuid() if hasattr(os, 'getuid') else 0

    def group(self) -> int:
        """Effective default group id."""
        if self.default_gid is not None:
            return self.default_gid
        return os.getgid() if hasattr(os, 'getgid') else 0


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: Optional[str] = None
    console_output: bool = True
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for memvfs.
    """
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('memvfs.json')
        >>> oct(config.filesystem.default_dir_mode)
        '0o755'
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigLoadError: If the file cannot be read or parsed
            ConfigValidationError: If a value is out of range
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {config_path}",
                config_path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigLoadError(
                f"Invalid JSON in configuration file: {e}",
                config_path=config_path
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Cannot read configuration file: {e}",
                config_path=config_path
            ) from e

        if not isinstance(data, dict):
            raise ConfigLoadError(
                "Configuration root must be a JSON object",
                config_path=config_path
            )

        config = self._parse_config(data)
        self.validate(config)

        self._config = config
        self._loaded = True
        get_logger('config').info("Configuration loaded", context={'path': config_path})
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        if 'filesystem' in data:
            fs_data = data['filesystem']
            config.filesystem = FilesystemConfig(
                default_file_mode=_parse_mode(
                    fs_data.get('default_file_mode', config.filesystem.default_file_mode)
                ),
                default_dir_mode=_parse_mode(
                    fs_data.get('default_dir_mode', config.filesystem.default_dir_mode)
                ),
                default_uid=fs_data.get('default_uid', config.filesystem.default_uid),
                default_gid=fs_data.get('default_gid', config.filesystem.default_gid),
            )

        if 'logging' in data:
            log_data = data['logging']
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
                use_colors=log_data.get('use_colors', config.logging.use_colors),
            )

        return config

    @staticmethod
    def validate(config: Config) -> None:
        """
        Validate a configuration.

        Raises:
            ConfigValidationError: On the first invalid value
        """
        fs = config.filesystem
        for key in ('default_file_mode', 'default_dir_mode'):
            value = getattr(fs, key)
            if not _is_int(value) or not 0 <= value <= 0o777:
                raise ConfigValidationError(
                    "Permission mode must be between 0 and 0o777",
                    key=f"filesystem.{key}",
                    value=value
                )

        for key in ('default_uid', 'default_gid'):
            value = getattr(fs, key)
            if value is not None and (not _is_int(value) or value < 0):
                raise ConfigValidationError(
                    "Owner and group ids must be non-negative integers",
                    key=f"filesystem.{key}",
                    value=value
                )

        try:
            LogLevel.from_name(str(config.logging.level))
        except ValueError:
            raise ConfigValidationError(
                "Unknown log level",
                key="logging.level",
                value=config.logging.level
            ) from None

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'filesystem.default_file_mode')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        obj: Any = self._config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'filesystem.default_dir_mode')
            value: Value to set

        Note:
            This modifies configuration at runtime but does not
            persist changes to disk.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if not _has_field(obj, part):
                raise ConfigValidationError(f"Invalid configuration key: {key}", key=key, value=value)
            obj = getattr(obj, part)

        final_key = parts[-1]
        if not _has_field(obj, final_key):
            raise ConfigValidationError(f"Invalid configuration key: {key}", key=key, value=value)

        previous = getattr(obj, final_key)
        if is_dataclass(previous):
            raise ConfigValidationError(
                f"Configuration key names a section: {key}",
                key=key,
                value=value
            )

        setattr(obj, final_key, value)
        try:
            self.validate(self._config)
        except Exception:
            setattr(obj, final_key, previous)
            raise

    def reset(self) -> None:
        """Restore the built-in defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        def dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, '__dataclass_fields__'):
                return {
                    k: dataclass_to_dict(v)
                    for k, v in obj.__dict__.items()
                }
            elif isinstance(obj, list):
                return [dataclass_to_dict(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: dataclass_to_dict(v) for k, v in obj.items()}
            else:
                return obj

        return dataclass_to_dict(self._config)


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid mode or id
    return isinstance(value, int) and not isinstance(value, bool)


def _has_field(obj: Any, name: str) -> bool:
    return is_dataclass(obj) and any(f.name == name for f in fields(obj))


def _parse_mode(value: Any) -> Any:
    # JSON has no octal literals, so "0755" / "0o755" strings are accepted too
    if isinstance(value, str):
        try:
            return int(value, 8)
        except ValueError:
            return value
    return value


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    return ConfigLoader().config


def configure_logging(logging_config: Optional[LoggingConfig] = None) -> None:
    """Initialize the memvfs loggers from a LoggingConfig."""
    settings = logging_config or get_config().logging
    Logger.initialize(
        level=LogLevel.from_name(settings.level),
        log_file=settings.log_file,
        use_colors=settings.use_colors,
        console=settings.console_output,
    )
