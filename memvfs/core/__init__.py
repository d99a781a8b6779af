"""
memvfs Core Module

Core support components:
- Configuration Loader
"""

from .config_loader import (
    ConfigLoader,
    Config,
    FilesystemConfig,
    LoggingConfig,
    get_config,
    configure_logging,
)

__all__ = [
    'ConfigLoader',
    'Config',
    'FilesystemConfig',
    'LoggingConfig',
    'get_config',
    'configure_logging',
]
