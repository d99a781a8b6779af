"""
Configuration Exceptions

Exceptions raised while loading or validating memvfs configuration.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ConfigurationException(Exception):
    """
    Base exception for configuration errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error

    Example:
        >>> raise ConfigurationException("Bad configuration", error_code=5000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 5000
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base


class ConfigLoadError(ConfigurationException):
    """
    The configuration file could not be read or parsed.

    Example:
        >>> raise ConfigLoadError("Invalid JSON", config_path="memvfs.json")
    """

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if config_path:
            ctx["config_path"] = config_path
        super().__init__(message, error_code=5001, context=ctx)
        self.config_path = config_path


class ConfigValidationError(ConfigurationException):
    """
    A configuration value is out of range or of the wrong kind.

    Example:
        >>> raise ConfigValidationError("Mode out of range", key="filesystem.default_file_mode")
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        value: Any = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if key:
            ctx["key"] = key
            ctx["value"] = value
        super().__init__(message, error_code=5002, context=ctx)
        self.key = key
        self.value = value
