"""
memvfs Exception Hierarchy

All filesystem errors inherit from FileSystemException and all
configuration errors from ConfigurationException.

Architecture:
    FileSystemException (Base)
    ├── NotFoundError
    ├── AlreadyExistsError
    └── InvalidOperationError
        └── DirectoryNotEmptyError
    ConfigurationException (Base)
    ├── ConfigLoadError
    └── ConfigValidationError
"""

from .fs_exceptions import (
    FileSystemException,
    NotFoundError,
    AlreadyExistsError,
    InvalidOperationError,
    DirectoryNotEmptyError,
)

from .config_exceptions import (
    ConfigurationException,
    ConfigLoadError,
    ConfigValidationError,
)

__all__ = [
    # Filesystem exceptions
    "FileSystemException",
    "NotFoundError",
    "AlreadyExistsError",
    "InvalidOperationError",
    "DirectoryNotEmptyError",
    # Configuration exceptions
    "ConfigurationException",
    "ConfigLoadError",
    "ConfigValidationError",
]
