"""
memvfs - In-Memory Virtual Filesystem

A hierarchical filesystem kept entirely in memory, with POSIX-like
permission bits, ownership and timestamps, and file handles offering
positioned read, write and truncate.

Author: YSNRFD
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .filesystem import (
    Container,
    Directory,
    File,
    Node,
    NodeFactory,
    Metadata,
    FileType,
    Permission,
    StatResult,
    PathResolver,
    FileHandle,
    OpenMode,
    OpenFlags,
    Whence,
)
from .exceptions import (
    FileSystemException,
    NotFoundError,
    AlreadyExistsError,
    InvalidOperationError,
    DirectoryNotEmptyError,
)

__all__ = [
    'Container',
    'Directory',
    'File',
    'Node',
    'NodeFactory',
    'Metadata',
    'FileType',
    'Permission',
    'StatResult',
    'PathResolver',
    'FileHandle',
    'OpenMode',
    'OpenFlags',
    'Whence',
    'FileSystemException',
    'NotFoundError',
    'AlreadyExistsError',
    'InvalidOperationError',
    'DirectoryNotEmptyError',
]
