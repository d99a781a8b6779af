"""
memvfs Filesystem Module

The in-memory filesystem engine:
- Directory tree owned by a Container
- Inode-numbered Directory and File nodes
- POSIX-like permissions, ownership and timestamps
- Cursor-based file handles
"""

from .metadata import Metadata, FileType, Permission, StatResult
from .node import Directory, File, Node, NodeFactory
from .path_resolver import PathResolver, ParsedPath
from .handle import FileHandle, OpenMode, OpenFlags, Whence
from .container import Container

__all__ = [
    # Metadata
    'Metadata',
    'FileType',
    'Permission',
    'StatResult',
    # Nodes
    'Directory',
    'File',
    'Node',
    'NodeFactory',
    # Path Resolver
    'PathResolver',
    'ParsedPath',
    # Handles
    'FileHandle',
    'OpenMode',
    'OpenFlags',
    'Whence',
    # Container
    'Container',
]
