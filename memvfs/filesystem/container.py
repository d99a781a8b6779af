"""
Container Module

Owner of the in-memory directory tree.

The Container holds the root directory and the inode table of every
attached node, and is the only entry point that mutates the tree:
node creation, recursive directory creation, removal, moves and
metadata changes by path. File content is changed through FileHandle
objects obtained from :meth:`Container.open`.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Union

from memvfs.core.config_loader import FilesystemConfig, get_config
from memvfs.exceptions import (
    NotFoundError,
    AlreadyExistsError,
    InvalidOperationError,
    DirectoryNotEmptyError,
)
from memvfs.logger import get_logger
from .handle import FileHandle, OpenFlags, OpenMode
from .metadata import StatResult
from .node import Directory, File, Node, NodeFactory
from .path_resolver import PathResolver, PARENT, SEPARATOR


ROOT_INO = 1


class Container:
    """
    In-memory filesystem tree.

    Example:
        >>> fs = Container()
        >>> fs.create_dir('/dir')
        >>> fs.create_file('/dir/file', b'data')
        >>> with fs.open('/dir/file', 'a') as handle:
        ...     handle.write(b'suffix')
        >>> fs.node_at('/dir/file').data
        b'datasuffix'
    """

    def __init__(self, config: Optional[FilesystemConfig] = None):
        self._config = config or get_config().filesystem
        self._logger = get_logger('container')
        self._factory = NodeFactory(
            file_mode=self._config.default_file_mode,
            dir_mode=self._config.default_dir_mode,
            uid=self._config.owner(),
            gid=self._config.group(),
        )

        self._nodes: dict[int, Node] = {}
        self._next_ino = ROOT_INO

        self._root = self._factory.directory(SEPARATOR)
        self._register(self._root, parent=None)

    # Inode table

    def _register(self, node: Node, parent: Optional[Directory]) -> None:
        node.ino = self._next_ino
        node.parent_ino = parent.ino if parent is not None else None
        self._nodes[node.ino] = node
        self._next_ino += 1

    def _lookup(self, ino: int) -> Optional[Node]:
        return self._nodes.get(ino)

    def _attach(self, parent: Directory, node: Node) -> None:
        self._register(node, parent)
        parent.add_entry(node.name, node.ino)

    def _subtree(self, node: Node) -> list[Node]:
        """The node and all of its descendants."""
        found = [node]
        stack = [node]
        while stack:
            current = stack.pop()
            if isinstance(current, Directory):
                for _, ino in current.entries():
                    child = self._nodes[ino]
                    found.append(child)
                    stack.append(child)
        return found

    def _is_within(self, directory: Directory, ancestor: Node) -> bool:
        """Whether ``directory`` is ``ancestor`` or lies below it."""
        current: Optional[Node] = directory
        while current is not None:
            if current.ino == ancestor.ino:
                return True
            current = self._lookup(current.parent_ino) if current.parent_ino is not None else None
        return False

    # Lookups

    @property
    def root(self) -> Directory:
        return self._root

    @property
    def config(self) -> FilesystemConfig:
        return self._config

    def factory(self) -> NodeFactory:
        """Builder for detached nodes, see :meth:`add_node`."""
        return self._factory

    def has_node_at(self, path: str) -> bool:
        """Check if a path resolves to a node."""
        try:
            PathResolver.walk(path, self._root, self._lookup)
        except NotFoundError:
            return False
        return True

    def node_at(self, path: str) -> Node:
        """
        Resolve a path to its node.

        Raises:
            NotFoundError: If the path does not resolve
        """
        return PathResolver.walk(path, self._root, self._lookup)

    def is_dir(self, path: str) -> bool:
        return self.has_node_at(path) and self.node_at(path).is_directory

    def is_file(self, path: str) -> bool:
        return self.has_node_at(path) and self.node_at(path).is_file

    def parent_of(self, node: Node) -> Optional[Directory]:
        """The directory holding ``node`` (None for the root or detached nodes)."""
        if node.parent_ino is None:
            return None
        parent = self._lookup(node.parent_ino)
        return parent if isinstance(parent, Directory) else None

    def path_of(self, node: Node) -> str:
        """Absolute path of an attached node."""
        if not node.attached:
            raise InvalidOperationError("Node is not attached", operation="path_of")

        names = []
        current: Optional[Node] = node
        while current is not None and current.ino != ROOT_INO:
            names.append(current.name)
            current = self.parent_of(current)
        return SEPARATOR + SEPARATOR.join(reversed(names))

    def list_dir(self, path: str) -> list[str]:
        """
        List the entry names of a directory.

        Raises:
            NotFoundError: If the path does not exist
            InvalidOperationError: If the path is a regular file
        """
        node = self.node_at(path)
        if not isinstance(node, Directory):
            raise InvalidOperationError(
                "Not a directory",
                path=PathResolver.normalize(path),
                operation="list_dir"
            )
        return node.entry_names()

    def stat(self, path: str) -> StatResult:
        """Metadata snapshot of the node at ``path``."""
        node = self.node_at(path)
        meta = node.metadata

        if isinstance(node, Directory):
            size = 0
            subdirs = sum(1 for _, ino in node.entries() if self._nodes[ino].is_directory)
            nlink = 2 + subdirs
        else:
            size = node.size
            nlink = 1

        return StatResult(
            mode=meta.mode,
            uid=meta.uid,
            gid=meta.gid,
            size=size,
            atime=meta.atime,
            mtime=meta.mtime,
            ctime=meta.ctime,
            ino=node.ino,
            nlink=nlink,
        )

    # Creation

    def create_file(self, path: str, data: bytes = b'', mode: Optional[int] = None) -> File:
        """
        Create a regular file.

        Args:
            path: Path for the new file
            data: Initial content
            mode: Permission bits (default from configuration)

        Returns:
            The new file

        Raises:
            NotFoundError: If the parent directory does not exist
            AlreadyExistsError: If a node already occupies the path
        """
        resolved = PathResolver.normalize(path)

        if self.has_node_at(resolved):
            raise AlreadyExistsError(resolved)

        parent, name = PathResolver.resolve_parent(resolved, self._root, self._lookup)

        file = self._factory.file(name, data, mode)
        self._attach(parent, file)

        self._logger.debug(
            "Created file",
            context={'path': resolved, 'ino': file.ino, 'size': file.size}
        )
        return file

    def create_dir(self, path: str, recursive: bool = False, mode: Optional[int] = None) -> Directory:
        """
        Create a directory.

        Args:
            path: Path for the new directory
            recursive: Create missing ancestors (with default permissions)
            mode: Permission bits of the leaf (default from configuration)

        Returns:
            The new directory

        Raises:
            AlreadyExistsError: If the leaf already exists
            NotFoundError: If the parent is missing (non-recursive), or an
                ancestor segment is a regular file
        """
        resolved = PathResolver.normalize(path)

        if self.has_node_at(resolved):
            raise AlreadyExistsError(resolved)

        if not recursive:
            parent, name = PathResolver.resolve_parent(resolved, self._root, self._lookup)
            directory = self._factory.directory(name, mode)
            self._attach(parent, directory)
            self._logger.debug(
                "Created directory",
                context={'path': resolved, 'ino': directory.ino}
            )
            return directory

        components = PathResolver.components(resolved)
        if components[-1] == PARENT:
            raise InvalidOperationError(
                "Path does not name a directory entry",
                path=resolved,
                operation="create_dir"
            )

        current: Directory = self._root
        prefix = ''

        for index, name in enumerate(components):
            prefix = f"{prefix}{SEPARATOR}{name}"
            is_leaf = index == len(components) - 1

            if name == PARENT:
                current = self.parent_of(current) or self._root
                continue

            ino = current.get_entry(name)

            if ino is None:
                directory = self._factory.directory(name, mode if is_leaf else None)
                self._attach(current, directory)
                self._logger.debug(
                    "Created directory",
                    context={'path': prefix, 'ino': directory.ino}
                )
                current = directory
                continue

            child = self._nodes[ino]
            if not isinstance(child, Directory):
                raise NotFoundError(prefix, component=name)
            current = child

        return current

    def add_node(self, parent_path: str, node: Node) -> Node:
        """
        Attach a detached node (see :meth:`factory`) under a directory.

        Raises:
            NotFoundError: If the parent does not exist or is a file
            AlreadyExistsError: If the parent already has an entry with
                the node's name
            InvalidOperationError: If the node is already attached or its
                name is not a valid path segment
        """
        if node.attached:
            raise InvalidOperationError(
                "Node is already attached",
                path=node.name,
                operation="add_node"
            )
        if not node.name or SEPARATOR in node.name or node.name in ('.', PARENT):
            raise InvalidOperationError(
                f"Invalid node name: {node.name!r}",
                operation="add_node"
            )

        resolved_parent = PathResolver.normalize(parent_path)
        parent = self.node_at(resolved_parent)
        if not isinstance(parent, Directory):
            raise NotFoundError(resolved_parent, component=parent.name)

        target = PathResolver.join(resolved_parent, node.name)
        if parent.has_entry(node.name):
            raise AlreadyExistsError(target)

        self._attach(parent, node)
        self._logger.debug("Attached node", context={'path': target, 'ino': node.ino})
        return node

    # Removal and moves

    def remove(self, path: str, recursive: bool = False) -> None:
        """
        Remove a node.

        Args:
            path: Path to remove
            recursive: Allow removing a non-empty directory with its content

        Raises:
            NotFoundError: If the path does not exist
            DirectoryNotEmptyError: If the directory has entries and
                ``recursive`` is False
            InvalidOperationError: If the path is the root
        """
        resolved = PathResolver.normalize(path)
        node = self.node_at(resolved)
        if node is self._root:
            raise InvalidOperationError("Cannot remove the root directory", path=resolved, operation="remove")

        if isinstance(node, Directory) and node.entry_count and not recursive:
            raise DirectoryNotEmptyError(resolved, entries=node.entry_count)

        parent = self.parent_of(node)
        parent.remove_entry(node.name)

        removed = self._subtree(node)
        for item in removed:
            del self._nodes[item.ino]
            item.ino = None
            item.parent_ino = None

        self._logger.debug("Removed node", context={'path': resolved, 'nodes': len(removed)})

    def move(self, source: str, destination: str) -> Node:
        """
        Move (rename) a node.

        Returns:
            The moved node

        Raises:
            NotFoundError: If the source or the destination's parent is missing
            AlreadyExistsError: If the destination is occupied
            InvalidOperationError: If the root is involved or a directory
                would be moved into its own subtree
        """
        src = PathResolver.normalize(source)
        dst = PathResolver.normalize(destination)

        node = self.node_at(src)
        if node is self._root:
            raise InvalidOperationError("Cannot move the root directory", path=src, operation="move")

        new_parent, new_name = PathResolver.resolve_parent(dst, self._root, self._lookup)

        if new_parent.has_entry(new_name):
            raise AlreadyExistsError(dst)

        if isinstance(node, Directory) and self._is_within(new_parent, node):
            raise InvalidOperationError(
                "Cannot move a directory into itself",
                path=src,
                operation="move",
                context={'destination': dst}
            )

        old_parent = self.parent_of(node)
        old_parent.remove_entry(node.name)

        node.name = new_name
        node.parent_ino = new_parent.ino
        new_parent.add_entry(new_name, node.ino)
        node.metadata.mark_changed()

        self._logger.debug("Moved node", context={'from': src, 'to': dst, 'ino': node.ino})
        return node

    # Metadata

    def chmod(self, path: str, permissions: int) -> None:
        """Change permission bits; the type tag is preserved."""
        node = self.node_at(path)
        node.metadata.chmod(permissions)
        self._logger.debug("chmod", context={'path': path, 'mode': oct(node.mode)})

    def chown(self, path: str, uid: int) -> None:
        """Change the owner id."""
        self.node_at(path).metadata.chown(uid)
        self._logger.debug("chown", context={'path': path, 'uid': uid})

    def chgrp(self, path: str, gid: int) -> None:
        """Change the group id."""
        self.node_at(path).metadata.chgrp(gid)
        self._logger.debug("chgrp", context={'path': path, 'gid': gid})

    def touch(self, path: str) -> Node:
        """
        Create an empty file at ``path`` or refresh its timestamps.

        Raises:
            NotFoundError: If the path is missing and so is its parent
        """
        if not self.has_node_at(path):
            return self.create_file(path)

        node = self.node_at(path)
        node.metadata.touch()
        return node

    # Handles

    def open(self, path: str, mode: Union[str, OpenFlags] = 'r') -> FileHandle:
        """
        Open a file for I/O.

        Args:
            path: Path to open
            mode: Mode string ('r', 'r+', 'w', 'w+', 'a', 'a+'; 'b' ignored)
                or OpenFlags

        Returns:
            An open FileHandle

        Raises:
            NotFoundError: If the file is missing and the mode does not
                create it, or its parent directory is missing
            InvalidOperationError: If the path is a directory or the mode
                string is invalid
        """
        flags = mode if isinstance(mode, OpenFlags) else OpenFlags.parse(mode)
        resolved = PathResolver.normalize(path)

        if not self.has_node_at(resolved):
            if not flags.create:
                raise NotFoundError(resolved)
            self.create_file(resolved)

        return self._open_node(self.node_at(resolved), flags, resolved)

    def open_handle(self, node: Node, mode: Union[str, OpenMode, OpenFlags] = 'r') -> FileHandle:
        """
        Open an existing node for I/O.

        A mode string or OpenFlags applies its truncate and append
        semantics; a bare OpenMode opens the handle at position 0.

        Raises:
            InvalidOperationError: If the node is a directory
        """
        if isinstance(mode, OpenMode):
            flags = OpenFlags(mode=mode)
        elif isinstance(mode, OpenFlags):
            flags = mode
        else:
            flags = OpenFlags.parse(mode)

        path = self.path_of(node) if node.attached else node.name
        return self._open_node(node, flags, path)

    def _open_node(self, node: Node, flags: OpenFlags, path: str) -> FileHandle:
        if not isinstance(node, File):
            raise InvalidOperationError("Is a directory", path=path, operation="open")

        if flags.truncate:
            node.resize(0)
            node.metadata.mark_modified()

        handle = FileHandle(node, flags.mode, append=flags.append, path=path)
        self._logger.debug(
            "Opened handle",
            context={'path': path, 'mode': flags.mode.name, 'append': flags.append}
        )
        return handle
