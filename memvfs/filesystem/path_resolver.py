"""
Path Resolver Module

Path parsing and tree lookup for the in-memory filesystem.

Paths are absolute and ``/``-separated. A missing leading separator is
tolerated and an empty path means the root. Lookups walk the tree one
segment at a time; there is no partial matching and no wildcard
expansion.

Parsing only drops empty and ``.`` segments. A ``..`` segment is kept
and resolved during the walk through the parent of the directory
reached so far, so every segment before it must exist and be a
directory.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from memvfs.exceptions import NotFoundError, InvalidOperationError
from .node import Directory, Node


SEPARATOR = '/'
PARENT = '..'

# Maps an inode number to its node
NodeLookup = Callable[[int], Optional[Node]]


@dataclass
class ParsedPath:
    """A parsed path with its components."""
    components: List[str]

    def __str__(self) -> str:
        return SEPARATOR + SEPARATOR.join(self.components)

    @property
    def is_root(self) -> bool:
        """True for '/' and the empty path (no segments at all)."""
        return not self.components


class PathResolver:
    """
    Resolves filesystem paths against a directory tree.

    Handles:
    - Path normalization (empty segments and .)
    - Parent/basename splitting
    - Segment-by-segment lookup from the root, .. included
    """

    @staticmethod
    def parse(path: str) -> ParsedPath:
        """
        Parse a path into components.

        Empty and ``.`` segments are dropped; ``..`` is kept for the walk.

        Args:
            path: Path string to parse

        Returns:
            ParsedPath with components
        """
        result = [
            component for component in path.split(SEPARATOR)
            if component and component != '.'
        ]
        return ParsedPath(components=result)

    @staticmethod
    def components(path: str) -> List[str]:
        """Ordered path segments; empty for the root."""
        return PathResolver.parse(path).components

    @staticmethod
    def normalize(path: str) -> str:
        """
        Normalize a path to its absolute form.

        Example:
            >>> PathResolver.normalize('home//user/../tmp/.')
            '/home/user/../tmp'
        """
        return str(PathResolver.parse(path))

    @staticmethod
    def join(*paths: str) -> str:
        """
        Join multiple path components.

        A component starting with ``/`` restarts the path.
        """
        if not paths:
            return SEPARATOR

        result = paths[0]

        for path in paths[1:]:
            if path.startswith(SEPARATOR):
                result = path
            else:
                result = result.rstrip(SEPARATOR) + SEPARATOR + path

        return PathResolver.normalize(result)

    @staticmethod
    def dirname(path: str) -> str:
        """Get the parent directory of a path ('/' for the root)."""
        components = PathResolver.components(path)
        return SEPARATOR + SEPARATOR.join(components[:-1])

    @staticmethod
    def basename(path: str) -> str:
        """Get the last segment of a path ('' for the root)."""
        components = PathResolver.components(path)
        return components[-1] if components else ''

    @staticmethod
    def split(path: str) -> Tuple[str, str]:
        """
        Split a path into directory and base name.

        Returns:
            Tuple of (dirname, basename)
        """
        return (PathResolver.dirname(path), PathResolver.basename(path))

    @staticmethod
    def walk(path: str, root: Directory, lookup: NodeLookup) -> Node:
        """
        Resolve a path to its node.

        ``..`` moves to the parent of the directory reached so far and
        stays put at the root.

        Args:
            path: Absolute path
            root: Root directory of the tree
            lookup: Inode number to node mapping

        Returns:
            The resolved node

        Raises:
            NotFoundError: If a segment is missing, or a non-final
                segment (``..`` included) follows a regular file
        """
        normalized = PathResolver.normalize(path)
        current: Node = root

        for component in PathResolver.components(normalized):
            if not isinstance(current, Directory):
                raise NotFoundError(normalized, component=current.name)

            if component == PARENT:
                if current.parent_ino is not None:
                    parent = lookup(current.parent_ino)
                    if parent is None:
                        raise NotFoundError(normalized, component=component)
                    current = parent
                continue

            ino = current.get_entry(component)
            child = lookup(ino) if ino is not None else None
            if child is None:
                raise NotFoundError(normalized, component=component)

            current = child

        return current

    @staticmethod
    def resolve_parent(path: str, root: Directory, lookup: NodeLookup) -> Tuple[Directory, str]:
        """
        Resolve the parent directory of a path.

        Returns:
            Tuple of (parent directory, basename)

        Raises:
            NotFoundError: If the parent is missing or is not a directory
            InvalidOperationError: If the path is the root or ends in ``..``
        """
        parsed = PathResolver.parse(path)
        if parsed.is_root:
            raise InvalidOperationError("The root has no parent", path=SEPARATOR)

        normalized = str(parsed)
        parent_path, name = PathResolver.split(normalized)

        parent = PathResolver.walk(parent_path, root, lookup)
        if not isinstance(parent, Directory):
            raise NotFoundError(normalized, component=parent.name)

        if name == PARENT:
            raise InvalidOperationError(
                "Path does not name a directory entry",
                path=normalized
            )

        return parent, name
