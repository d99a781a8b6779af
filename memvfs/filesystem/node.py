"""
Node Module

The two kinds of tree element: Directory and File.

Nodes are identified by an inode number (``ino``) assigned by the
Container that owns them. A directory maps child names to child inode
numbers and a node records its parent's inode number, so parent links
never hold object references. Nodes built by the NodeFactory have no
inode number until they are attached to a Container.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Iterator, Optional, Union

from .metadata import Metadata, FileType, Permission


class _BaseNode:
    """State shared by directories and files."""

    __slots__ = ('name', 'metadata', 'ino', 'parent_ino')

    def __init__(self, name: str, metadata: Metadata):
        self.name = name
        self.metadata = metadata
        self.ino: Optional[int] = None
        self.parent_ino: Optional[int] = None

    @property
    def mode(self) -> int:
        return self.metadata.mode

    @property
    def is_directory(self) -> bool:
        return self.metadata.is_directory

    @property
    def is_file(self) -> bool:
        return self.metadata.is_regular_file

    @property
    def attached(self) -> bool:
        return self.ino is not None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, ino={self.ino}, "
            f"mode={oct(self.mode)})"
        )


class Directory(_BaseNode):
    """A directory: a name -> inode number mapping of its children."""

    __slots__ = ('_entries',)

    def __init__(self, name: str, metadata: Optional[Metadata] = None):
        metadata = metadata or Metadata.for_directory(Permission.DEFAULT_DIR.value)
        if metadata.file_type != FileType.DIRECTORY:
            raise ValueError("Directory metadata must carry the directory type")
        super().__init__(name, metadata)
        self._entries: dict[str, int] = {}

    def add_entry(self, name: str, ino: int) -> None:
        """Add a directory entry."""
        self._entries[name] = ino
        self.metadata.mark_modified()

    def remove_entry(self, name: str) -> Optional[int]:
        """Remove a directory entry."""
        ino = self._entries.pop(name, None)
        if ino is not None:
            self.metadata.mark_modified()
        return ino

    def get_entry(self, name: str) -> Optional[int]:
        """Get the inode number for a directory entry."""
        return self._entries.get(name)

    def has_entry(self, name: str) -> bool:
        return name in self._entries

    def entry_names(self) -> list[str]:
        return list(self._entries)

    def entries(self) -> Iterator[tuple[str, int]]:
        return iter(list(self._entries.items()))

    @property
    def entry_count(self) -> int:
        return len(self._entries)


class File(_BaseNode):
    """A regular file holding a mutable byte buffer."""

    __slots__ = ('_data',)

    def __init__(self, name: str, data: bytes = b'', metadata: Optional[Metadata] = None):
        metadata = metadata or Metadata.for_file(Permission.DEFAULT_FILE.value)
        if metadata.file_type != FileType.REGULAR:
            raise ValueError("File metadata must carry the regular file type")
        super().__init__(name, metadata)
        self._data = bytearray(data)

    @property
    def data(self) -> bytes:
        """Copy of the file content."""
        return bytes(self._data)

    @property
    def size(self) -> int:
        return len(self._data)

    def set_data(self, data: bytes) -> None:
        """Replace the whole content."""
        self._data = bytearray(data)
        self.metadata.mark_modified()

    def read_at(self, offset: int, size: int = -1) -> bytes:
        """
        Read bytes starting at ``offset``.

        Args:
            offset: Byte offset to start reading
            size: Number of bytes to read (-1 for all)

        Returns:
            The bytes read; empty at or past the end of data
        """
        if offset >= len(self._data):
            return b''
        if size < 0:
            return bytes(self._data[offset:])
        return bytes(self._data[offset:offset + size])

    def write_at(self, offset: int, data: bytes) -> int:
        """
        Write bytes at ``offset``, overwriting or extending the buffer.

        A gap between the end of data and ``offset`` is filled with
        zero bytes.

        Returns:
            Number of bytes written
        """
        if offset > len(self._data):
            self._data.extend(bytes(offset - len(self._data)))
        self._data[offset:offset + len(data)] = data
        return len(data)

    def resize(self, size: int) -> None:
        """Cut or zero-pad the buffer to ``size`` bytes."""
        if size < len(self._data):
            del self._data[size:]
        else:
            self._data.extend(bytes(size - len(self._data)))


Node = Union[Directory, File]


class NodeFactory:
    """
    Builds detached nodes with default permissions and ownership.

    The nodes have no inode number and no parent until they are passed
    to :meth:`Container.add_node`.
    """

    def __init__(self, file_mode: int, dir_mode: int, uid: int, gid: int):
        self.file_mode = file_mode
        self.dir_mode = dir_mode
        self.uid = uid
        self.gid = gid

    def directory(self, name: str, mode: Optional[int] = None) -> Directory:
        permissions = self.dir_mode if mode is None else mode
        return Directory(name, Metadata.for_directory(permissions, self.uid, self.gid))

    def file(self, name: str, data: bytes = b'', mode: Optional[int] = None) -> File:
        permissions = self.file_mode if mode is None else mode
        return File(name, data, Metadata.for_file(permissions, self.uid, self.gid))
