"""
File Handle Module

Cursor-based I/O on a single file.

A FileHandle is created open, bound to one File and one OpenMode for
its whole life, and becomes unusable once closed. Mode violations are
not errors: reading through a write-only handle yields no data and
writing through a read-only handle writes nothing.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from memvfs.exceptions import InvalidOperationError
from memvfs.logger import get_logger
from .node import File


class OpenMode(Enum):
    """Access granted by a handle."""
    READ_ONLY = 'r'
    WRITE_ONLY = 'w'
    READ_WRITE = 'r+'

    @property
    def readable(self) -> bool:
        return self in (OpenMode.READ_ONLY, OpenMode.READ_WRITE)

    @property
    def writable(self) -> bool:
        return self in (OpenMode.WRITE_ONLY, OpenMode.READ_WRITE)


class Whence(IntEnum):
    """Reference point for seek (same values as os.SEEK_*)."""
    SET = 0
    CUR = 1
    END = 2


@dataclass(frozen=True)
class OpenFlags:
    """
    Decoded open-mode string.

    ========  ===========  ======  ========  ======
    string    mode         create  truncate  append
    ========  ===========  ======  ========  ======
    r         READ_ONLY    no      no        no
    r+        READ_WRITE   no      no        no
    w         WRITE_ONLY   yes     yes       no
    w+        READ_WRITE   yes     yes       no
    a         WRITE_ONLY   yes     no        yes
    a+        READ_WRITE   yes     no        yes
    ========  ===========  ======  ========  ======
    """
    mode: OpenMode
    create: bool = False
    truncate: bool = False
    append: bool = False

    @classmethod
    def parse(cls, mode: str) -> 'OpenFlags':
        """
        Parse a conventional mode string such as 'r', 'wb' or 'a+'.

        Raises:
            InvalidOperationError: If the string is not a valid mode
        """
        chars = mode.replace('b', '').replace('t', '')
        primary = [c for c in chars if c in 'rwa']

        if len(primary) != 1 or any(c not in 'rwa+' for c in chars) or chars.count('+') > 1:
            raise InvalidOperationError(f"Invalid open mode: {mode!r}", operation="open")

        kind = primary[0]
        extended = '+' in chars

        if extended:
            access = OpenMode.READ_WRITE
        elif kind == 'r':
            access = OpenMode.READ_ONLY
        else:
            access = OpenMode.WRITE_ONLY

        return cls(
            mode=access,
            create=kind != 'r',
            truncate=kind == 'w',
            append=kind == 'a',
        )


class FileHandle:
    """
    An open cursor on a File.

    The handle does not own the file; closing it only drops the
    reference. All changes are applied to the file immediately, so
    there is nothing to flush.

    Example:
        >>> handle = FileHandle(file, OpenMode.READ_WRITE)
        >>> handle.write(b'data')
        4
        >>> handle.seek(0)
        0
        >>> handle.read(4)
        b'data'
    """

    def __init__(self, file: File, mode: OpenMode, append: bool = False, path: Optional[str] = None):
        if not isinstance(file, File):
            raise InvalidOperationError(
                "Only regular files can be opened for I/O",
                path=path,
                operation="open"
            )
        self._file: Optional[File] = file
        self._mode = mode
        self._append = append
        self._position = file.size if append else 0
        self.path = path
        self._logger = get_logger('handle')

    def __repr__(self) -> str:
        state = 'closed' if self.closed else f'position={self._position}'
        return f"FileHandle(path={self.path!r}, mode={self._mode.name}, {state})"

    def __enter__(self) -> 'FileHandle':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # State

    @property
    def mode(self) -> OpenMode:
        return self._mode

    @property
    def append(self) -> bool:
        return self._append

    @property
    def closed(self) -> bool:
        return self._file is None

    @property
    def readable(self) -> bool:
        return self._mode.readable

    @property
    def writable(self) -> bool:
        return self._mode.writable

    @property
    def file(self) -> File:
        return self._require_open('file')

    def _require_open(self, operation: str) -> File:
        if self._file is None:
            raise InvalidOperationError(
                "I/O operation on closed handle",
                path=self.path,
                operation=operation
            )
        return self._file

    # I/O

    def read(self, size: int = -1) -> bytes:
        """
        Read up to ``size`` bytes from the current position.

        Args:
            size: Maximum number of bytes (-1 for everything left)

        Returns:
            The bytes read; empty on a write-only handle or at end of data
        """
        file = self._require_open('read')
        if not self.readable:
            return b''

        data = file.read_at(self._position, size)
        self._position += len(data)
        file.metadata.mark_accessed()
        return data

    def write(self, data: bytes, limit: Optional[int] = None) -> int:
        """
        Write ``data`` at the current position.

        In append mode the write always lands at the current end of
        data, whatever the cursor was moved to.

        Args:
            data: Bytes to write
            limit: Write at most this many bytes of ``data``

        Returns:
            Number of bytes written (0 on a read-only handle or for no data)
        """
        file = self._require_open('write')
        if not self.writable:
            return 0

        if limit is not None:
            data = data[:max(limit, 0)]
        if not data:
            return 0

        if self._append:
            self._position = file.size

        written = file.write_at(self._position, bytes(data))
        self._position += written
        file.metadata.mark_modified()
        return written

    def seek(self, offset: int, whence: int = Whence.SET) -> int:
        """
        Move the cursor.

        Seeking past the end of data is allowed.

        Returns:
            The new position

        Raises:
            InvalidOperationError: If the position would become negative
                or ``whence`` is unknown
        """
        file = self._require_open('seek')

        if whence == Whence.SET:
            position = offset
        elif whence == Whence.CUR:
            position = self._position + offset
        elif whence == Whence.END:
            position = file.size + offset
        else:
            raise InvalidOperationError(f"Invalid whence: {whence}", path=self.path, operation="seek")

        if position < 0:
            raise InvalidOperationError(
                f"Negative seek position: {position}",
                path=self.path,
                operation="seek"
            )

        self._position = position
        return position

    def tell(self) -> int:
        self._require_open('tell')
        return self._position

    def truncate(self, size: int) -> bool:
        """
        Resize the file to ``size`` bytes, cutting or zero-padding.

        The cursor does not move.

        Returns:
            False (and nothing changes) on a read-only handle
        """
        file = self._require_open('truncate')
        if size < 0:
            raise InvalidOperationError(
                f"Negative size: {size}",
                path=self.path,
                operation="truncate"
            )
        if not self.writable:
            return False

        file.resize(size)
        file.metadata.mark_modified()
        return True

    def eof(self) -> bool:
        file = self._require_open('eof')
        return self._position >= file.size

    def close(self) -> None:
        """Release the file. Closing twice is harmless."""
        if self._file is None:
            return
        self._file = None
        self._logger.debug("Closed handle", context={'path': self.path})
