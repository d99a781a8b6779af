"""
Metadata Module

Permission bits, ownership and timestamps carried by every node.

The mode value combines a type tag (directory or regular file) with
nine owner/group/other rwx permission bits. The type tag is fixed when
the metadata is created; permission operations only ever replace the
lower nine bits.

Timestamp rules:
- chmod/chown/chgrp change ctime only
- reads change atime only
- writes and truncation change mtime and ctime
- touch changes all three

Author: YSNRFD
Version: 1.0.0
"""

import time
from dataclasses import dataclass
from enum import Enum, Flag
from typing import Any, Optional

from memvfs.exceptions import InvalidOperationError


PERMISSION_MASK = 0o777
TYPE_MASK = 0o170000


class FileType(Enum):
    """Node types and their mode type tags."""
    DIRECTORY = 0o040000
    REGULAR = 0o100000

    @property
    def tag(self) -> int:
        return self.value


class Permission(Flag):
    """File permission bits."""
    # Owner permissions
    OWNER_READ = 0o400
    OWNER_WRITE = 0o200
    OWNER_EXEC = 0o100

    # Group permissions
    GROUP_READ = 0o040
    GROUP_WRITE = 0o020
    GROUP_EXEC = 0o010

    # Other permissions
    OTHER_READ = 0o004
    OTHER_WRITE = 0o002
    OTHER_EXEC = 0o001

    # Common combinations
    OWNER_RW = OWNER_READ | OWNER_WRITE
    OWNER_RWX = OWNER_READ | OWNER_WRITE | OWNER_EXEC

    # Default permissions
    DEFAULT_FILE = OWNER_RW | GROUP_READ | OTHER_READ
    DEFAULT_DIR = OWNER_RWX | GROUP_READ | GROUP_EXEC | OTHER_READ | OTHER_EXEC


@dataclass
class Metadata:
    """
    Permission, ownership and timestamp record of a node.

    Only the operations below mutate it; path resolution and handle
    code call them instead of assigning fields.
    """

    file_type: FileType
    permissions: int = Permission.DEFAULT_FILE.value
    uid: int = 0
    gid: int = 0

    # Timestamps, all set to the creation time when omitted
    atime: Optional[float] = None  # Access time
    mtime: Optional[float] = None  # Modification time
    ctime: Optional[float] = None  # Change time

    def __post_init__(self):
        self.permissions &= PERMISSION_MASK
        now = time.time()
        if self.atime is None:
            self.atime = now
        if self.mtime is None:
            self.mtime = now
        if self.ctime is None:
            self.ctime = now

    @classmethod
    def for_directory(cls, permissions: int, uid: int = 0, gid: int = 0) -> 'Metadata':
        return cls(FileType.DIRECTORY, permissions, uid, gid)

    @classmethod
    def for_file(cls, permissions: int, uid: int = 0, gid: int = 0) -> 'Metadata':
        return cls(FileType.REGULAR, permissions, uid, gid)

    @property
    def mode(self) -> int:
        """Type tag combined with permission bits."""
        return self.file_type.tag | self.permissions

    @property
    def is_directory(self) -> bool:
        return self.file_type == FileType.DIRECTORY

    @property
    def is_regular_file(self) -> bool:
        return self.file_type == FileType.REGULAR

    # Metadata-only changes

    def chmod(self, permissions: int) -> None:
        """Replace the permission bits, keeping the type tag."""
        self.permissions = permissions & PERMISSION_MASK
        self.ctime = time.time()

    def chown(self, uid: int) -> None:
        """Change the owner id."""
        self.uid = uid
        self.ctime = time.time()

    def chgrp(self, gid: int) -> None:
        """Change the group id."""
        self.gid = gid
        self.ctime = time.time()

    def touch(self) -> None:
        """Set access, modification and change times to now."""
        now = time.time()
        self.atime = now
        self.mtime = now
        self.ctime = now

    # Content access bookkeeping

    def mark_accessed(self) -> None:
        self.atime = time.time()

    def mark_modified(self) -> None:
        now = time.time()
        self.mtime = now
        self.ctime = now

    def mark_changed(self) -> None:
        self.ctime = time.time()

    def set_times(
        self,
        atime: Optional[float] = None,
        mtime: Optional[float] = None,
        ctime: Optional[float] = None
    ) -> None:
        """
        Set timestamps explicitly.

        Args:
            atime: New access time, or None to keep it
            mtime: New modification time, or None to keep it
            ctime: New change time, or None to keep it

        Raises:
            InvalidOperationError: If any timestamp lies in the future
        """
        now = time.time()
        for name, value in (('atime', atime), ('mtime', mtime), ('ctime', ctime)):
            if value is not None and value > now:
                raise InvalidOperationError(
                    f"Timestamp in the future: {name}={value}",
                    operation="set_times"
                )

        if atime is not None:
            self.atime = atime
        if mtime is not None:
            self.mtime = mtime
        if ctime is not None:
            self.ctime = ctime

    # Permission checks

    def can_read(self, uid: int, gid: int) -> bool:
        """Check read permission."""
        return self._check(uid, gid, Permission.OWNER_READ)

    def can_write(self, uid: int, gid: int) -> bool:
        """Check write permission."""
        return self._check(uid, gid, Permission.OWNER_WRITE)

    def can_execute(self, uid: int, gid: int) -> bool:
        """Check execute permission."""
        return self._check(uid, gid, Permission.OWNER_EXEC)

    def _check(self, uid: int, gid: int, owner_bit: Permission) -> bool:
        # Root has all permissions
        if uid == 0:
            return True

        bit = owner_bit.value
        if uid == self.uid:
            return (self.permissions & bit) != 0
        if gid == self.gid:
            return (self.permissions & (bit >> 3)) != 0
        return (self.permissions & (bit >> 6)) != 0


@dataclass(frozen=True)
class StatResult:
    """Snapshot of a node's metadata, shaped like os.stat_result."""
    mode: int
    uid: int
    gid: int
    size: int
    atime: float
    mtime: float
    ctime: float
    ino: int = 0
    nlink: int = 1

    @property
    def permissions(self) -> int:
        return self.mode & PERMISSION_MASK

    @property
    def is_directory(self) -> bool:
        return self.mode & TYPE_MASK == FileType.DIRECTORY.tag

    @property
    def is_regular_file(self) -> bool:
        return self.mode & TYPE_MASK == FileType.REGULAR.tag

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for display."""
        return {
            'ino': self.ino,
            'type': 'DIRECTORY' if self.is_directory else 'REGULAR',
            'mode': oct(self.mode),
            'uid': self.uid,
            'gid': self.gid,
            'size': self.size,
            'nlink': self.nlink,
            'atime': time.strftime('%Y-%m-%d %H:%M', time.localtime(self.atime)),
            'mtime': time.strftime('%Y-%m-%d %H:%M', time.localtime(self.mtime)),
            'ctime': time.strftime('%Y-%m-%d %H:%M', time.localtime(self.ctime)),
        }
