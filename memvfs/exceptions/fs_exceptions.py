"""
Filesystem Exceptions

Exceptions raised by the in-memory filesystem engine: path lookups,
node creation, tree mutations and file handle I/O.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class FileSystemException(Exception):
    """
    Base exception for all filesystem-related errors.

    Attributes:
        message: Human-readable error description
        path: File path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
        recoverable: Whether the caller can reasonably retry or recover
        context: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        recoverable: bool = False,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 4000
        self.recoverable = recoverable
        self.context = context or {}
        if path:
            self.context["path"] = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base} (path={self.path})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"path={self.path!r}, "
            f"error_code={self.error_code})"
        )


class NotFoundError(FileSystemException):
    """
    A path, or one of its required ancestors, does not exist.

    Also raised when an intermediate path segment resolves to a regular
    file, since a file cannot have children.

    Example:
        >>> raise NotFoundError("/dir/file", component="dir")
    """

    def __init__(
        self,
        path: str,
        component: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if component:
            ctx["component"] = component
        super().__init__(
            message=f"No such file or directory: {path}",
            path=path,
            error_code=4001,
            recoverable=True,
            context=ctx
        )
        self.component = component


class AlreadyExistsError(FileSystemException):
    """
    The creation target is already occupied by another node.

    Example:
        >>> raise AlreadyExistsError("/dir")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"File exists: {path}",
            path=path,
            error_code=4002,
            recoverable=True,
            context=context
        )


class InvalidOperationError(FileSystemException):
    """
    The operation is not valid for the target or the handle state.

    Examples are opening a directory for I/O, removing the root,
    using a closed handle or seeking to a negative offset.

    Example:
        >>> raise InvalidOperationError("Is a directory", path="/dir", operation="open")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(
            message=message,
            path=path,
            error_code=error_code or 4003,
            context=ctx
        )
        self.operation = operation


class DirectoryNotEmptyError(InvalidOperationError):
    """
    Directory is not empty.

    Raised when removing a directory that still has entries without
    asking for a recursive removal.
    """

    def __init__(
        self,
        path: str,
        entries: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if entries is not None:
            ctx["entries"] = entries
        super().__init__(
            message=f"Directory not empty: {path}",
            path=path,
            operation="remove",
            error_code=4004,
            context=ctx
        )
        self.entries = entries
