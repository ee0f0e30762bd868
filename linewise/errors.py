"""Exception hierarchy for generated writers."""

from __future__ import annotations

from pathlib import Path


class LinewiseError(Exception):
    """Base class for every error raised by linewise."""


class InvalidArgumentError(LinewiseError, ValueError):
    """Raised for a missing filename, unknown options or an unparseable binmode."""


class PathConflictError(LinewiseError):
    """Raised when the target path exists but is not a regular file."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"'{self.path}' is not a plain file")


class WriteError(LinewiseError):
    """Wraps a platform I/O failure with the target and the failing operation."""

    def __init__(self, target: str, operation: str, cause: BaseException) -> None:
        self.target = target
        self.operation = operation
        if target == "<string>":
            msg = f"couldn't {operation} string buffer for output: {cause}"
        else:
            msg = f"couldn't {operation} file '{target}': {cause}"
        super().__init__(msg)
        self.__cause__ = cause


class MissingHandleWriterError(LinewiseError, AttributeError):
    """Raised when the invocant has no callable handle-writing method."""

    def __init__(self, invocant: object, method: str) -> None:
        self.method = method
        owner = invocant.__name__ if isinstance(invocant, type) else type(invocant).__name__
        super().__init__(f"{owner} does not implement {method}(data, handle, ...)")
