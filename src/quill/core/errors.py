"""
Errors raised when a document cannot be loaded or saved.
"""

from typing import Optional


class DocumentError(IOError):
    """Base class for load and save failures."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(DocumentError):
    """The file does not exist."""


class PermissionDeniedError(DocumentError):
    """The file exists but may not be read or written."""


class OtherIOError(DocumentError):
    """Any other I/O failure, including undecodable content."""


def from_os_error(exc: BaseException, path: str, action: str) -> DocumentError:
    """
    Map an exception raised by file I/O to a document error.

    Args:
        exc: The original exception
        path: The file that was being accessed
        action: Verb for the message, e.g. 'open' or 'save'

    Returns:
        The matching DocumentError subclass instance
    """

    message = f"Failed to {action} file {path}: {exc}"

    if isinstance(exc, FileNotFoundError):
        return NotFoundError(message, path)

    if isinstance(exc, PermissionError):
        return PermissionDeniedError(message, path)

    return OtherIOError(message, path)
