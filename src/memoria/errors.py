"""Defines the exceptions raised by memoria when working with the notes directory.

All of them derive from :class:`MemoriaError`. Filesystem failures are translated into these classes at the point
where they occur, using :func:`map_os_error` or the :func:`path_context` context manager.
"""

from contextlib import contextmanager
from typing import Iterator, Optional


class MemoriaError(Exception):
    """Base class for errors raised by the notes API.

    .. attribute:: message
       :type: str

    .. attribute:: path
       :type: Optional[str]

       The file or directory the error concerns, if any.

    .. attribute:: cause
       :type: Optional[BaseException]
    """
    def __init__(self, message: str, path: Optional[str] = None, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause


class DirectoryNotFoundError(MemoriaError):
    """Raised when the notes directory does not exist."""
    def __init__(self, path: str, cause: BaseException = None):
        super().__init__(f'Directory not found: {path}', path, cause)


class PermissionDeniedError(MemoriaError):
    def __init__(self, path: str, cause: BaseException = None):
        super().__init__(f'Permission denied: {path}', path, cause)


class FileMissingError(MemoriaError):
    """Raised when a note file (or other file memoria needs to read) does not exist."""
    def __init__(self, path: str, cause: BaseException = None):
        super().__init__(f'File not found: {path}', path, cause)


class InvalidFormatError(MemoriaError):
    """Raised when a path has the wrong type, or when a file's contents cannot be understood.

    For example, a markdown file without any heading line has no title, so it cannot be loaded as a note.
    """
    def __init__(self, message: str, path: Optional[str] = None, cause: BaseException = None):
        super().__init__(f'Invalid file format: {message}', path, cause)
        self.message = message


class EmptyNotesDirectoryError(MemoriaError):
    """Raised when listing a notes directory that contains no markdown files."""
    def __init__(self, path: str):
        super().__init__(f'Empty notes directory: {path}', path)


class NoteExistsError(MemoriaError):
    """Raised instead of overwriting an existing note."""
    def __init__(self, path: str, cause: BaseException = None):
        super().__init__(f'Note exists: {path}', path, cause)


class NoteNotFoundError(MemoriaError):
    def __init__(self, path: str):
        super().__init__(f'Note not found: {path}', path)


class FilesystemError(MemoriaError):
    """Raised for any I/O failure that does not fit one of the more specific classes."""
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f'IO error: {cause}', path, cause)


def map_os_error(error: OSError, path: str) -> MemoriaError:
    """Converts an OSError that occurred while accessing ``path`` to the matching :class:`MemoriaError`.

    A missing path is reported as :class:`FileMissingError` if it looks like a markdown file (ends in ``.md``),
    and as :class:`DirectoryNotFoundError` otherwise.
    """
    if isinstance(error, FileNotFoundError):
        if path.endswith('.md'):
            return FileMissingError(path, error)
        return DirectoryNotFoundError(path, error)
    if isinstance(error, PermissionError):
        return PermissionDeniedError(path, error)
    return FilesystemError(path, error)


@contextmanager
def path_context(path: str) -> Iterator[None]:
    """Re-raises any OSError from the enclosed block as a :class:`MemoriaError` about ``path``.

    .. code-block:: python

       with path_context(path):
           text = Path(path).read_text()
    """
    try:
        yield
    except OSError as e:
        raise map_os_error(e, path) from e
