"""Defines :class:`Note`, the representation of a single markdown file in the notes directory."""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os
import os.path

import yaml

from memoria.errors import FileMissingError, InvalidFormatError, path_context
from memoria.markdown import extract_meta, extract_title

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    with path_context(path):
        with open(path, 'r', encoding='utf-8') as file:
            try:
                return file.read()
            except UnicodeDecodeError as e:
                raise InvalidFormatError(f'File is not valid UTF-8: {path}', path, e) from e


@dataclass(frozen=True)
class Note:
    """A markdown file along with its title.

    Instances should normally be obtained from :meth:`from_path`, or from the methods of
    :class:`memoria.notes.NotesManager`, which guarantee that the file exists and has a title.
    """

    path: str
    """Path of the markdown file. It is absolute or relative depending on how the notes directory was given."""

    title: str
    """Text of the first heading line in the file."""

    @classmethod
    def from_path(cls, path: str) -> Note:
        """Loads the note stored at the given path.

        The title is the first line in the file beginning with one or more ``#`` characters (after any
        indentation), with the ``#`` characters and surrounding whitespace removed.

        Raises :exc:`memoria.errors.FileMissingError` if nothing exists at the path, and
        :exc:`memoria.errors.InvalidFormatError` if the path is not a regular file or the file has no heading.
        Other read failures are raised as the matching :exc:`memoria.errors.MemoriaError` subclass.
        """
        path = os.fspath(path)
        if not os.path.exists(path):
            raise FileMissingError(path)
        if not os.path.isfile(path):
            raise InvalidFormatError(f'Path is not a file: {path}', path)

        title = extract_title(_read_text(path))
        if title is None:
            raise InvalidFormatError(f'Cannot extract title from content: {path}', path)
        logger.debug('Loaded note %r from %s', title, path)
        return cls(path, title)

    def path_str(self) -> str:
        """Returns the path as printable text.

        Bytes in the path that are not valid UTF-8 are replaced with U+FFFD.
        """
        return os.fsencode(self.path).decode('utf-8', errors='replace')

    def read_content(self) -> str:
        """Returns the full text of the file.

        Raises a :exc:`memoria.errors.MemoriaError` subclass if the file cannot be read.
        """
        return _read_text(self.path)

    def metadata(self) -> dict:
        """Returns the YAML front matter of the file as a dict, or an empty dict if there is none.

        For notes created by memoria this contains ``created_at``, which PyYAML parses as a
        :class:`datetime.datetime`.

        Raises :exc:`memoria.errors.InvalidFormatError` if the front matter is not a valid YAML mapping.
        """
        try:
            return extract_meta(self.read_content())
        except (yaml.YAMLError, ValueError) as e:
            raise InvalidFormatError(f'Cannot parse front matter: {self.path}', self.path, e) from e
