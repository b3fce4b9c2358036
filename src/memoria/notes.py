"""Provides the :class:`NotesManager` class."""

from datetime import datetime, timezone
import logging
import os
import os.path
from typing import List, Optional

from mako.exceptions import MakoException
from mako.template import Template

from memoria.errors import DirectoryNotFoundError, EmptyNotesDirectoryError, FileMissingError,\
    InvalidFormatError, NoteExistsError, path_context
from memoria.filenames import is_markdown_file, sanitize_filename
from memoria.markdown import format_timestamp, new_note_content
from memoria.models import Note

logger = logging.getLogger(__name__)


class NotesManager:
    """Lists and creates notes in a single directory.

    The directory is not checked when the instance is created; each operation validates it as needed and raises
    a :exc:`memoria.errors.MemoriaError` subclass on failure. Nothing is cached between calls.

    Here's an example that creates a note and then prints the titles of all notes:

    .. code-block:: python

       from memoria.notes import NotesManager
       manager = NotesManager('/home/me/notes')
       manager.create_note('Shopping List')
       for note in manager.list_notes():
           print(note.title)
    """
    def __init__(self, notes_directory: str):
        self._notes_directory = os.fspath(notes_directory)

    @property
    def notes_directory(self) -> str:
        return self._notes_directory

    def validate_directory(self) -> None:
        """Raises :exc:`DirectoryNotFoundError` if the notes directory does not exist, or
        :exc:`InvalidFormatError` if it is not a directory."""
        if not os.path.exists(self._notes_directory):
            raise DirectoryNotFoundError(self._notes_directory)
        if not os.path.isdir(self._notes_directory):
            raise InvalidFormatError(f'Path is not a directory: {self._notes_directory}', self._notes_directory)

    def list_notes(self) -> List[Note]:
        """Returns a :class:`Note` for every markdown file directly inside the notes directory.

        Files are recognized by their ``.md`` or ``.markdown`` extension (case-insensitive). Subdirectories and
        other files are skipped. The notes are returned in the order the filesystem lists them, which is not
        necessarily sorted.

        If any markdown file cannot be loaded (for example, because it has no heading), the error is raised
        immediately rather than skipping that file.

        Raises :exc:`EmptyNotesDirectoryError` if there are no notes.
        """
        notes = []
        with path_context(self._notes_directory):
            with os.scandir(self._notes_directory) as entries:
                for entry in entries:
                    if entry.is_file() and is_markdown_file(entry.name):
                        notes.append(Note.from_path(entry.path))

        if not notes:
            raise EmptyNotesDirectoryError(self._notes_directory)
        logger.info('Found %d note(s) in %s', len(notes), self._notes_directory)
        return notes

    def create_note(self, title: str, template: Optional[str] = None) -> Note:
        """Creates a new note file with the given title and returns it.

        The filename is derived from the title using :func:`memoria.filenames.sanitize_filename`, plus ``.md``.
        The file starts with front matter holding a ``created_at`` timestamp, followed by a heading containing
        the title exactly as given, and a blank line.

        Titles are read back from that heading with surrounding whitespace stripped, so a title such as
        ``"  Draft "`` comes back from :meth:`Note.from_path` as ``"Draft"``. Its filename is
        ``__draft_.md``, because spaces are replaced before trimming.

        If ``template`` is given, it is the path to a Mako template whose output is appended after the blank
        line. Relative paths are resolved against the notes directory. The names ``title`` and ``created_at``
        are defined in the template's namespace.

        Raises :exc:`NoteExistsError` if a file with the same name already exists; existing files are never
        overwritten. Raises :exc:`FileMissingError` if the template does not exist.
        Raises :exc:`InvalidFormatError` if the template cannot be compiled or rendered; no file is created then.
        """
        self.validate_directory()

        path = os.path.join(self._notes_directory, f'{sanitize_filename(title)}.md')
        if os.path.exists(path):
            raise NoteExistsError(path)

        created = datetime.now(timezone.utc)
        body = self._render_template(template, title, created) if template else ''
        content = new_note_content(title, created, body)
        with path_context(path):
            try:
                with open(path, 'x', encoding='utf-8') as file:
                    file.write(content)
            except FileExistsError as e:
                raise NoteExistsError(path, e) from e
        logger.info('Created note %s', path)

        return Note.from_path(path)

    def _render_template(self, template: str, title: str, created: datetime) -> str:
        template_path = os.path.join(self._notes_directory, os.path.expanduser(template))
        if not os.path.isfile(template_path):
            raise FileMissingError(template_path)
        logger.debug('Rendering template %s', template_path)
        with path_context(template_path):
            try:
                compiled = Template(filename=os.path.abspath(template_path))
            except MakoException as e:
                raise InvalidFormatError(f'Cannot render template: {template_path}', template_path, e) from e
        try:
            return compiled.render(title=title, created_at=format_timestamp(created))
        except Exception as e:
            raise InvalidFormatError(f'Cannot render template: {template_path}', template_path, e) from e
