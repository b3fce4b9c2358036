from datetime import datetime, timezone
from pathlib import Path
import pytest
from memoria.errors import FileMissingError, InvalidFormatError
from memoria.models import Note


def test_from_path(fs):
    fs.create_file('/notes/one.md', contents='---\ncreated_at: 2024-01-15T10:30:00.123Z\n---\n# My Title\n\nBody')
    note = Note.from_path('/notes/one.md')
    assert note == Note('/notes/one.md', 'My Title')


def test_from_path_accepts_path_objects(fs):
    fs.create_file('/notes/one.md', contents='# One')
    assert Note.from_path(Path('/notes/one.md')) == Note('/notes/one.md', 'One')


def test_from_path_uses_first_heading(fs):
    fs.create_file('/notes/one.md', contents='Some intro text.\n  ## Nested Heading ##\n# Later Heading\n')
    assert Note.from_path('/notes/one.md').title == 'Nested Heading ##'


def test_from_path_nonexistent(fs):
    with pytest.raises(FileMissingError) as excinfo:
        Note.from_path('/notes/missing.md')
    assert excinfo.value.path == '/notes/missing.md'


def test_from_path_directory(fs):
    fs.create_dir('/notes/dir.md')
    with pytest.raises(InvalidFormatError, match='Path is not a file'):
        Note.from_path('/notes/dir.md')


def test_from_path_no_heading(fs):
    fs.create_file('/notes/one.md', contents='Just some text without a heading.')
    with pytest.raises(InvalidFormatError, match='Cannot extract title from content'):
        Note.from_path('/notes/one.md')


def test_from_path_not_utf8(fs):
    fs.create_file('/notes/one.md', contents=b'# Caf\xe9\n')
    with pytest.raises(InvalidFormatError, match='not valid UTF-8'):
        Note.from_path('/notes/one.md')


def test_read_content(fs):
    fs.create_file('/notes/one.md', contents='# One\n\nHello.\n')
    note = Note.from_path('/notes/one.md')
    assert note.read_content() == '# One\n\nHello.\n'
    Path('/notes/one.md').unlink()
    with pytest.raises(FileMissingError):
        note.read_content()


def test_path_str():
    assert Note('/notes/one.md', 'One').path_str() == '/notes/one.md'
    assert Note('/notes/\udcff.md', 'Odd').path_str() == '/notes/\ufffd.md'


def test_metadata(fs):
    fs.create_file('/notes/one.md', contents='---\ncreated_at: 2024-01-15T10:30:00.123Z\n---\n# One\n')
    fs.create_file('/notes/two.md', contents='# Two\n')
    fs.create_file('/notes/three.md', contents='---\ncreated_at: [oops\n---\n# Three\n')
    assert Note.from_path('/notes/one.md').metadata() == {
        'created_at': datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)}
    assert Note.from_path('/notes/two.md').metadata() == {}
    with pytest.raises(InvalidFormatError, match='Cannot parse front matter'):
        Note.from_path('/notes/three.md').metadata()
