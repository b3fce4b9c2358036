"""Defines the user's settings, :class:`MemoriaConf`, and how they are stored.

Settings live in a TOML file at :func:`default_config_path`. Here's an example with every key set:

.. code-block:: toml

   [general]
   timezone = "Europe/Paris"
   language = "fr"

   [editor]
   default_editor = "code"
   editor_args = ["--wait"]

   [notes]
   notes_directory = "/home/me/notes"
   default_extension = "md"
   default_template = "templates/daily.md.mako"

   [filesystem]
   max_file_size = 10485760
   create_backups = true
   backup_directory = ".backups"

Any key or section that is missing takes its default value.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field, fields
import logging
import os
import os.path
import shlex
import sys
from typing import List, Optional

import toml

from memoria.notes import NotesManager

logger = logging.getLogger(__name__)

APP_NAME = 'memoria'
CONFIG_FILENAME = 'config.toml'


class ConfigError(Exception):
    """Raised when the config file cannot be read, parsed or written, or a key or value is invalid."""
    pass


def user_config_dir() -> str:
    """Returns the platform's directory for per-user configuration files.

    This is ``%APPDATA%`` on Windows, ``~/Library/Application Support`` on macOS, and ``$XDG_CONFIG_HOME``
    (falling back to ``~/.config``) elsewhere.
    """
    if sys.platform == 'win32':
        return os.environ.get('APPDATA') or os.path.expanduser(os.path.join('~', 'AppData', 'Roaming'))
    if sys.platform == 'darwin':
        return os.path.expanduser(os.path.join('~', 'Library', 'Application Support'))
    xdg = os.environ.get('XDG_CONFIG_HOME')
    if xdg and os.path.isabs(xdg):
        return xdg
    return os.path.expanduser(os.path.join('~', '.config'))


def default_config_path() -> str:
    """Returns the path of the user's config file, ``<config dir>/memoria/config.toml``."""
    return os.path.join(user_config_dir(), APP_NAME, CONFIG_FILENAME)


@dataclass
class GeneralConf:
    timezone: str = 'UTC'
    """Default timezone for timestamps, such as "UTC" or "Europe/Paris"."""

    language: str = 'en'
    """Language for the interface."""


@dataclass
class EditorConf:
    default_editor: str = 'vim'
    """Command used to launch the editor, such as "nvim" or "code"."""

    editor_args: List[str] = field(default_factory=list)
    """Additional arguments passed to the editor before the file path."""


@dataclass
class NotesConf:
    notes_directory: str = './notes'
    """Directory where notes are stored. Relative paths are relative to the current working directory."""

    default_extension: str = 'md'
    """File extension for notes."""

    default_template: Optional[str] = None
    """Path to a Mako template rendered into every new note, below its heading.

    Relative paths are resolved against :attr:`notes_directory`.
    """

    def instantiate(self) -> NotesManager:
        return NotesManager(os.path.expanduser(self.notes_directory))


@dataclass
class FilesystemConf:
    max_file_size: int = 10 * 1024 * 1024
    """Maximum file size in bytes."""

    create_backups: bool = True
    """Whether to create backups when editing files."""

    backup_directory: str = '.backups'
    """Backup directory, relative to the notes directory."""


def _check_types(section_name: str, section) -> None:
    defaults = type(section)()
    for f in fields(section):
        value = getattr(section, f.name)
        default = getattr(defaults, f.name)
        if default is None:
            valid = value is None or isinstance(value, str)
        elif isinstance(default, bool):
            valid = isinstance(value, bool)
        elif isinstance(default, int):
            valid = isinstance(value, int) and not isinstance(value, bool) and value >= 0
        elif isinstance(default, list):
            valid = isinstance(value, list) and all(isinstance(v, str) for v in value)
        else:
            valid = isinstance(value, type(default))
        if not valid:
            raise ConfigError(f'Invalid value for {section_name}.{f.name}: {value!r}')


@dataclass
class MemoriaConf:
    general: GeneralConf = field(default_factory=GeneralConf)
    editor: EditorConf = field(default_factory=EditorConf)
    notes: NotesConf = field(default_factory=NotesConf)
    filesystem: FilesystemConf = field(default_factory=FilesystemConf)

    @classmethod
    def from_dict(cls, data: dict) -> MemoriaConf:
        """Builds an instance from parsed TOML data, using defaults for anything missing.

        Raises :exc:`ConfigError` for unknown sections or keys, or for values of the wrong type.
        """
        sections = {}
        for f in fields(cls):
            section = data.get(f.name, {})
            if not isinstance(section, dict):
                raise ConfigError(f'Section [{f.name}] must be a table')
            try:
                sections[f.name] = f.default_factory(**section)
            except TypeError as e:
                raise ConfigError(f'Invalid keys in section [{f.name}]: {e}') from e
            _check_types(f.name, sections[f.name])
        unknown = set(data) - set(sections)
        if unknown:
            raise ConfigError(f'Unknown configuration sections: {", ".join(sorted(unknown))}')
        return cls(**sections)

    def to_dict(self) -> dict:
        return asdict(self)

    def to_toml(self) -> str:
        """Serializes the settings as TOML. Unset optional values are omitted."""
        return toml.dumps(self.to_dict())

    @classmethod
    def load(cls, path: str) -> MemoriaConf:
        """Loads settings from the TOML file at ``path``, or returns the defaults if there is no file there.

        Raises :exc:`ConfigError` if the file cannot be read or parsed.
        """
        if not os.path.exists(path):
            logger.info('Config file not found at %s, using defaults', path)
            return cls()
        try:
            data = toml.load(path)
        except OSError as e:
            raise ConfigError(f'Failed to read config file: {path}') from e
        except toml.TomlDecodeError as e:
            raise ConfigError(f'Failed to parse config file: {path}: {e}') from e
        conf = cls.from_dict(data)
        logger.info('Configuration loaded from %s', path)
        return conf

    @classmethod
    def for_user(cls) -> MemoriaConf:
        """Loads settings from :func:`default_config_path`."""
        return cls.load(default_config_path())

    def save(self, path: str) -> None:
        """Writes the settings to ``path`` as TOML, creating parent directories if necessary."""
        parent = os.path.dirname(path)
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as file:
                file.write(self.to_toml())
        except OSError as e:
            raise ConfigError(f'Failed to write config file: {path}') from e
        logger.info('Configuration saved to %s', path)

    def save_for_user(self) -> None:
        self.save(default_config_path())

    @classmethod
    def ensure_exists(cls, path: Optional[str] = None) -> None:
        """Writes the default settings to ``path`` (by default, the user's config file) if no file exists there."""
        path = path or default_config_path()
        if not os.path.exists(path):
            cls().save(path)
            logger.info('Created default configuration file at %s', path)

    def get(self, key: str) -> str:
        """Returns the value for a dotted key such as ``notes.notes_directory``, formatted as text.

        Unset optional values are returned as ``"None"``; lists are joined using shell quoting.

        Raises :exc:`ConfigError` if the key is unknown.
        """
        section, name = self._lookup(key)
        value = getattr(section, name)
        if value is None:
            return 'None'
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, list):
            return ' '.join(shlex.quote(v) for v in value)
        return str(value)

    def set(self, key: str, value: str) -> None:
        """Changes the value for a dotted key such as ``editor.default_editor``, parsing it from text.

        Integers are parsed as base-10, booleans must be ``true`` or ``false``, and lists are split using
        shell rules.

        Raises :exc:`ConfigError` if the key is unknown or the value cannot be parsed.
        """
        section, name = self._lookup(key)
        current = getattr(section, name)
        if isinstance(current, bool):
            if value not in ('true', 'false'):
                raise ConfigError(f'Invalid boolean value: {value}')
            parsed = value == 'true'
        elif isinstance(current, int):
            try:
                parsed = int(value)
            except ValueError as e:
                raise ConfigError(f'Invalid integer value: {value}') from e
            if parsed < 0:
                raise ConfigError(f'Invalid integer value: {value}')
        elif isinstance(current, list):
            try:
                parsed = shlex.split(value)
            except ValueError as e:
                raise ConfigError(f'Invalid list value: {value}') from e
        else:
            parsed = value
        setattr(section, name, parsed)

    def _lookup(self, key: str):
        section_name, _, name = key.partition('.')
        if section_name not in {f.name for f in fields(self)}:
            raise ConfigError(f'Unknown configuration key: {key}')
        section = getattr(self, section_name)
        if name not in {f.name for f in fields(section)}:
            raise ConfigError(f'Unknown configuration key: {key}')
        return section, name
