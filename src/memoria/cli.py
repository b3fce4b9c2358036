"""Command-line interface for memoria."""


import argparse
from datetime import date, datetime
import json
import logging
import os
import os.path
import sys
from dotenv import find_dotenv, load_dotenv
from terminaltables import AsciiTable
from memoria import __version__
from memoria.conf import ConfigError, MemoriaConf, default_config_path
from memoria.editor import EditorError, open_in_editor
from memoria.errors import MemoriaError, DirectoryNotFoundError, PermissionDeniedError, FileMissingError,\
    InvalidFormatError, FilesystemError, EmptyNotesDirectoryError, NoteExistsError, NoteNotFoundError
from memoria.markdown import format_timestamp

logger = logging.getLogger(__name__)


def _error_message(error: MemoriaError) -> str:
    if isinstance(error, DirectoryNotFoundError):
        return f"Notes directory not found: {error.path}\nTry running 'memoria init' first."
    if isinstance(error, PermissionDeniedError):
        return f'Permission denied accessing: {error.path}'
    if isinstance(error, FileMissingError):
        return f'File not found: {error.path}'
    if isinstance(error, InvalidFormatError):
        return f'Invalid format: {error.message}'
    if isinstance(error, FilesystemError):
        return f'IO error: {error.cause}'
    if isinstance(error, EmptyNotesDirectoryError):
        return f'No notes found in directory: {error.path}'
    if isinstance(error, NoteExistsError):
        return f'Note already exists: {error.path}'
    if isinstance(error, NoteNotFoundError):
        return f'Note not found: {error.path}'
    return str(error)


def _list(args, conf: MemoriaConf) -> int:
    manager = conf.notes.instantiate()
    try:
        notes = manager.list_notes()
    except EmptyNotesDirectoryError:
        if args.json:
            print(json.dumps([]))
        else:
            print(f"No notes found in the '{manager.notes_directory}' directory.")
        return 0

    if args.json:
        data = []
        for note in notes:
            created = note.metadata().get('created_at')
            if isinstance(created, datetime):
                created = format_timestamp(created)
            elif isinstance(created, date):
                created = created.isoformat()
            data.append({
                'path': note.path_str(),
                'title': note.title,
                'created_at': created,
            })
        print(json.dumps(data, default=str))
    elif args.table:
        data = [('Title', 'Path')] + [(note.title, note.path_str()) for note in notes]
        print(AsciiTable(data).table)
    else:
        print(f'Found {len(notes)} note(s):')
        for note in notes:
            print(f'  {note.title} ({note.path_str()})')
    return 0


def _create(args, conf: MemoriaConf) -> int:
    manager = conf.notes.instantiate()
    note = manager.create_note(args.title[0], template=conf.notes.default_template)
    print(f'Note created: {note.path_str()}')
    return 0


def _init(args, conf: MemoriaConf) -> int:
    target = args.directory
    if target == 'default':
        target = conf.notes.instantiate().notes_directory
    if not os.path.exists(target):
        try:
            os.makedirs(target)
        except OSError as e:
            print(f'Failed to create notes directory: {target}: {e}', file=sys.stderr)
            return 1
        print(f'Created notes directory: {target}')
    else:
        print(f'Notes directory already exists: {target}')
    return 0


def _config_show(args, conf: MemoriaConf) -> int:
    print(f'Configuration loaded from: {default_config_path()}')
    print(f'\n{conf.to_toml()}')
    return 0


def _config_edit(args, conf: MemoriaConf) -> int:
    path = default_config_path()
    open_in_editor(conf.editor, path)
    print(f'Configuration file updated: {path}')
    return 0


def _config_set(args, conf: MemoriaConf) -> int:
    key, value = args.key[0], args.value[0]
    conf.set(key, value)
    conf.save_for_user()
    print(f'Configuration updated: {key} = {value}')
    return 0


def _config_get(args, conf: MemoriaConf) -> int:
    print(conf.get(args.key[0]))
    return 0


def _config_reset(args, conf: MemoriaConf) -> int:
    path = default_config_path()
    MemoriaConf().save(path)
    print(f'Configuration reset to defaults: {path}')
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='memoria', description='A local-first knowledge management tool.')
    parser.set_defaults(func=None)
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print debug logging to stderr.')

    subs = parser.add_subparsers(title='Commands')

    p_list = subs.add_parser('list', help='List all notes in the notes directory.')
    p_list_formats = p_list.add_mutually_exclusive_group()
    p_list_formats.add_argument('-j', '--json', action='store_true',
                                help='Output as JSON. The output is an array of objects with the path, title, '
                                     'and created_at of each note.')
    p_list_formats.add_argument('-t', '--table', action='store_true', help='Format output as a table.')
    p_list.set_defaults(func=_list)

    p_create = subs.add_parser(
        'create',
        help='Create a new note. The filename is derived from the title: it is lowercased, and spaces and '
             'characters that are unsafe in filenames are replaced with underscores. '
             'This command will not overwrite an existing note.')
    p_create.add_argument('title', nargs=1, help='Title of the note.')
    p_create.set_defaults(func=_create)

    p_init = subs.add_parser('init', help='Create the notes directory if it does not exist.')
    p_init.add_argument('directory', nargs='?', default='default',
                        help='Directory to create. If omitted or "default", the configured notes directory is used.')
    p_init.set_defaults(func=_init)

    p_config = subs.add_parser('config', help='Manage the configuration file.')
    config_subs = p_config.add_subparsers(title='Configuration commands')

    p_show = config_subs.add_parser('show', help='Show the current configuration.')
    p_show.set_defaults(func=_config_show)

    p_edit = config_subs.add_parser('edit', help='Open the configuration file with the configured editor.')
    p_edit.set_defaults(func=_config_edit)

    p_set = config_subs.add_parser('set', help='Set a configuration value.')
    p_set.add_argument('key', nargs=1, help='Configuration key, such as editor.default_editor or '
                                            'notes.notes_directory.')
    p_set.add_argument('value', nargs=1, help='New value.')
    p_set.set_defaults(func=_config_set)

    p_get = config_subs.add_parser('get', help='Print a configuration value.')
    p_get.add_argument('key', nargs=1, help='Configuration key, such as editor.default_editor or '
                                            'notes.notes_directory.')
    p_get.set_defaults(func=_config_get)

    p_reset = config_subs.add_parser('reset', help='Reset the configuration to defaults.')
    p_reset.set_defaults(func=_config_reset)

    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.getLevelName(os.environ.get('MEMORIA_LOG', 'WARNING').upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=level, format='%(levelname)s %(name)s: %(message)s')


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    load_dotenv(find_dotenv(usecwd=True))
    parser = argparser()
    args = parser.parse_args(args)
    _configure_logging(args.verbose)
    if not args.func:
        parser.print_help()
        return 1
    try:
        MemoriaConf.ensure_exists()
        conf = MemoriaConf.for_user()
        return args.func(args, conf)
    except MemoriaError as e:
        logger.debug('Command failed', exc_info=True)
        print(_error_message(e), file=sys.stderr)
        return 1
    except (ConfigError, EditorError) as e:
        logger.debug('Command failed', exc_info=True)
        print(str(e), file=sys.stderr)
        return 1
