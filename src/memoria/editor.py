"""Launches the user's editor."""

import logging
import subprocess

from memoria.conf import EditorConf

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Raised when the editor cannot be started or exits with a non-zero status."""
    pass


def open_in_editor(conf: EditorConf, path: str) -> None:
    """Runs the configured editor on ``path`` and waits for it to exit.

    The command is :attr:`EditorConf.default_editor`, followed by :attr:`EditorConf.editor_args`, followed by
    the path.
    """
    command = [conf.default_editor, *conf.editor_args, path]
    logger.debug('Running editor: %s', command)
    try:
        result = subprocess.run(command)
    except OSError as e:
        raise EditorError(f'Failed to launch editor: {conf.default_editor}') from e
    if result.returncode != 0:
        raise EditorError(f'Editor exited with non-zero status: {result.returncode}')
