"""Helpers for turning note titles into filenames and recognizing note files."""

import os.path

FORBIDDEN_CHARS = '/\\:*?"<>| '
_REPLACEMENTS = str.maketrans({c: '_' for c in FORBIDDEN_CHARS})

MARKDOWN_EXTENSIONS = ('md', 'markdown')


def sanitize_filename(title: str) -> str:
    """Returns a filename fragment derived from the given title.

    The following adjustments are made, in order:

    * Each of the characters ``/ \\ : * ? " < > |`` and the space character is replaced with an underscore
    * Characters are converted to lowercase
    * Leading and trailing whitespace is removed

    Since spaces have already become underscores by the time whitespace is stripped, only other whitespace
    (such as tabs or newlines) is actually removed by the last step.

    For example, the title "My Note: Draft" becomes ``my_note__draft``.

    No length limit is applied and reserved names (like ``CON`` on Windows) are not checked.
    """
    return title.translate(_REPLACEMENTS).lower().strip()


def is_markdown_file(name: str) -> bool:
    """Returns True if the filename or path has a ``.md`` or ``.markdown`` extension, ignoring case.

    Dotfiles such as ``.md`` have no extension, so they are not considered markdown files.
    """
    ext = os.path.splitext(name)[1][1:]
    return ext.lower() in MARKDOWN_EXTENSIONS
