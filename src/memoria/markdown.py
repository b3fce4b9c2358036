"""Parsing and generating the small amount of markdown structure memoria cares about.

A note produced by memoria looks like this:

.. code-block:: markdown

   ---
   created_at: 2024-01-15T10:30:00.123Z
   ---
   # My Title

The block between the ``---`` lines is YAML front matter. The title is taken from the first heading line.
"""

from datetime import datetime, timezone
import re
from typing import Optional

import yaml

YAML_META_RE = re.compile(r'(?ms)(\A---\n(.*?)\n(---|\.\.\.)\s*\r?\n)?(.*)')


def extract_title(doc: str) -> Optional[str]:
    """Returns the text of the first line that starts with ``#``, or None if there is no such line.

    Leading whitespace before the ``#`` is allowed. All leading ``#`` characters are removed, and the rest
    of the line is stripped of surrounding whitespace. Lines inside front matter are not treated specially.
    """
    for line in doc.splitlines():
        trimmed = line.lstrip()
        if trimmed.startswith('#'):
            return trimmed.lstrip('#').strip()
    return None


def extract_meta(doc: str) -> dict:
    """Parses the YAML front matter at the start of the document.

    Returns an empty dict if there is no front matter. Raises :exc:`yaml.YAMLError` if it cannot be parsed,
    and :exc:`ValueError` if it does not contain a mapping.
    """
    match = YAML_META_RE.match(doc)
    if not match.group(2):
        return {}
    meta = yaml.safe_load(match.group(2))
    if meta is None:
        return {}
    if not isinstance(meta, dict):
        raise ValueError(f'Front matter must be a mapping, not {type(meta).__name__}')
    return meta


def format_timestamp(moment: datetime) -> str:
    """Formats the moment in UTC as ISO-8601 with millisecond precision, e.g. ``2024-01-15T10:30:00.123Z``.

    Naive datetimes are assumed to be in UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f'{moment.microsecond // 1000:03d}Z'


def metadata_block(created: datetime) -> str:
    return f'---\ncreated_at: {format_timestamp(created)}\n---\n'


def new_note_content(title: str, created: datetime, body: str = '') -> str:
    """Returns the initial text for a note: front matter, a top-level heading with the title, a blank line,
    and then the optional body."""
    return f'{metadata_block(created)}# {title}\n\n{body}'
