"""Local-first note taking: manages a directory of markdown notes from the command line.

If you installed via ``pip``, run ``memoria -h`` to get help.
Or, run ``python3 -m memoria -h``.

To use the Python API, look at :class:`memoria.notes.NotesManager` and :class:`memoria.conf.MemoriaConf`.
"""

__version__ = '0.1.0'
