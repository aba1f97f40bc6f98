"""
Path manipulation helpers

Pure functions that add, remove or swap the language segment at the head of
a URI path. The separator is never inserted: ``prepend_language`` is plain
concatenation of ``"/" + tag`` and the path, which keeps
``strip_language(prepend_language(path, tag), tag) == path`` for every path.
"""

from __future__ import annotations


def strip_language(path: str, language: str | None) -> str:
    """Remove a leading ``/<language>`` from ``path``.

    Returns the path unchanged when ``language`` is empty or the path does not
    start with it. Stripping ``/fr`` from ``/fr`` yields an empty string; the
    caller decides what an empty path means.
    """
    if not language:
        return path

    segment = f"/{language}"
    if path.startswith(segment):
        return path[len(segment):]
    return path


def prepend_language(path: str, language: str | None) -> str:
    """Insert ``/<language>`` in front of ``path``; no-op for an empty language."""
    if not language:
        return path
    return f"/{language}{path}"


def replace_language(path: str, language: str | None, replacement: str | None) -> str:
    """Swap the ``language`` segment of ``path`` for ``replacement``."""
    return prepend_language(strip_language(path, language), replacement)
