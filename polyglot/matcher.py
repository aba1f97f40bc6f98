"""
Language detection

LanguageMatcher finds a language tag embedded in a URI path or a query value
and asks the Accept-Language negotiator for the best supported match. It has
no side effects and keeps no per-request state.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence

from polyglot.exceptions import InvalidPatternError, PatternContractError
from polyglot.i18n.locale import parse_accept_language
from polyglot.patterns import DEFAULT_PATTERN

LANGUAGE_GROUP = "language"


class LanguageMatcher:
    """Detect language tags with a configurable pattern.

    The pattern must define a named ``language`` group. Path detection anchors
    it at the start of the path (optionally after one ``/``) and requires a
    word boundary that is not a hyphen right after the match, so ``/fr/`` and
    ``/fr`` match while ``/french`` and ``/fr-CA`` (with the default pattern)
    do not.
    """

    def __init__(self, pattern: str = DEFAULT_PATTERN):
        if not isinstance(pattern, str):
            raise InvalidPatternError(pattern=repr(pattern))
        try:
            self._value_regex = re.compile(pattern)
            self._path_regex = re.compile(rf"^/?(?:{pattern})(?!-)\b")
        except re.error as exc:
            raise InvalidPatternError(message=f"Invalid language pattern: {exc}", pattern=pattern) from exc
        self.pattern = pattern

    def _language(self, match: re.Match) -> str:
        if LANGUAGE_GROUP not in match.re.groupindex:
            raise PatternContractError(self.pattern)
        return match.group(LANGUAGE_GROUP)

    def match_from_query(self, query_params: Mapping[str, str], keys: Iterable[str]) -> str | None:
        """Return the language found in the first configured query key that matches.

        Keys are tried in configuration order; a value matches when the
        pattern matches at its start.
        """
        for key in keys:
            if key not in query_params:
                continue
            match = self._value_regex.match(query_params[key])
            if match:
                return self._language(match)
        return None

    def match_from_path(self, path: str) -> str | None:
        """Return the language tag at the head of ``path``, if any."""
        normalized = path.rstrip("/") + "/"
        match = self._path_regex.match(normalized)
        if match:
            return self._language(match)
        return None

    def negotiate(self, header: str | None, supported: Sequence[str]) -> str | None:
        """Return the supported language best matching an Accept-Language value."""
        if not header or not supported:
            return None
        return parse_accept_language(header, supported)
