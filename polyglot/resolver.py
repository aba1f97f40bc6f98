"""
Language resolution

LanguageResolver decides, for one request, which language is current and
what has to happen to the request for that language to be honoured:

1. a language named in the query string or at the head of the path wins;
2. otherwise the session, then the Accept-Language header, then the fallback;
3. an unsupported language in the request is corrected with a redirect;
4. the language segment is stripped from the path handed to the application,
   or the client is redirected to a URI carrying it.

The resolver is framework-agnostic: it returns a Resolution describing the
outcome, and PolyglotMiddleware applies it to the Starlette request/response.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from polyglot.config import PolyglotConfig
from polyglot.matcher import LanguageMatcher
from polyglot.paths import prepend_language, replace_language, strip_language
from polyglot.session import SessionStore

logger = logging.getLogger(__name__)

SOURCE_QUERY = "query"
SOURCE_PATH = "path"


@dataclass
class Resolution:
    """Outcome of resolving the language of one request.

    Paths are route paths, i.e. relative to the application's root path.
    """

    language: str
    path: str
    extracted: str | None = None
    source: str | None = None
    redirect_to: str | None = None
    canonical: str | None = None
    drop_query_keys: tuple[str, ...] = ()
    attributes: dict[str, str | None] = field(default_factory=dict)

    @property
    def redirected(self) -> bool:
        return self.redirect_to is not None


class LanguageResolver:
    """Resolve the current language from the request, the client and the configuration.

    Configuration is immutable while requests are served. The setters below
    replace the whole PolyglotConfig and are meant for application setup.
    """

    def __init__(self, config: PolyglotConfig | None = None, **options: Any):
        if config is None:
            config = PolyglotConfig(**options)
        elif options:
            config = config.replace(**options)
        self._apply(config)

    def _apply(self, config: PolyglotConfig) -> None:
        self.config = config
        self.matcher = LanguageMatcher(config.pattern)

    # ── Configuration ────────────────────────────────────────────────────────

    @property
    def language_required_in_uri(self) -> bool:
        return self.config.language_required_in_uri

    @property
    def language_included_in_routes(self) -> bool:
        return self.config.language_included_in_routes

    def get_supported_languages(self) -> tuple[str, ...]:
        return self.config.languages

    def set_supported_languages(self, languages: Sequence[str]) -> LanguageResolver:
        """Replace the supported languages; the first one becomes the fallback."""
        self._apply(self.config.replace(languages=languages, fallback_language=None))
        return self

    def get_fallback_language(self) -> str:
        return self.config.fallback_language

    def set_fallback_language(self, language: str) -> LanguageResolver:
        """Set the fallback language; it must be one of the supported languages."""
        self._apply(self.config.replace(fallback_language=language))
        return self

    def get_callbacks(self) -> tuple[Callable[[str], Any], ...]:
        return self.config.callbacks

    def set_callbacks(self, callbacks: Iterable[Callable[[str], Any]]) -> LanguageResolver:
        self._apply(self.config.replace(callbacks=tuple(callbacks)))
        return self

    def add_callback(self, callback: Callable[[str], Any]) -> LanguageResolver:
        """Register a callable invoked with the language once it is resolved."""
        self._apply(self.config.replace(callbacks=(*self.config.callbacks, callback)))
        return self

    def get_pattern(self) -> str:
        return self.config.pattern

    def set_pattern(self, pattern: str) -> LanguageResolver:
        self._apply(self.config.replace(pattern=pattern))
        return self

    def get_query_keys(self) -> tuple[str, ...]:
        return self.config.query_keys

    def set_query_keys(self, keys: str | Iterable[str]) -> LanguageResolver:
        self._apply(self.config.replace(query_keys=keys))
        return self

    def is_supported(self, language: str | None) -> bool:
        return language in self.config.languages

    def sanitize_language(self, language: str | None) -> str:
        """Return ``language`` if supported, the fallback language otherwise."""
        if not self.is_supported(language):
            return self.get_fallback_language()
        return language

    # ── Client preference ────────────────────────────────────────────────────

    def get_user_language(self, session: SessionStore | None = None, accept_language: str | None = None) -> str | None:
        """Return the client's preferred supported language, if any.

        A supported language stored in the session comes first, then the
        best match for the Accept-Language header.
        """
        if self.config.persist_language and session is not None:
            stored = session.get(self.config.session_key)
            if self.is_supported(stored):
                return stored
            if stored:
                logger.debug("Ignoring unsupported session language %r", stored)

        return self.matcher.negotiate(accept_language, self.config.languages)

    def get_language(self, session: SessionStore | None = None, accept_language: str | None = None) -> str:
        """Return the client's preferred language or the fallback language."""
        return self.get_user_language(session, accept_language) or self.get_fallback_language()

    def set_user_language(self, session: SessionStore, language: str | None) -> LanguageResolver:
        """Store ``language`` in the session, replaced by the fallback if unsupported."""
        session.set(self.config.session_key, self.sanitize_language(language))
        return self

    # ── Path helpers ─────────────────────────────────────────────────────────

    def strip_language(self, path: str, language: str | None = None) -> str:
        return strip_language(path, language if language is not None else self.get_fallback_language())

    def prepend_language(self, path: str, language: str | None = None) -> str:
        return prepend_language(path, language if language is not None else self.get_fallback_language())

    def replace_language(self, path: str, language: str | None, replacement: str | None = None) -> str:
        return replace_language(
            path, language, replacement if replacement is not None else self.get_fallback_language()
        )

    def _strip_detected(self, path: str) -> str:
        # Only strip a segment the matcher recognises, so "/english" keeps its "en".
        detected = self.matcher.match_from_path(path)
        if detected:
            return strip_language(path, detected)
        return path

    # ── Resolution ───────────────────────────────────────────────────────────

    def resolve(
        self,
        path: str,
        query_params: Mapping[str, str] | None = None,
        accept_language: str | None = None,
        session: SessionStore | None = None,
    ) -> Resolution:
        """Resolve the language for a request to ``path``.

        Runs the callbacks and writes the session as side effects; callback
        exceptions propagate to the caller.
        """
        config = self.config
        fallback = config.fallback_language
        attributes: dict[str, str | None] = {"language_fallback": fallback}

        source = SOURCE_QUERY
        extracted = self.matcher.match_from_query(query_params or {}, config.query_keys)
        if extracted is None:
            source = SOURCE_PATH
            extracted = self.matcher.match_from_path(path)
        if extracted is None:
            source = None

        route_path = path
        redirect_to = None
        canonical = None
        drop_query_keys: tuple[str, ...] = ()

        if extracted is None:
            language = self.get_user_language(session, accept_language)
            attributes["language_preferred"] = language
            if not language:
                language = fallback

            target = prepend_language(path, language)
            if config.language_required_in_uri:
                redirect_to = target
            else:
                canonical = target

        elif not self.is_supported(extracted):
            route_path = self._strip_detected(path) or "/"
            preferred = self.get_user_language(session, accept_language)
            attributes["language_preferred"] = preferred

            language = fallback
            if preferred and not config.force_fallback_on_correction:
                language = preferred
            attributes["language_path"] = language

            redirect_to = prepend_language(route_path, language)
            if source == SOURCE_QUERY:
                drop_query_keys = config.query_keys
            logger.debug("Unsupported language %r in %s; correcting to %r", extracted, source, language)

        else:
            language = extracted

        if redirect_to is None and not config.language_included_in_routes:
            # A path segment is dropped even when the query string chose another language
            stripped = self._strip_detected(path)
            if not stripped:
                redirect_to = prepend_language("/", language)
            else:
                route_path = stripped

        attributes["language_current"] = language

        if config.persist_language and session is not None:
            self.set_user_language(session, language)

        for callback in config.callbacks:
            callback(language)

        logger.debug(
            "Resolved language %r for %s (source=%s, redirect=%s)",
            language,
            path,
            source or "preference",
            redirect_to,
        )

        return Resolution(
            language=language,
            path=route_path,
            extracted=extracted,
            source=source,
            redirect_to=redirect_to,
            canonical=canonical,
            drop_query_keys=drop_query_keys,
            attributes=attributes,
        )
