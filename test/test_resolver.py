"""
Tests for the language resolution state machine

Covers:
    TestAmbientPreference    — no language in the request
    TestCorrection           — the request names an unsupported language
    TestSupportedLanguage    — the request names a supported language
    TestQuerySignal          — languages carried by query parameters
    TestFinalization         — session persistence and callbacks
    TestResolverSetup        — setters and helpers
"""

import pytest

from polyglot.exceptions import (
    InvalidCallbackError,
    InvalidQueryKeyError,
    NoSupportedLanguagesError,
    UnsupportedLanguageError,
)
from polyglot.patterns import RFC1766
from polyglot.resolver import LanguageResolver
from polyglot.session import MappingSessionStore

LANGUAGES = ["en", "fr", "es"]


def make_resolver(**options) -> LanguageResolver:
    options.setdefault("languages", LANGUAGES)
    return LanguageResolver(**options)


class TestAmbientPreference:
    def test_fallback_with_canonical_hint(self):
        resolution = make_resolver().resolve("/")

        assert resolution.language == "en"
        assert resolution.path == "/"
        assert resolution.canonical == "/en/"
        assert not resolution.redirected
        assert resolution.extracted is None
        assert resolution.source is None
        assert resolution.attributes == {
            "language_fallback": "en",
            "language_preferred": None,
            "language_current": "en",
        }

    def test_header_preference(self):
        resolution = make_resolver().resolve("/hello", {}, "fr-CA,fr;q=0.9")

        assert resolution.language == "fr"
        assert resolution.canonical == "/fr/hello"
        assert resolution.attributes["language_preferred"] == "fr"

    def test_unsupported_header_uses_fallback(self):
        resolution = make_resolver().resolve("/", {}, "de")

        assert resolution.language == "en"
        assert resolution.attributes["language_preferred"] is None

    def test_required_language_redirects(self):
        resolution = make_resolver(language_required_in_uri=True).resolve("/", {}, "es;q=1,fr;q=0.5")

        assert resolution.redirect_to == "/es/"
        assert resolution.canonical is None
        assert resolution.language == "es"

    def test_required_language_redirects_to_fallback(self):
        resolution = make_resolver(language_required_in_uri=True).resolve("/hello")

        assert resolution.redirect_to == "/en/hello"

    def test_session_beats_header(self, session):
        session.set("language", "es")
        resolution = make_resolver().resolve("/", {}, "fr", session)

        assert resolution.language == "es"
        assert resolution.attributes["language_preferred"] == "es"

    def test_unsupported_session_language_ignored(self):
        session = MappingSessionStore({"language": "de"})
        resolution = make_resolver().resolve("/", {}, "fr", session)

        assert resolution.language == "fr"

    def test_session_ignored_when_persistence_disabled(self, session):
        session.set("language", "es")
        resolution = make_resolver(persist_language=False).resolve("/", {}, None, session)

        assert resolution.language == "en"

    def test_word_starting_with_language_not_stripped(self):
        """/english is a route, not the "en" segment"""
        resolution = make_resolver().resolve("/english", {}, "en")

        assert resolution.language == "en"
        assert resolution.path == "/english"


class TestCorrection:
    def test_redirects_to_fallback(self):
        resolution = make_resolver().resolve("/de/hello")

        assert resolution.redirect_to == "/en/hello"
        assert resolution.path == "/hello"
        assert resolution.language == "en"
        assert resolution.extracted == "de"
        assert resolution.source == "path"
        assert resolution.attributes["language_path"] == "en"

    def test_preference_is_computed_but_fallback_wins(self):
        resolution = make_resolver().resolve("/de/hello", {}, "fr")

        assert resolution.attributes["language_preferred"] == "fr"
        assert resolution.language == "en"
        assert resolution.redirect_to == "/en/hello"

    def test_preference_wins_when_fallback_not_forced(self):
        resolver = make_resolver(force_fallback_on_correction=False)
        resolution = resolver.resolve("/de/hello", {}, "fr")

        assert resolution.language == "fr"
        assert resolution.redirect_to == "/fr/hello"
        assert resolution.attributes["language_path"] == "fr"

    def test_fallback_when_no_preference_and_not_forced(self):
        resolution = make_resolver(force_fallback_on_correction=False).resolve("/de/hello")

        assert resolution.redirect_to == "/en/hello"

    def test_bare_unsupported_segment(self):
        assert make_resolver().resolve("/de").redirect_to == "/en/"

    def test_correction_happens_even_when_included_in_routes(self):
        resolution = make_resolver(language_included_in_routes=True).resolve("/de/hello")

        assert resolution.redirect_to == "/en/hello"

    def test_session_gets_corrected_language(self, session):
        make_resolver().resolve("/de/hello", {}, None, session)

        assert session.get("language") == "en"


class TestSupportedLanguage:
    def test_strips_language_segment(self):
        resolution = make_resolver().resolve("/fr/hello")

        assert resolution.language == "fr"
        assert resolution.path == "/hello"
        assert not resolution.redirected
        assert resolution.canonical is None
        assert "language_preferred" not in resolution.attributes

    def test_segment_kept_when_included_in_routes(self):
        resolution = make_resolver(language_included_in_routes=True).resolve("/fr/hello")

        assert resolution.path == "/fr/hello"
        assert not resolution.redirected

    def test_empty_path_redirects_to_root(self):
        resolution = make_resolver().resolve("/fr")

        assert resolution.redirect_to == "/fr/"
        assert resolution.language == "fr"

    def test_bare_segment_allowed_when_included_in_routes(self):
        resolution = make_resolver(language_included_in_routes=True).resolve("/fr")

        assert not resolution.redirected
        assert resolution.path == "/fr"

    def test_header_is_ignored(self):
        assert make_resolver().resolve("/es/hello", {}, "fr").language == "es"

    def test_regional_tags(self):
        resolver = make_resolver(languages=["en", "fr-CA"], pattern=RFC1766)
        resolution = resolver.resolve("/fr-CA/hello")

        assert resolution.language == "fr-CA"
        assert resolution.path == "/hello"


class TestQuerySignal:
    def test_supported_query_language(self):
        resolution = make_resolver(query_keys=["lang"]).resolve("/hello", {"lang": "fr"})

        assert resolution.language == "fr"
        assert resolution.source == "query"
        assert resolution.path == "/hello"
        assert resolution.canonical is None

    def test_query_beats_path(self):
        """The path segment is still removed when the query string picks another language"""
        resolution = make_resolver(query_keys=["lang"]).resolve("/es/hello", {"lang": "fr"})

        assert resolution.language == "fr"
        assert resolution.path == "/hello"
        assert not resolution.redirected

    def test_path_segment_kept_with_query_when_included_in_routes(self):
        resolver = make_resolver(query_keys=["lang"], language_included_in_routes=True)
        resolution = resolver.resolve("/es/hello", {"lang": "fr"})

        assert resolution.language == "fr"
        assert resolution.path == "/es/hello"

    def test_query_language_also_stripped_from_path(self):
        resolution = make_resolver(query_keys=["lang"]).resolve("/fr/hello", {"lang": "fr"})

        assert resolution.path == "/hello"

    def test_unsupported_query_language(self):
        resolution = make_resolver(query_keys=["lang", "l"]).resolve("/hello", {"lang": "de"})

        assert resolution.redirect_to == "/en/hello"
        assert resolution.drop_query_keys == ("lang", "l")

    def test_unsupported_query_language_with_path_segment(self):
        """/fr/foo?lang=de lands on /en/foo, not /en/fr/foo"""
        resolution = make_resolver(query_keys=["lang"]).resolve("/fr/foo", {"lang": "de"})

        assert resolution.redirect_to == "/en/foo"
        assert resolution.path == "/foo"
        assert resolution.extracted == "de"
        assert resolution.source == "query"

    def test_query_language_with_bare_path_segment(self):
        resolution = make_resolver(query_keys=["lang"]).resolve("/es", {"lang": "fr"})

        assert resolution.redirect_to == "/fr/"

    def test_query_ignored_without_keys(self):
        resolution = make_resolver().resolve("/hello", {"lang": "fr"})

        assert resolution.language == "en"
        assert resolution.source is None


class TestFinalization:
    def test_language_persisted(self, session):
        make_resolver().resolve("/fr/hello", {}, None, session)

        assert session.get("language") == "fr"

    def test_custom_session_key(self, session):
        make_resolver(session_key="lang").resolve("/es/hello", {}, None, session)

        assert session.get("lang") == "es"
        assert session.get("language") is None

    def test_not_persisted_when_disabled(self, session):
        make_resolver(persist_language=False).resolve("/fr/hello", {}, None, session)

        assert session.get("language") is None

    def test_callbacks_in_order(self):
        calls = []
        resolver = make_resolver(
            callbacks=[lambda language: calls.append(("first", language)), lambda language: calls.append(("second", language))]
        )
        resolver.resolve("/fr/hello")

        assert calls == [("first", "fr"), ("second", "fr")]

    def test_callbacks_run_on_redirect(self):
        calls = []
        make_resolver(callbacks=calls.append).resolve("/de/hello")

        assert calls == ["en"]

    def test_callback_errors_propagate(self):
        def explode(language):
            raise RuntimeError(f"cannot switch to {language}")

        with pytest.raises(RuntimeError, match="cannot switch to fr"):
            make_resolver(callbacks=explode).resolve("/fr/hello")


class TestResolverSetup:
    def test_set_supported_languages_resets_fallback(self):
        resolver = make_resolver(fallback_language="es")
        resolver.set_supported_languages(["fr", "en"])

        assert resolver.get_supported_languages() == ("fr", "en")
        assert resolver.get_fallback_language() == "fr"

    def test_set_supported_languages_rejects_empty(self):
        with pytest.raises(NoSupportedLanguagesError):
            make_resolver().set_supported_languages([])

    def test_set_fallback_language(self):
        resolver = make_resolver().set_fallback_language("es")

        assert resolver.get_fallback_language() == "es"
        assert resolver.resolve("/").language == "es"

    def test_set_fallback_language_must_be_supported(self):
        resolver = make_resolver()
        with pytest.raises(UnsupportedLanguageError):
            resolver.set_fallback_language("de")
        assert resolver.get_fallback_language() == "en"

    def test_add_callback(self):
        calls = []
        resolver = make_resolver().add_callback(calls.append).add_callback(calls.append)
        resolver.resolve("/es/hello")

        assert len(resolver.get_callbacks()) == 2
        assert calls == ["es", "es"]

    def test_add_callback_rejects_non_callable(self):
        with pytest.raises(InvalidCallbackError):
            make_resolver().add_callback("nope")

    def test_set_callbacks_replaces(self):
        resolver = make_resolver(callbacks=[print]).set_callbacks([])

        assert resolver.get_callbacks() == ()

    def test_set_pattern(self):
        resolver = make_resolver(languages=["en", "fr-CA"]).set_pattern(RFC1766)

        assert resolver.get_pattern() == RFC1766
        assert resolver.resolve("/fr-CA/hello").language == "fr-CA"

    def test_set_query_keys(self):
        resolver = make_resolver().set_query_keys("lang")

        assert resolver.get_query_keys() == ("lang",)
        with pytest.raises(InvalidQueryKeyError):
            resolver.set_query_keys([None])

    def test_sanitize_language(self):
        resolver = make_resolver()

        assert resolver.sanitize_language("fr") == "fr"
        assert resolver.sanitize_language("de") == "en"
        assert resolver.sanitize_language(None) == "en"

    def test_is_supported(self):
        resolver = make_resolver()

        assert resolver.is_supported("es")
        assert not resolver.is_supported("ES")
        assert not resolver.is_supported(None)

    def test_get_language(self, session):
        resolver = make_resolver()

        assert resolver.get_language(session, "es") == "es"
        assert resolver.get_language(session, "de") == "en"
        resolver.set_user_language(session, "de")
        assert session.get("language") == "en"

    def test_path_helpers_default_to_fallback(self):
        resolver = make_resolver()

        assert resolver.prepend_language("/hello") == "/en/hello"
        assert resolver.strip_language("/en/hello") == "/hello"
        assert resolver.replace_language("/de/hello", "de") == "/en/hello"
        assert resolver.replace_language("/de/hello", "de", "fr") == "/fr/hello"

    def test_config_instance_with_overrides(self):
        from polyglot.config import PolyglotConfig

        resolver = LanguageResolver(PolyglotConfig(languages=LANGUAGES), fallback_language="fr")

        assert resolver.get_fallback_language() == "fr"
