"""
Polyglot

Per-request language resolution for Starlette and FastAPI applications: the
language named in the URI, the client's preferences and the languages the
application supports are reconciled into one current language, and the
request is rewritten or redirected to match it.
"""

from polyglot.config import PolyglotConfig, Settings
from polyglot.exceptions import (
    ConfigurationError,
    PatternContractError,
    PolyglotException,
    UnsupportedLanguageError,
)
from polyglot.matcher import LanguageMatcher
from polyglot.middleware.language import PolyglotMiddleware, get_current_language
from polyglot.resolver import LanguageResolver, Resolution
from polyglot.session import MappingSessionStore, SessionStore

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "LanguageMatcher",
    "LanguageResolver",
    "MappingSessionStore",
    "PatternContractError",
    "PolyglotConfig",
    "PolyglotException",
    "PolyglotMiddleware",
    "Resolution",
    "SessionStore",
    "Settings",
    "UnsupportedLanguageError",
    "get_current_language",
]
