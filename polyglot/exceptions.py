"""
Custom Exception Classes for Polyglot

Every error raised by this package derives from PolyglotException. All of
them describe misconfiguration: a request naming an unknown language is
never an error, it is redirected or rewritten instead.
"""

from typing import Any


class PolyglotException(Exception):
    """Base exception class for all Polyglot exceptions"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(PolyglotException):
    """Raised when the resolver is set up with invalid options"""


class UnsupportedLanguageError(ConfigurationError):
    """Raised when a fallback language is not one of the supported languages"""

    def __init__(self, language: Any, supported: tuple[str, ...] | list[str] = ()):
        super().__init__(
            message=f"Language '{language}' must be one of the supported languages",
            details={"language": language, "supported": list(supported)},
        )


class NoSupportedLanguagesError(ConfigurationError):
    """Raised when no supported languages are configured"""

    def __init__(self, message: str = "Polyglot features no supported languages"):
        super().__init__(message=message)


class DuplicateLanguageError(ConfigurationError):
    """Raised when a language appears twice in the supported list"""

    def __init__(self, language: str):
        super().__init__(
            message=f"Language '{language}' is listed more than once",
            details={"language": language},
        )


class InvalidPatternError(ConfigurationError):
    """Raised when the language pattern is not a usable regular expression"""

    def __init__(self, message: str = "Language pattern must be a string", pattern: Any = None):
        super().__init__(message=message, details={"pattern": pattern})


class InvalidQueryKeyError(ConfigurationError):
    """Raised when a query key is not a string"""

    def __init__(self, key: Any):
        super().__init__(message="Query keys must be strings", details={"key": repr(key)})


class InvalidCallbackError(ConfigurationError):
    """Raised when a registered callback cannot be called"""

    def __init__(self, callback: Any):
        super().__init__(message="Callbacks must be callable", details={"callback": repr(callback)})


class PatternContractError(ConfigurationError):
    """Raised when a pattern matches but has no named ``language`` group"""

    def __init__(self, pattern: str):
        super().__init__(
            message="Language pattern must define a named 'language' group",
            details={"pattern": pattern},
        )
