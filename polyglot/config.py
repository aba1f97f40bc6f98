import re
from collections.abc import Callable
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from polyglot.exceptions import (
    ConfigurationError,
    DuplicateLanguageError,
    InvalidCallbackError,
    InvalidPatternError,
    InvalidQueryKeyError,
    NoSupportedLanguagesError,
    UnsupportedLanguageError,
)
from polyglot.patterns import DEFAULT_PATTERN, resolve_pattern

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Polyglot"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    # Session settings
    session_secret_key: str = "change-me"
    session_cookie: str = "polyglot_session"

    # Language resolution settings
    supported_languages: list[str] = ["en"]
    fallback_language: Optional[str] = None
    language_pattern: str = "ISO639"
    query_keys: list[str] = []
    language_required_in_uri: bool = False
    language_included_in_routes: bool = False
    persist_language: bool = True
    force_fallback_on_correction: bool = True
    session_key: str = "language"

    model_config = SettingsConfigDict(
        env_prefix="POLYGLOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()


class PolyglotConfig(BaseModel):
    """Validated, immutable options for a LanguageResolver.

    ``fallback_language`` defaults to the first supported language. Setup
    mistakes raise the ConfigurationError subclasses from polyglot.exceptions
    straight out of the validators.
    """

    model_config = ConfigDict(frozen=True)

    languages: tuple[str, ...] = Field(default=(), validate_default=True)
    fallback_language: Optional[str] = None
    callbacks: tuple[Callable[[str], Any], ...] = ()
    pattern: str = DEFAULT_PATTERN
    query_keys: tuple[str, ...] = ()
    language_required_in_uri: bool = False
    language_included_in_routes: bool = False
    persist_language: bool = True
    force_fallback_on_correction: bool = True
    session_key: str = "language"

    @field_validator("languages", mode="before")
    @classmethod
    def _check_languages(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        languages = tuple(value or ())
        if not languages:
            raise NoSupportedLanguagesError()
        seen: set[str] = set()
        for language in languages:
            if not isinstance(language, str) or not language:
                raise ConfigurationError("Supported languages must be non-empty strings", {"language": repr(language)})
            if language in seen:
                raise DuplicateLanguageError(language)
            seen.add(language)
        return languages

    @field_validator("callbacks", mode="before")
    @classmethod
    def _check_callbacks(cls, value: Any) -> tuple[Callable[[str], Any], ...]:
        if value is None:
            return ()
        if callable(value):
            return (value,)
        callbacks = tuple(value)
        for callback in callbacks:
            if not callable(callback):
                raise InvalidCallbackError(callback)
        return callbacks

    @field_validator("pattern", mode="before")
    @classmethod
    def _check_pattern(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise InvalidPatternError(pattern=repr(value))
        pattern = resolve_pattern(value)
        try:
            re.compile(pattern)
        except re.error as exc:
            raise InvalidPatternError(message=f"Invalid language pattern: {exc}", pattern=pattern) from exc
        return pattern

    @field_validator("query_keys", mode="before")
    @classmethod
    def _check_query_keys(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        keys = tuple(value)
        for key in keys:
            if not isinstance(key, str):
                raise InvalidQueryKeyError(key)
        return keys

    @model_validator(mode="after")
    def _check_fallback(self) -> "PolyglotConfig":
        if self.fallback_language is None:
            object.__setattr__(self, "fallback_language", self.languages[0])
        elif self.fallback_language not in self.languages:
            raise UnsupportedLanguageError(self.fallback_language, self.languages)
        return self

    def replace(self, **changes: Any) -> "PolyglotConfig":
        """Return a re-validated copy with ``changes`` applied."""
        return type(self)(**{**dict(self), **changes})

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "PolyglotConfig":
        """Build a config from application settings; ``overrides`` win."""
        options = {
            "languages": settings.supported_languages,
            "fallback_language": settings.fallback_language,
            "pattern": settings.language_pattern,
            "query_keys": settings.query_keys,
            "language_required_in_uri": settings.language_required_in_uri,
            "language_included_in_routes": settings.language_included_in_routes,
            "persist_language": settings.persist_language,
            "force_fallback_on_correction": settings.force_fallback_on_correction,
            "session_key": settings.session_key,
        }
        options.update(overrides)
        return cls(**options)
