from .language import PolyglotMiddleware, get_current_language
from .logging import StructuredLoggingMiddleware, setup_structured_logging

__all__ = [
    "PolyglotMiddleware",
    "StructuredLoggingMiddleware",
    "get_current_language",
    "setup_structured_logging",
]
