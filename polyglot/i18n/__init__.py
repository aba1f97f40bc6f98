"""
i18n package

Accept-Language header parsing and negotiation against the supported
language list.
"""

from .locale import parse_accept_language, parse_language_ranges

__all__ = [
    "parse_accept_language",
    "parse_language_ranges",
]
