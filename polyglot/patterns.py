"""
Language tag patterns

Regular expressions used to find a language tag at the head of a URI path or
query value. Every preset wraps the whole tag in a named ``language`` group;
the region subtag, when the preset has one, is also captured as ``country``.
"""

# ── Subtag fragments ──────────────────────────────────────────────────────────

# ISO 3166-1 alpha-2 country code
ISO3166_1 = "[A-Z]{2}"

# UN M.49 numeric area code
UNM49 = "[0-9]{3}"

# ── Presets ───────────────────────────────────────────────────────────────────

# ISO 639-1, ISO 639-2 and ISO 639-3 (alpha-2 or alpha-3)
ISO639 = r"(?P<language>[a-z]{2,3})"

# ISO 639-1 (alpha-2)
ISO639_1 = r"(?P<language>[a-z]{2})"

# ISO 639-2/B and ISO 639-2/T (alpha-3)
ISO639_2 = r"(?P<language>[a-z]{3})"

# ISO 639-3 (alpha-3)
ISO639_3 = r"(?P<language>[a-z]{3})"

# ISO 639-6 (alpha-4). Withdrawn in 2014, kept for existing configurations.
ISO639_6 = r"(?P<language>[a-z]{4})"

# ISO 639-1 language with an optional ISO 3166-1 country: "fr", "fr-CA"
RFC1766 = rf"(?P<language>[a-z]{{2}}(?:-(?P<country>{ISO3166_1}))?)"

# ISO 639-2 language with an optional ISO 3166-1 country: "msa", "msa-MY"
RFC3066 = rf"(?P<language>[a-z]{{3}}(?:-(?P<country>{ISO3166_1}))?)"

# ISO 639 language with an optional ISO 3166-1 or UN M.49 region: "es-419"
RFC5646 = rf"(?P<language>[a-z]{{2,3}}(?:-(?P<country>{ISO3166_1}|{UNM49}))?)"

DEFAULT_PATTERN = ISO639

PRESETS: dict[str, str] = {
    "ISO639": ISO639,
    "ISO639_1": ISO639_1,
    "ISO639_2": ISO639_2,
    "ISO639_3": ISO639_3,
    "ISO639_6": ISO639_6,
    "RFC1766": RFC1766,
    "RFC3066": RFC3066,
    "RFC5646": RFC5646,
}


def resolve_pattern(pattern: str) -> str:
    """Return the preset registered under ``pattern``, or ``pattern`` itself.

    Lets settings refer to presets by name (``POLYGLOT_LANGUAGE_PATTERN=RFC1766``).
    """
    return PRESETS.get(pattern, pattern)
