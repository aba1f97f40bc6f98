"""
Accept-Language negotiation

Pure functions for picking the best supported language tag from a weighted
Accept-Language header (RFC 9110 section 12.5.4).
"""

from __future__ import annotations

import math
from collections.abc import Sequence


def parse_language_ranges(header: str) -> list[tuple[str, float]]:
    """Split an Accept-Language header into ``(range, q)`` pairs.

    Entries are returned by descending quality; entries with equal quality
    keep their header order. A missing or malformed ``q`` (including nan and
    inf) counts as 1.0, values above 1 are capped at 1.0, and ranges with
    ``q=0`` ("not acceptable") are dropped.

    Args:
        header: Value of the Accept-Language header, e.g.
                "fr-CA,fr;q=0.9,en-US;q=0.8,en;q=0.7".

    Returns:
        List of (language range, quality) tuples.
    """
    weighted: list[tuple[str, float]] = []
    for part in header.split(","):
        tag, *params = [piece.strip() for piece in part.split(";")]
        if not tag:
            continue
        q = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() != "q":
                continue
            try:
                q = float(value.strip())
            except ValueError:
                q = 1.0
            if not math.isfinite(q):
                q = 1.0
            q = min(q, 1.0)
        if q <= 0:
            continue
        weighted.append((tag, q))

    # Stable sort preserves header order at equal quality
    weighted.sort(key=lambda item: item[1], reverse=True)
    return weighted


def parse_accept_language(header: str, supported: Sequence[str]) -> str | None:
    """Parse an Accept-Language header and return the best matching locale.

    Algorithm:
    1. Split header into ranges ordered by q-value.
    2. For each range, try an exact (case-insensitive) match in ``supported``,
       then a base-language match ("fr-CA" → "fr"), then a supported tag that
       specializes the range ("fr" → "fr-CA").
    3. A ``*`` range accepts the first supported language.

    Args:
        header:    Value of the Accept-Language HTTP header.
        supported: Ordered list of language tags the application supports.

    Returns:
        The best matching tag exactly as written in ``supported``, or None.
    """
    if not header or not supported:
        return None

    supported_lower = [tag.lower() for tag in supported]

    for tag, _ in parse_language_ranges(header):
        tag_lower = tag.lower()
        if tag_lower == "*":
            return supported[0]
        if tag_lower in supported_lower:
            return supported[supported_lower.index(tag_lower)]
        base = tag_lower.split("-")[0]
        if base in supported_lower:
            return supported[supported_lower.index(base)]
        for index, candidate in enumerate(supported_lower):
            if candidate.split("-")[0] == base:
                return supported[index]

    return None
