"""
Session storage for the resolved language

The resolver reads and writes a single slot in the client's session. It never
touches a global: a SessionStore is handed to it for each request. Stores are
expected to be scoped to one client already (Starlette's SessionMiddleware
keeps the session in a signed cookie), so no locking happens here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping
from typing import Any, Protocol, runtime_checkable

from starlette.requests import Request

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionStore(Protocol):
    """Key-value store scoped to the current client."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MappingSessionStore:
    """SessionStore backed by any mutable mapping, e.g. ``request.session``."""

    def __init__(self, data: MutableMapping[str, Any] | None = None):
        self._data = data if data is not None else {}

    def get(self, key: str) -> str | None:
        value = self._data.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


SessionProvider = Callable[[Request], "SessionStore | None"]


def request_session_store(request: Request) -> MappingSessionStore | None:
    """Return a store over ``request.session``, or None without a session middleware."""
    if "session" not in request.scope:
        logger.debug("No session middleware installed; language will not be persisted")
        return None
    return MappingSessionStore(request.session)
