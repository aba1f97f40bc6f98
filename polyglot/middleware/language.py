"""
Language Resolution Middleware

Resolves the current language of every request with a LanguageResolver and
applies the outcome:

- ``request.state.language_fallback`` / ``language_preferred`` /
  ``language_path`` / ``language_current`` for downstream handlers
- the language segment is stripped from the path the application routes on
  (unless ``language_included_in_routes``)
- 303 redirects to a URI carrying a supported language when one is required
  or when the request named an unsupported one
- ``Content-Language`` on every response, ``Link: <...>; rel="canonical"``
  when the language came from the client rather than the URI

Register it inside SessionMiddleware (added before it, Starlette runs
middleware LIFO) so the resolved language can be persisted in the session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urljoin

from starlette.datastructures import URL, QueryParams
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from polyglot.config import PolyglotConfig
from polyglot.resolver import LanguageResolver, Resolution
from polyglot.session import SessionProvider, request_session_store

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp, Scope

logger = logging.getLogger(__name__)


def get_route_path(scope: Scope) -> str:
    """Return the request path relative to the application's root path."""
    path = scope.get("path", "")
    root_path = scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        return path[len(root_path):]
    return path


def set_route_path(scope: Scope, route_path: str) -> None:
    """Rewrite the path the application routes on, keeping the root path prefix."""
    root_path = scope.get("root_path", "")
    prefix = root_path if root_path and scope.get("path", "").startswith(root_path) else ""
    scope["path"] = prefix + route_path
    scope["raw_path"] = quote(prefix + route_path).encode("latin-1")


def get_current_language(request: Request) -> str | None:
    """Get the language resolved for this request, if the middleware ran."""
    return getattr(request.state, "language_current", None)


class PolyglotMiddleware(BaseHTTPMiddleware):
    """Resolve the request language and keep the URI consistent with it.

    Accepts a ready ``resolver``, a ``config``, or PolyglotConfig fields as
    keyword options. ``session_provider`` maps a request to a SessionStore;
    the default uses ``request.session`` when SessionMiddleware is installed.
    """

    def __init__(
        self,
        app: ASGIApp,
        resolver: LanguageResolver | None = None,
        config: PolyglotConfig | None = None,
        session_provider: SessionProvider | None = None,
        **options: Any,
    ):
        super().__init__(app)
        self.resolver = resolver or LanguageResolver(config, **options)
        self.session_provider = session_provider or request_session_store

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = get_route_path(request.scope)
        request_url = request.url
        session = self.session_provider(request)

        resolution = self.resolver.resolve(
            path,
            request.query_params,
            request.headers.get("Accept-Language", ""),
            session,
        )

        for name, value in resolution.attributes.items():
            setattr(request.state, name, value)

        if resolution.redirected:
            location = self._location(request, resolution.redirect_to, resolution.drop_query_keys)
            logger.debug(f"Redirecting {request.url.path} to {location}")
            response = RedirectResponse(location, status_code=303)
            response.headers["Content-Language"] = resolution.language
            return response

        if resolution.path != path:
            set_route_path(request.scope, resolution.path)

        response = await call_next(request)

        # Downstream handlers may set these themselves
        response.headers.setdefault("Content-Language", resolution.language)
        if resolution.canonical is not None:
            canonical = self._location(request, resolution.canonical)
            response.headers.setdefault("Link", f'<{canonical}>; rel="canonical"')

        if self.resolver.language_required_in_uri and self._is_redirect(response):
            self._correct_location(request, request_url, response, resolution)

        return response

    def _location(self, request: Request, route_path: str, drop_query_keys: tuple[str, ...] = ()) -> str:
        """Build a root-relative URI for ``route_path``, keeping the query string."""
        location = request.scope.get("root_path", "") + route_path
        params = [(key, value) for key, value in request.query_params.multi_items() if key not in drop_query_keys]
        if params:
            location += f"?{QueryParams(params)}"
        return location

    @staticmethod
    def _is_redirect(response: Response) -> bool:
        return 300 <= response.status_code < 400 and "location" in response.headers

    def _correct_location(self, request: Request, request_url: URL, response: Response, resolution: Resolution) -> None:
        """Put the current language into a redirect issued by a later handler."""
        original = response.headers["location"]
        # Relative locations are resolved against the URL the client requested
        location = URL(urljoin(str(request_url), original))
        if location.hostname != request_url.hostname:
            return

        root_path = request.scope.get("root_path", "")
        path = location.path or "/"
        prefix = ""
        if root_path and path.startswith(root_path):
            prefix = root_path
            path = path[len(root_path):] or "/"

        replaced = self.resolver.replace_language(path, resolution.extracted, resolution.language)
        location = location.replace(path=prefix + replaced)
        if URL(original).netloc:
            corrected = str(location)
        else:
            corrected = location.path
            if location.query:
                corrected += f"?{location.query}"
            if location.fragment:
                corrected += f"#{location.fragment}"

        if corrected != original:
            response.headers["location"] = corrected
            logger.debug(f"Rewrote downstream redirect {original} to {corrected}")
