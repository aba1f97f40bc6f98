"""
Pytest configuration and fixtures for Polyglot tests
"""

import os
import sys

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from polyglot.middleware.language import PolyglotMiddleware  # noqa: E402
from polyglot.session import MappingSessionStore  # noqa: E402

LANGUAGES = ["en", "fr", "es"]


def build_app(**options) -> FastAPI:
    """FastAPI app with sessions, language resolution and a few redirecting routes."""
    options.setdefault("languages", LANGUAGES)

    app = FastAPI()
    app.add_middleware(PolyglotMiddleware, **options)
    app.add_middleware(SessionMiddleware, secret_key="test-secret-key")

    @app.get("/redirect-me")
    async def redirect_me():
        return RedirectResponse("/target", status_code=307)

    @app.get("/redirect-absolute")
    async def redirect_absolute():
        return RedirectResponse("http://testserver/target", status_code=302)

    @app.get("/redirect-relative")
    async def redirect_relative():
        return RedirectResponse("target", status_code=307)

    @app.get("/redirect-query")
    async def redirect_query():
        return RedirectResponse("?page=2", status_code=303)

    @app.get("/redirect-external")
    async def redirect_external():
        return RedirectResponse("https://example.org/elsewhere", status_code=302)

    @app.get("/custom-language")
    async def custom_language():
        return JSONResponse({"ok": True}, headers={"Content-Language": "x-custom"})

    @app.get("/{path:path}")
    async def echo(request: Request, path: str):
        state = request.state
        return {
            "path": request.scope["path"],
            "fallback": getattr(state, "language_fallback", None),
            "preferred": getattr(state, "language_preferred", None),
            "path_language": getattr(state, "language_path", None),
            "current": getattr(state, "language_current", None),
        }

    return app


@pytest.fixture
def make_client():
    """Factory returning a TestClient that does not follow redirects."""

    def _make(**options) -> TestClient:
        return TestClient(build_app(**options), follow_redirects=False)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def session():
    return MappingSessionStore()
