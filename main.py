import logging

import uvicorn
from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from polyglot.config import PolyglotConfig, Settings, settings
from polyglot.middleware import (
    PolyglotMiddleware,
    StructuredLoggingMiddleware,
    get_current_language,
    setup_structured_logging,
)

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Create the demo application with language resolution enabled."""
    setup_structured_logging(app_settings.log_level, json_format=app_settings.log_json)

    app = FastAPI(
        title=app_settings.app_name,
        description="Per-request language resolution",
        debug=app_settings.debug,
        version=app_settings.app_version,
    )

    # Starlette runs middleware LIFO: logging → session → language
    app.add_middleware(PolyglotMiddleware, config=PolyglotConfig.from_settings(app_settings))
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret_key,
        session_cookie=app_settings.session_cookie,
    )
    app.add_middleware(StructuredLoggingMiddleware)

    @app.get("/", tags=["Root"])
    async def root(request: Request):
        return {"message": "Welcome", "language": get_current_language(request)}

    @app.get("/{path:path}", tags=["Echo"])
    async def echo(request: Request, path: str):
        return {
            "path": request.scope["path"],
            "language": get_current_language(request),
            "fallback": request.state.language_fallback,
            "preferred": getattr(request.state, "language_preferred", None),
        }

    if app_settings.debug:
        logger.info(f"Running in {app_settings.environment} mode")
        logging.getLogger("polyglot").setLevel(logging.DEBUG)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
