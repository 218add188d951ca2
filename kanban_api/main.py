import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from kanban_api import __version__
from kanban_api.config import Settings, load_settings
from kanban_api.database import build_session_factory, check_connection, create_db_engine, init_db
from kanban_api.errors import APIError
from kanban_api.logging_setup import setup_logging
from kanban_api.routers import auth, business_units, health, tasks, users

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # drop the "body"/"path" prefix FastAPI puts in front of the field name
    loc = [str(part) for part in first.get("loc", ())[1:]]
    msg = first.get("msg", "invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return _error(404, "Route not found")
        return _error(exc.status_code, str(exc.detail))

    # Generic error handler to return JSON errors for unexpected exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its settings, engine and session factory.

    Fails (raises) when the configuration is unusable or the database cannot
    be reached, so a broken deployment never starts serving.
    """
    if settings is None:
        settings = load_settings()
    setup_logging(settings.log_level)

    engine = create_db_engine(settings.database_url)
    check_connection(engine)
    init_db(engine)

    app = FastAPI(title="Kanban API", version=__version__)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(tasks.router)
    app.include_router(business_units.router)

    _install_error_handlers(app)
    logger.info("Kanban API %s ready (%s)", __version__, settings.environment)
    return app
