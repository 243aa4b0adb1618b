"""
Main FastAPI application factory.
create_app() owns the database engine for the lifetime of the application.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from article_service import __version__
from article_service.api.endpoints import router
from article_service.config import Settings
from article_service.database import Base, create_db_engine, create_session_factory


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request body"


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors: 400, never 422."""
    return JSONResponse(status_code=400, content={"error": _format_validation_error(exc)})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the application and its database engine.

    Args:
        settings: Application settings; loaded from the environment if omitted
        engine: Pre-built engine (tests); built from settings.database_url if omitted

    Returns:
        FastAPI: The configured application
    """
    settings = settings or Settings()
    owns_engine = engine is None
    if owns_engine:
        engine = create_db_engine(settings.database_url, settings)

    # Create database tables
    Base.metadata.create_all(bind=engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_engine:
            engine.dispose()

    app = FastAPI(
        title="Article API",
        description="API for storing articles made of ordered, typed paragraphs",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # Include API routes
    app.include_router(router, tags=["articles"])

    @app.get("/")
    def root():
        """Root endpoint with API information."""
        return {
            "message": "Article API",
            "version": __version__,
            "endpoints": {
                "POST /articles": "Create an article or replace its paragraphs by name",
                "GET /articles": "List all articles, newest first",
                "DELETE /articles/{id}": "Delete an article and its paragraphs"
            }
        }

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint; verifies the database answers."""
        try:
            with request.app.state.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as e:
            return JSONResponse(status_code=503, content={"status": "unhealthy", "error": str(e)})
        return {"status": "healthy"}

    return app
