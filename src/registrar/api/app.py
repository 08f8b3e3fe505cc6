"""
Main FastAPI application for Registrar backend
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..config import settings
from ..database import Database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug, log_level=settings.log_level)
logger = get_logger(__name__)

LANDING_PAGE = """\
<!DOCTYPE html>
<html>
  <head><title>Student Management System</title></head>
  <body>
    <h1>Student Management System</h1>
    <p>GraphQL endpoint: <a href="/graphql">/graphql</a></p>
    <p>Documentation: <a href="/docs/">/docs</a></p>
  </body>
</html>
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    database: Database = app.state.database

    # Startup
    logger.info("Starting Registrar API...")
    await database.connect()

    ok, error = await database.check_connection()
    if not ok:
        # Keep serving; requests that need the store will fail individually
        logger.error("Database unreachable at startup", error=error)
    elif settings.create_schema_on_startup:
        try:
            await database.create_schema()
        except Exception as e:
            logger.error("Failed to create database schema", error=str(e))

    yield

    # Shutdown
    logger.info("Shutting down Registrar API...")
    await database.close()


def create_app(database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database: Store handle to serve from; a new one for the configured
            database URL is created when omitted.
    """
    app = FastAPI(
        title="Registrar API",
        description="GraphQL API for student and department records",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
        # /docs is the static documentation directory
        docs_url=None,
        redoc_url=None,
    )
    app.state.database = database or Database(settings.database_url)

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=HTMLResponse)
    async def index():  # pyright: ignore [reportUnusedFunction]
        return LANDING_PAGE

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    try:
        from ..graphql.schema import create_graphql_router, validate_schema

        logger.info("Validating GraphQL schema...")
        validate_schema()

        app.include_router(create_graphql_router(), prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
    except Exception as e:  # pragma: no cover
        logger.error("Failed to initialize GraphQL endpoint", error=str(e))
        raise

    docs_dir = Path(settings.docs_dir)
    if docs_dir.is_dir():
        app.mount("/docs", StaticFiles(directory=docs_dir, html=True), name="docs")
    else:
        logger.warning("Documentation directory not found, /docs disabled", docs_dir=str(docs_dir))

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "registrar.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
