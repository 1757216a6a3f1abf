"""FastAPI entrypoint for the bookstore service."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.config import Settings, settings
from bookstore.db.connection import close_pool, create_pool
from bookstore.errors import BookstoreError
from bookstore.routers import books
from bookstore.utils.logger import get_logger

logger = get_logger(__name__)


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
    )


async def bookstore_error_handler(request: Request, exc: BookstoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(str(exc.detail), exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Missing or undecodable bodies; payload schema errors are reported by the validator
    return _error_response("Request body must be a JSON document", 400)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response("Internal Server Error", 500)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the API with a pool owned by the application lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.pool = await create_pool(app_settings)
        try:
            yield
        finally:
            await close_pool(app.state.pool)

    app = FastAPI(
        title="Bookstore API",
        version="0.1.0",
        description="Create, read, update and delete books keyed by isbn.",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_exception_handler(BookstoreError, bookstore_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    @app.get("/health", tags=["health"])
    async def healthcheck():
        """Basic health check."""
        return {"status": "ok", "env": app_settings.app_env}

    @app.get("/health/db", tags=["health"])
    async def db_healthcheck(request: Request):
        """Database connectivity health check."""
        try:
            async with request.app.state.pool.acquire() as conn:
                version = await conn.fetchval("SELECT version()")
                book_count = await conn.fetchval("SELECT COUNT(*) FROM books")
        except Exception as e:
            logger.warning("Database health check failed: %s", e)
            return {
                "status": "error",
                "error": str(e),
                "type": type(e).__name__,
            }
        return {
            "status": "connected",
            "database": {
                "version": version.split(",")[0] if version else "unknown",
                "counts": {"books": book_count},
            },
        }

    app.include_router(books.router, prefix="/books", tags=["books"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bookstore.main:app", host=settings.api_host, port=settings.api_port)
