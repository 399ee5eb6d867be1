"""
Application entry point.

This module creates the FastAPI app, connects the read-only catalog
database on startup, and wires together the API routers. Every error
response is JSON of the form {"error": "..."}.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.homepage import router as homepage_router
from api.shows import router as shows_router
from core.config import API_PREFIX, CORS_ALLOW_ORIGINS, DB_PATH
from db.connection import Database, ReconnectPolicy
from db.errors import DatabaseUnavailable, QueryError

SERVICE_UNAVAILABLE_MESSAGE = "Database service unavailable. Please try again shortly."


def create_app(database=None, reconnect_policy=None):
    """
    Build the application around an injected database handle.

    Tests pass their own Database and a ReconnectPolicy without delay.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Connect to the catalog database at application startup.

        A missing database does not stop the server; requests answer 503
        until a reconnect succeeds.
        """
        try:
            app.state.database.connect()
        except DatabaseUnavailable as e:
            print(f"[ERROR] {e}")

        yield

        app.state.database.close()

    app = FastAPI(title="Sensory Screen Guide API", lifespan=lifespan)

    app.state.database = database or Database(DB_PATH)
    app.state.reconnect_policy = reconnect_policy or ReconnectPolicy()

    @app.middleware("http")
    async def ensure_database(request: Request, call_next):
        print(f"[INFO] {request.method} {request.url.path}")

        path = request.url.path
        if path == API_PREFIX or path.startswith(API_PREFIX + "/"):
            policy = request.app.state.reconnect_policy
            if not await policy.ensure_connected(request.app.state.database):
                return JSONResponse(
                    status_code=503,
                    content={"error": SERVICE_UNAVAILABLE_MESSAGE},
                )

        return await call_next(request)

    # Outermost, so the early 503 above carries CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
    )

    @app.exception_handler(DatabaseUnavailable)
    async def database_unavailable_handler(request: Request, exc: DatabaseUnavailable):
        print(f"[ERROR] {exc}")
        request.app.state.database.close()
        return JSONResponse(status_code=503, content={"error": SERVICE_UNAVAILABLE_MESSAGE})

    @app.exception_handler(QueryError)
    async def query_error_handler(request: Request, exc: QueryError):
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"API endpoint not found: {request.method} {request.url.path}"
        else:
            message = str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request parameters."})

    @app.get(API_PREFIX)
    def api_status():
        return {"message": "Sensory Screen Guide API is running!"}

    app.include_router(shows_router, prefix=API_PREFIX)
    app.include_router(homepage_router, prefix=API_PREFIX)

    return app


app = create_app()
