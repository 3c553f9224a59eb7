import logging
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

from eventplanner.api import attendance, auth, events, invitations, users
from eventplanner.core.config import get_settings
from eventplanner.core.database import Database, get_database
from eventplanner.core.errors import classify_database_error

root = logging.getLogger()
if not root.handlers:  # don't double-add in reloads
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(h)

root.setLevel(logging.INFO)

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = Database(settings.database_url)
    if settings.auto_create_schema and db.is_sqlite:
        db.create_all()
        logger.info("SQLite schema ensured at %s", db.url.render_as_string())
    app.state.db = db
    logger.info("Database ready (%s, env=%s)", db.url.get_backend_name(), settings.app_env)
    try:
        yield
    finally:
        db.dispose()
        logger.info("Database connections released")


app = FastAPI(title="Event Planner API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(events.router)
app.include_router(invitations.router)
app.include_router(attendance.router)
app.include_router(users.router)


def _error_field(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _error_field(tuple(err.get("loc", ()))), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


@app.exception_handler(DBAPIError)
async def database_exception_handler(request: Request, exc: DBAPIError):
    error = classify_database_error(exc)
    logger.error(
        "Database error on %s %s -> %s: %s",
        request.method,
        request.url.path,
        error.status_code,
        exc.orig if exc.orig is not None else exc,
    )
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.get("/health", tags=["health"])
def health_check(db: Database = Depends(get_database)):
    """Report service status and confirm database connectivity."""
    database_status = "ok" if db.ping() else "error"
    return {
        "status": "ok",
        "database": database_status,
    }
