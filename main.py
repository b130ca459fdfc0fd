import logging
import subprocess
import sys
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

import click
import uvicorn
from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.decorator import AppException, ServiceUnavailable
from app.core.init import initialize_application
from app.core.limiter import custom_rate_limit_exceeded_handler, limiter
from app.core.schedular import (
    auto_submit_expired_sections,
    shutdown_scheduler,
    start_scheduler,
)
from app.models import *
from app.routers import routes

BASE_DIR = Path(__file__).parent
LOG_PATH = BASE_DIR / settings.log_file
LOG_PATH.parent.mkdir(parents=True, exist_ok=True)

ENVIRONMENT = "production" if settings.production else "development"


# ============================================================================
# Logging
# ============================================================================
def setup_logging():
    """Log to stdout and to the configured log file."""
    if settings.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(LOG_PATH, mode="a", encoding="utf-8"),
        ],
        force=True,
    )

    for noisy in ("sqlalchemy.engine", "uvicorn.access", "apscheduler"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


# ============================================================================
# Lifespan
# ============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, seed the admin account and run the expiry sweep."""
    logger.info(f"Starting {settings.app_name} {settings.app_version} ({ENVIRONMENT})")

    try:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            initialize_application(db)
        finally:
            db.close()
    except Exception as e:
        logger.error(f"✗ Failed during startup: {e}", exc_info=True)
        raise

    scheduler = start_scheduler() if settings.auto_submit_enabled else None
    logger.info("✓ Application startup completed")

    yield

    shutdown_scheduler(scheduler)
    logger.info("✓ Application shutdown completed")


app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    debug=settings.debug,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every response with a request id and its processing time."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{time.perf_counter() - started:.4f}"
    return response


# ============================================================================
# Error responses: {"error", "type", "code"}
# ============================================================================
def _error(status_code: int, message, error_type: str, code: str, **extra):
    headers = extra.pop("headers", None)
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "type": error_type, "code": code, **extra},
        headers=headers,
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(f"{exc.error_type} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.error_type} ({exc.code}) on {request.url.path}: {exc.message}")

    headers = {"Retry-After": "1"} if isinstance(exc, ServiceUnavailable) else None
    return _error(exc.status_code, exc.message, exc.error_type, exc.code, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    # ctx may carry the raw exception object
    details = [
        {k: v for k, v in error.items() if k != "ctx"} if isinstance(error, dict) else {"error": str(error)}
        for error in exc.errors()
    ]
    return _error(422, "Validation error", "validation_error", "invalid_request", details=details)


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}", exc_info=True)
    return _error(500, "Database error occurred", "database_error", "database_error")


app.add_exception_handler(RateLimitExceeded, custom_rate_limit_exceeded_handler)


@app.get("/")
async def root():
    return {
        "app_name": settings.app_name,
        "version": settings.app_version,
        "status": "healthy",
        "environment": ENVIRONMENT,
    }


@app.get("/health")
@limiter.limit("10/minute")
async def health_check(request: Request):
    """Database reachability and sweep status."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        database = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        database = "unhealthy"

    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "timestamp": time.time(),
        "environment": ENVIRONMENT,
        "database": database,
        "auto_submit": settings.auto_submit_enabled,
    }


for router in routes:
    app.include_router(router)


# ============================================================================
# CLI
# ============================================================================
GUNICORN_OPTIONS = {
    "--worker-class": "uvicorn.workers.UvicornWorker",
    "--access-logfile": "-",
    "--error-logfile": "-",
    "--log-level": "info",
    "--timeout": "120",
    "--graceful-timeout": "30",
    "--keep-alive": "5",
}


@click.group()
def cli():
    """Exam session service management CLI."""


def run_migrations():
    command.upgrade(Config(str(BASE_DIR / "alembic.ini")), "head")
    logger.info("✓ Database migrated to head")


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True)
@click.option("--reload", is_flag=True, help="Restart on code changes")
def dev(host: str, port: int, reload: bool):
    """Serve with Uvicorn for local development."""
    logger.info(f"Development server on {host}:{port} (reload={reload})")
    uvicorn.run("main:app", host=host, port=port, reload=reload, log_level="debug")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True)
@click.option("--workers", default=4, show_default=True)
def prod(host: str, port: int, workers: int):
    """Migrate the database, then serve with Gunicorn."""
    run_migrations()

    cmd = ["gunicorn", "main:app", "--workers", str(workers), "--bind", f"{host}:{port}"]
    for option, value in GUNICORN_OPTIONS.items():
        cmd += [option, value]

    logger.info(f"Production server on {host}:{port} with {workers} workers")
    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError:
        raise click.ClickException("Gunicorn is not installed")
    except subprocess.CalledProcessError as e:
        raise click.ClickException(f"Gunicorn exited with status {e.returncode}")


@cli.command()
def sweep():
    """Submit every expired section once and exit."""
    Base.metadata.create_all(bind=engine)
    submitted = auto_submit_expired_sections()
    click.echo(f"Auto-submitted sections: {submitted}")


@cli.command()
def info():
    """Show the effective configuration."""
    click.echo(f"{settings.app_name} {settings.app_version} ({ENVIRONMENT})")
    click.echo(f"Database: {engine.url.render_as_string(hide_password=True)}")
    click.echo(f"Cache: {settings.cache_driver}")
    click.echo(
        f"Auto-submit: {'on' if settings.auto_submit_enabled else 'off'}, "
        f"every {settings.auto_submit_interval_seconds}s"
    )
    click.echo(f"Log file: {LOG_PATH}")


if __name__ == "__main__":
    cli()
