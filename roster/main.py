"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from roster.api import companies, users
from roster.config import get_settings
from roster.database import get_db, init_db
from roster.errors import FieldValidationError, RosterError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    Path(settings.storage_dir).mkdir(parents=True, exist_ok=True)
    # Honour test overrides of the database dependency
    provide_db = app.dependency_overrides.get(get_db, get_db)
    init_db(provide_db())
    yield


app = FastAPI(
    title="Roster API",
    description="Companies and users backed by a document database",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:8080",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(RosterError)
async def roster_error_handler(request: Request, exc: RosterError) -> JSONResponse:
    """Render domain errors as JSON with their status code."""
    content: dict = {"detail": exc.detail}
    if isinstance(exc, FieldValidationError):
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


# Register routers
app.include_router(companies.router)
app.include_router(users.router)

# Uploaded files are referenced by their /storage/... path
app.mount(
    "/storage",
    StaticFiles(directory=settings.storage_dir, check_dir=False),
    name="storage",
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}


def run() -> None:
    """Serve the application with uvicorn on the configured address."""
    import uvicorn

    uvicorn.run("roster.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
