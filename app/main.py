"""
Main application entry point.

This module initializes the FastAPI application and includes all routers.
"""

from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.logging import logger
from app.core.middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from app.db.session import init_db
from app.routers.events import router as events_router
from app.routers.health import router as health_router
from app.routers.reports import router as reports_router
from app.services.notifications import ReportBroadcaster


app = FastAPI(
    title=settings.api.title,
    description=settings.api.description,
    version=settings.api.version,
    debug=settings.debug,
)

# Live report events; handed to the registry through get_notifier
app.state.report_notifier = ReportBroadcaster()

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.frontend_urls,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render errors as {"message": ...} for the frontend toasts."""
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are a 400 with the offending fields named."""
    fields = [
        ".".join(str(part) for part in error["loc"][1:])
        for error in exc.errors()
        if len(error["loc"]) > 1
    ]
    message = f"Invalid fields: {', '.join(fields)}" if fields else "Invalid request body"
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


# Generated report files
reports_dir = Path(settings.reports.directory)
reports_dir.mkdir(parents=True, exist_ok=True)
app.mount(settings.reports.url_path, StaticFiles(directory=reports_dir), name="reports")

# Include routers under the API prefix
app.include_router(
    health_router,
    prefix=f"{settings.api.prefix}/health",
    tags=["health"],
)
app.include_router(
    reports_router,
    prefix=f"{settings.api.prefix}/reports",
    tags=["reports"],
)
app.include_router(
    events_router,
    prefix="/ws",
    tags=["events"],
)


@app.on_event("startup")
async def startup_event():
    """Actions to run on application startup."""
    logger.info("Starting Taxpal API")
    logger.info(f"Environment: {settings.environment.value}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Database URL: {settings.database.url[:20]}...")
    logger.info(f"Reports directory: {reports_dir.resolve()}")

    await init_db()

    logger.info(f"API Docs available at: http://{settings.api.host}:{settings.api.port}/docs")

@app.on_event("shutdown")
async def shutdown_event():
    """Actions to run on application shutdown."""
    logger.info("Shutting down Taxpal API")

@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Taxpal backend is running",
        "version": settings.api.version,
        "docs": "/docs",
    }
