# classroom_api/main.py - Application entry point, middleware and error envelopes
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
import traceback
import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from classroom_api.core.config import settings
from classroom_api.core.db import get_db, get_engine
from classroom_api.core.errors import ServiceError
from classroom_api.core.request_guard import build_request_guard
from classroom_api.models import Base
from classroom_api.schemas.common import ErrorResponse
from classroom_api.api.routers import classes, subjects, users


# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {settings.API_TITLE}...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Database: {settings.database_location}")

    engine = get_engine()

    # Migrations own the schema outside development
    if settings.is_development:
        logger.info("Creating database tables...")
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Error creating tables: {e}")

    yield

    logger.info(f"Shutting down {settings.API_TITLE}...")


app = FastAPI(
    title=settings.API_TITLE,
    description="Users, departments, subjects, classes and enrollments",
    version=settings.API_VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan
)

app.state.request_guard = build_request_guard(settings)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.middleware("http")
async def guard_requests(request: Request, call_next):
    """Reject requests the configured guard does not allow"""
    if not request.app.state.request_guard.is_allowed(request):
        return error_response(status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests")
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and processing time"""
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Error processing {request.method} {request.url.path}: {str(e)}")
        raise

    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)")
    return response


app.add_middleware(CORSMiddleware, **settings.get_cors_config())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request parameters")


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return error_response(exc.status_code, "Internal server error")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions without leaking details to the client"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}")
    logger.error(traceback.format_exc())
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.get("/health")
async def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database = "unhealthy"

    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "environment": settings.ENV,
        "version": settings.API_VERSION,
        "database": database,
    }


logger.info("Registering API routers...")
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(subjects.router, prefix="/subjects", tags=["Subjects"])
app.include_router(classes.router, prefix="/classes", tags=["Classes"])


@app.get("/")
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs_url": "/docs" if settings.is_development else None,
    }


def run():
    """Serve the app with uvicorn using the configured host and port"""
    import uvicorn

    uvicorn.run(
        "classroom_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
