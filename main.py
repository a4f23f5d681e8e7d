"""
Eventra scheduling poll - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app.core.exceptions import EventraError, DatabaseError, ValidationError
from app.api import routes_events, routes_participant, routes_public
from app.services.repositories import use_firestore
from app.utils.responses import error_response

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    401: "unauthorized",
    404: "not_found",
    405: "method_not_allowed",
    429: "rate_limited",
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if not use_firestore():
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Eventra",
    description="Scheduling poll backend: events, time slots, availability and results",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(EventraError)
async def eventra_error_handler(request: Request, exc: EventraError):
    """Map domain errors onto the standard error envelope"""
    if isinstance(exc, DatabaseError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.error_code}): {exc.message}")
    return error_response(
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        status_code=exc.status_code
    )

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters use the same envelope as domain validation"""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        details.append(f"{location}: {error['msg']}" if location else error["msg"])
    logger.info(f"{request.method} {request.url.path} rejected (validation_error): {details}")
    return error_response(
        message="Validation failed",
        error_code=ValidationError.error_code,
        details=details,
        status_code=ValidationError.status_code
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """API key, rate limit and routing errors"""
    response = error_response(
        message=str(exc.detail),
        error_code=HTTP_ERROR_CODES.get(exc.status_code, "error"),
        status_code=exc.status_code
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_participant.router, tags=["participant"])
app.include_router(routes_events.router, tags=["events"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
