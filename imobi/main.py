"""
Imobi Back-office API - FastAPI Application
Main entry point with all routes configured.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from imobi import __version__
from imobi.config import settings
from imobi.database import init_db
from imobi.core.logging import setup_logging
from imobi.core.exceptions import ImobiException, DataAccessError, InvalidTransition
from imobi.schemas.common import HealthResponse

# Import all API routers
from imobi.api import auth, leads, properties, property_types, rentals, dashboard

# Import models to ensure they are registered with SQLModel
from imobi.models import (  # noqa: F401
    Organization, User, Lead,
    PropertyType, Property, PropertyPhoto,
    Rental, RentalInstallment, ActivityLog
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    await init_db()
    logger.info("Imobi API %s started", __version__)
    yield


app = FastAPI(
    title="Imobi API",
    description="Back-office for real-estate agencies: listings, leads pipeline and rentals",
    version=__version__,
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEV_MODE else [settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DataAccessError)
async def data_access_error_handler(request: Request, exc: DataAccessError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message}
    )


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message}
    )


@app.exception_handler(ImobiException)
async def imobi_exception_handler(request: Request, exc: ImobiException):
    logger.warning("Unhandled %s: %s", type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message}
    )


# Include all routers
app.include_router(auth.router)
app.include_router(leads.router)
app.include_router(properties.router)
app.include_router(property_types.router)
app.include_router(rentals.router)
app.include_router(dashboard.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "Imobi API is running",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Detailed health check."""
    return HealthResponse(version=__version__)
