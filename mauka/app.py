# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mauka.api.v1.endpoints import (
    admin,
    applications,
    contact,
    dashboard,
    favorites,
    location,
    ngo,
    opportunities,
    profiles,
    signup,
)
from mauka.config import settings
from mauka.db.database import get_db
from mauka.errors import (
    GeocodingNotConfigured,
    InvalidTransition,
    MaukaError,
    NotAllowed,
    NotAuthenticated,
    NotFound,
    RemoteConflict,
    RemoteProcedureFailure,
    StorageUploadFailed,
    ValidationFailed,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotAuthenticated: status.HTTP_401_UNAUTHORIZED,
    NotAllowed: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidTransition: status.HTTP_409_CONFLICT,
    RemoteConflict: status.HTTP_409_CONFLICT,
    RemoteProcedureFailure: status.HTTP_400_BAD_REQUEST,
    ValidationFailed: status.HTTP_422_UNPROCESSABLE_ENTITY,
    GeocodingNotConfigured: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageUploadFailed: status.HTTP_502_BAD_GATEWAY,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Mauka API starting up. The database schema is managed by the hosted backend.")
    yield
    logger.info("Mauka API shutting down.")


app = FastAPI(
    title="Mauka API",
    description="API for connecting volunteers with verified NGOs.",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(MaukaError)
async def mauka_error_handler(request: Request, exc: MaukaError):
    status_code = next(
        (code for error_class, code in ERROR_STATUS.items() if isinstance(exc, error_class)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"detail": exc.message}, headers=headers)


@app.get("/")
async def read_root():
    return {"message": "Welcome to Mauka API!"}


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection failed: {e}",
        )
    return {"status": "ok", "database_connection": "successful"}


app.include_router(opportunities.router, prefix="/api/v1")
app.include_router(applications.router, prefix="/api/v1")
app.include_router(favorites.router, prefix="/api/v1")
app.include_router(profiles.router, prefix="/api/v1")
app.include_router(location.router, prefix="/api/v1")
app.include_router(ngo.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")
app.include_router(contact.router, prefix="/api/v1")
app.include_router(signup.router, prefix="/api/v1")
