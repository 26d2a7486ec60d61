"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 08 2025
# SPDX-License-Identifier: MIT
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.crud import crud_profile
from mauka.db.database import get_db
from mauka.db.models import UserProfile
from mauka.errors import NotAllowed, NotAuthenticated, RemoteProcedureFailure

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """
    Who is calling: the authenticated user (if any) and their profile (if it could be loaded).
    Built once per request by ``get_session``; nothing else mutates it.
    """

    user_id: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[UserProfile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def user_type(self) -> Optional[str]:
        return self.profile.user_type if self.profile is not None else None


bearer_scheme = HTTPBearer(auto_error=False)


def verify_token(token: str, credentials_exception: HTTPException) -> dict:
    """
    Verifies an access token issued by the hosted auth service and returns its claims.
    """
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError:
        raise credentials_exception
    if payload.get("sub") is None:
        raise credentials_exception
    return payload


def load_profile(db: Session, user_id: str) -> Optional[UserProfile]:
    """
    Loads the caller's profile, asking the backend to create it when it is missing.
    A profile that cannot be loaded or created leaves the session without one.
    """
    try:
        profile = crud_profile.get_profile(db, user_id)
        if profile is not None:
            return profile
        crud_profile.create_missing_profile(db, user_id)
        return crud_profile.get_profile(db, user_id)
    except (RemoteProcedureFailure, SQLAlchemyError) as error:
        db.rollback()
        logger.error("Could not load or create profile for user %s: %s", user_id, error)
        return None


def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> SessionContext:
    """
    FastAPI dependency resolving the session of the caller. Anonymous callers get an empty session.
    """
    if credentials is None:
        return SessionContext()

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = verify_token(credentials.credentials, credentials_exception)
    user_id = payload["sub"]
    return SessionContext(user_id=user_id, email=payload.get("email"), profile=load_profile(db, user_id))


def get_authenticated_session(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.is_authenticated:
        raise NotAuthenticated()
    return session


def get_ngo_session(session: SessionContext = Depends(get_authenticated_session)) -> SessionContext:
    if session.user_type != "ngo":
        raise NotAllowed("NGO access required")
    return session


def get_admin_session(session: SessionContext = Depends(get_authenticated_session)) -> SessionContext:
    if session.user_type != "admin":
        raise NotAllowed("Admin access required")
    return session


def get_client_ip(request: Request) -> Optional[str]:
    """
    Address of the browser behind the request, honouring the first X-Forwarded-For hop.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None
