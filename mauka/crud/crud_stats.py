"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Oct 07 2025
# SPDX-License-Identifier: MIT
"""

from typing import Optional

from sqlalchemy.orm import Session

from mauka.db import procedures
from mauka.errors import NotAuthenticated
from mauka.schemas import schemas


def get_user_stats(db: Session, current_user_id: Optional[str], user_id: Optional[str] = None) -> schemas.UserStats:
    """
    Volunteer or NGO counters computed by the backend for the given user
    (defaults to the caller).
    """
    target_user_id = user_id or current_user_id
    if not target_user_id:
        raise NotAuthenticated("No user ID provided")
    data = procedures.call_scalar(db, "get_user_stats", user_id_param=target_user_id)
    return schemas.UserStats.model_validate(data or {})


def calculate_distance(db: Session, lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    return float(procedures.call_scalar(db, "calculate_distance", lat1=lat1, lng1=lng1, lat2=lat2, lng2=lng2))
