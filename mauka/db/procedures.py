"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Mon Oct 06 2025
# SPDX-License-Identifier: MIT
"""

import json
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.orm import Session

# Stored procedures exposed by the hosted database. Only these may be invoked.
PROCEDURES = frozenset(
    {
        "find_nearby_opportunities",
        "get_user_stats",
        "approve_ngo",
        "reject_ngo",
        "create_user_profile_on_signup",
        "create_ngo_application_on_signup",
        "create_missing_user_profile",
        "calculate_distance",
    }
)


def _statement(name: str, params: Dict[str, Any], returns_set: bool):
    """
    Builds a named-notation call, e.g. ``SELECT * FROM f(a => :a, b => :b)``.
    """
    if name not in PROCEDURES:
        raise ValueError(f"Unknown remote procedure '{name}'")
    arguments = ", ".join(f"{key} => :{key}" for key in params)
    if returns_set:
        return text(f"SELECT * FROM {name}({arguments})")
    return text(f"SELECT {name}({arguments})")


def call_rows(db: Session, name: str, **params: Any) -> List[Dict[str, Any]]:
    """
    Invokes a set-returning procedure and returns its rows as dictionaries.
    """
    result = db.execute(_statement(name, params, returns_set=True), params)
    return [dict(row) for row in result.mappings().all()]


def call_scalar(db: Session, name: str, **params: Any) -> Any:
    """
    Invokes a procedure returning a single value. JSON payloads are decoded.
    """
    value = db.execute(_statement(name, params, returns_set=False), params).scalar()
    if isinstance(value, str) and value[:1] in ("{", "["):
        return json.loads(value)
    return value
