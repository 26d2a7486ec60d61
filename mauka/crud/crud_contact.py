# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from mauka.db import models
from mauka.schemas import schemas


def create_message(db: Session, message: schemas.ContactMessageCreate):
    db_message = models.ContactMessage(**message.model_dump(), status="unread")
    db.add(db_message)
    db.commit()
    db.refresh(db_message)
    return db_message


def get_messages(db: Session, skip: int = 0, limit: int = 500):
    return (
        db.query(models.ContactMessage)
        .order_by(models.ContactMessage.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_messages(db: Session, status: Optional[str] = None) -> int:
    query = db.query(func.count(models.ContactMessage.id))
    if status:
        query = query.filter(models.ContactMessage.status == status)
    return query.scalar() or 0


def mark_as_read(db: Session, message_id: str):
    db_message = db.query(models.ContactMessage).filter(models.ContactMessage.id == message_id).first()
    if db_message is None:
        return None
    db_message.status = "read"
    db.commit()
    db.refresh(db_message)
    return db_message
