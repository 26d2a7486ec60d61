# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mauka.crud import crud_contact
from mauka.db.database import get_db
from mauka.schemas import schemas

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("/", response_model=schemas.ContactMessage, status_code=status.HTTP_201_CREATED)
def send_contact_message(message: schemas.ContactMessageCreate, db: Session = Depends(get_db)):
    """
    Stores a message from the public contact form. No sign-in required.
    """
    return crud_contact.create_message(db, message)
