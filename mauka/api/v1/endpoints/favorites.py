# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, Request, Response

from mauka.config import settings
from mauka.schemas import schemas
from mauka.services.favorites import FavoriteStore

router = APIRouter(
    prefix="/favorites",
    tags=["Favorites"],
)


@router.get("/", response_model=schemas.Favorites)
def read_favorites(request: Request):
    store = FavoriteStore(dict(request.cookies), key=settings.favorites_cookie_name)
    return schemas.Favorites(opportunity_ids=store.ids())


@router.post("/{opportunity_id}", response_model=schemas.Favorites)
def toggle_favorite(opportunity_id: str, request: Request, response: Response):
    """
    Adds the opportunity to the favorites, or removes it when it is already there.
    Favorites live in a client cookie only.
    """
    store = FavoriteStore(dict(request.cookies), key=settings.favorites_cookie_name)
    store.toggle(opportunity_id)
    response.set_cookie(
        key=settings.favorites_cookie_name,
        value=store.dumps(),
        max_age=settings.favorites_cookie_max_age,
        samesite="lax",
    )
    return schemas.Favorites(opportunity_ids=store.ids())
