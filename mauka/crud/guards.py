# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional

from mauka.errors import NotAuthenticated


def require_user(user_id: Optional[str]) -> str:
    """
    Returns the caller's id, or raises NotAuthenticated when there is no session.
    """
    if not user_id:
        raise NotAuthenticated()
    return user_id
