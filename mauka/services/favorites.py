# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import json
import logging
from typing import List, MutableMapping

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favoriteOpportunities"


class FavoriteStore:
    """
    Favorite opportunity ids kept on the client, stored as a JSON array under a single key.

    ``storage`` is any string mapping owned by the client (the request cookies,
    for instance). Favorites never reach the backend and do not depend on the
    user being signed in.
    """

    def __init__(self, storage: MutableMapping[str, str], key: str = FAVORITES_KEY):
        self.storage = storage
        self.key = key
        self._ids = self._load()

    def _load(self) -> List[str]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            ids = json.loads(raw)
        except ValueError as error:
            logger.error("Error loading favorites: %s", error)
            return []
        if not isinstance(ids, list):
            logger.error("Error loading favorites: expected a list, got %s", type(ids).__name__)
            return []
        return list(dict.fromkeys(str(item) for item in ids))

    def _save(self):
        self.storage[self.key] = self.dumps()

    def dumps(self) -> str:
        return json.dumps(self._ids, separators=(",", ":"))

    def ids(self) -> List[str]:
        return list(self._ids)

    def __contains__(self, opportunity_id: str) -> bool:
        return opportunity_id in self._ids

    def toggle(self, opportunity_id: str) -> bool:
        """
        Adds or removes the id and persists the set. Returns True when the id is now a favorite.
        """
        if opportunity_id in self._ids:
            self._ids.remove(opportunity_id)
            is_favorite = False
        else:
            self._ids.append(opportunity_id)
            is_favorite = True
        self._save()
        return is_favorite
