# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import logging
from typing import Optional

import requests

from mauka.config import settings
from mauka.errors import StorageUploadFailed

logger = logging.getLogger(__name__)

UPLOAD_TIMEOUT_SECONDS = 30


def avatar_path(user_id: str, filename: Optional[str]) -> str:
    """
    Object path of a user's avatar. One object per user, named after the uploaded file's extension.
    """
    extension = (filename or "").rsplit(".", 1)[-1].lower() if filename and "." in filename else "png"
    return f"avatars/{user_id}.{extension}"


def public_url(path: str, bucket: Optional[str] = None) -> str:
    bucket = bucket or settings.avatars_bucket
    return f"{settings.supabase_url.rstrip('/')}/storage/v1/object/public/{bucket}/{path}"


def upload_avatar(user_id: str, filename: Optional[str], content: bytes, content_type: Optional[str]) -> str:
    """
    Uploads (or replaces) the avatar in the storage bucket and returns its public URL.
    """
    path = avatar_path(user_id, filename)
    url = f"{settings.supabase_url.rstrip('/')}/storage/v1/object/{settings.avatars_bucket}/{path}"
    headers = {
        "Authorization": f"Bearer {settings.supabase_service_key}",
        "apikey": settings.supabase_service_key,
        "Content-Type": content_type or "application/octet-stream",
        "x-upsert": "true",
    }
    try:
        response = requests.post(url, data=content, headers=headers, timeout=UPLOAD_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.RequestException as error:
        logger.error("Error uploading avatar for user %s: %s", user_id, error)
        raise StorageUploadFailed() from error
    return public_url(path)
