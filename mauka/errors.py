# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional


class MaukaError(Exception):
    """Base class for every error the service raises on purpose."""

    message = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class NotAuthenticated(MaukaError):
    message = "Please sign in to continue"


class NotAllowed(MaukaError):
    message = "You are not allowed to perform this action"


class NotFound(MaukaError):
    message = "Not found"


class ValidationFailed(MaukaError):
    message = "Invalid input"


class RemoteConflict(MaukaError):
    message = "The backend rejected a duplicate record"


class AlreadyApplied(RemoteConflict):
    message = "You have already applied to this opportunity"


class InvalidTransition(MaukaError):
    message = "This status change is not permitted"


class RemoteProcedureFailure(MaukaError):
    """
    A remote procedure answered with ``success = false`` even though the call itself went through.
    """

    def __init__(self, procedure: str, message: Optional[str] = None):
        self.procedure = procedure
        super().__init__(message or "Unknown error")


class PartialDataUnavailable(MaukaError):
    """
    One of several independent fetches failed; only its widget is affected.
    """

    def __init__(self, widget: str, cause: Optional[BaseException] = None):
        self.widget = widget
        self.cause = cause
        super().__init__(f"Could not load {widget}: {cause}")


class LocationUnavailable(MaukaError):
    message = "Every location strategy failed"


class GeocodingNotConfigured(MaukaError):
    message = "Mapbox access token not configured"


class StorageUploadFailed(MaukaError):
    message = "Could not upload the file"
