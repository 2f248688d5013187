"""
Exception taxonomy for the property resolver and booking workflows.

These exceptions never reach an HTTP client directly. Services convert them
into structured result objects and routes map those onto status codes.
"""

from __future__ import annotations


class VillaBookingsError(Exception):
    """Base class for all service-level errors."""

    status_code = 500

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(VillaBookingsError):
    """Malformed or missing input, detected before any store I/O."""

    status_code = 400


class NotFoundError(VillaBookingsError):
    """The target entity is absent from every searched collection."""

    status_code = 404


class ConflictError(VillaBookingsError):
    """A uniqueness or sync_version precondition was violated."""

    status_code = 409


class TransientStoreError(VillaBookingsError):
    """The underlying store call raised."""

    status_code = 500
