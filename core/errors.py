"""
core/errors.py -- Domain exception hierarchy.

Stores and engines raise these; api/main.py maps every LinkDeckError to the
standard error envelope using the status_code and code carried on the class.
Routes may also raise them directly instead of building an HTTPException.

Layer rule: stdlib only. Imported by auth/, catalog/ and api/.
"""

from __future__ import annotations


class LinkDeckError(Exception):
    """Base class. Subclasses pin the HTTP status and machine-readable code."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, *, code: str | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
        if code is not None:
            self.code = code


class InvalidInputError(LinkDeckError):
    """Malformed request body, parameter or import document."""

    status_code = 400
    code = "validation_error"


class AuthError(LinkDeckError):
    """Missing, malformed, invalid or expired credentials."""

    status_code = 401
    code = "unauthorized"


class NotFoundError(LinkDeckError):
    status_code = 404
    code = "not_found"


class StorageError(LinkDeckError):
    """Unexpected failure from the relational store."""

    status_code = 500
    code = "storage_error"
