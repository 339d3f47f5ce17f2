"""Typed errors raised by the store, identity and policy layers.

Request handlers let these propagate; the app maps them to status codes and an
``{"error": message}`` body.
"""
from __future__ import annotations


class CaseConfError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(CaseConfError):
    status_code = 400
    default_message = "Invalid input"


class InvalidCredentials(CaseConfError):
    status_code = 401
    default_message = "Invalid credentials"


class Unauthorized(CaseConfError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(CaseConfError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(CaseConfError):
    status_code = 404
    default_message = "Not found"


class Internal(CaseConfError):
    status_code = 500
