"""Service-level exceptions. Routes map them to HTTP status codes."""
from __future__ import annotations


class NotFoundError(ValueError):
    pass


class PermissionDeniedError(ValueError):
    pass


class AuthenticationError(ValueError):
    pass
