from __future__ import annotations

import logging
import sqlite3

from fastapi import HTTPException

from ..errors import AuthenticationError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


def to_http_error(e: Exception) -> HTTPException:
    """Map a service exception to the HTTP status the UI expects."""
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, AuthenticationError):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, (ValueError, sqlite3.IntegrityError)):
        return HTTPException(status_code=400, detail=str(e))
    logger.exception("unhandled error", exc_info=e)
    return HTTPException(status_code=500, detail=str(e))
