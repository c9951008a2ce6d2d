"""
Translate application errors into HTTP errors
"""
from fastapi import HTTPException

from chanakya.exceptions import (
    AuthorizationError,
    ChanakyaError,
    NotFoundError,
    PersistenceError,
    ScoreOutOfRangeError,
    ValidationError,
)


def http_error(error: ChanakyaError) -> HTTPException:
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail={"errors": error.errors})
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=f"{error.entity} not found")
    if isinstance(error, AuthorizationError):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, ScoreOutOfRangeError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, PersistenceError):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
