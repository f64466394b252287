"""
Centralized exception handling for the Distribution API.

This module provides:
- Base APIException class extending FastAPI's HTTPException.
- Domain-specific exceptions (not found, conflicts, persistence failures)
  with appropriate status codes and headers.
- Utility functions for formatting DB errors, logging, and routing exceptions.

Usage:
    - Raise specific exceptions in lifecycle services or route handlers.
    - Use `handle()` to normalize raw exceptions (DB, Redis, Pydantic) into API-friendly responses.
"""

from traceback import format_exception
from logging import getLogger
from fastapi import status, HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError
from psycopg2.errorcodes import UNIQUE_VIOLATION
from pydantic import ValidationError
from redis.exceptions import RedisError


# ---------------------------------------------------------------------------
# Utility functions
# ---------------------------------------------------------------------------
def formatIntegrityError(e: IntegrityError) -> str:
    """
    Format a database integrity error into a user-friendly message.
    """
    diag = getattr(e.orig, "diag", None)
    if diag is None or diag.message_detail is None:
        return str(e.orig)
    errorMessage: str = diag.message_detail
    errorMessage = errorMessage.translate({ord(i): None for i in '\\"\\.\\(\\)'})
    errorMessage = errorMessage.replace("Key ", "For ")
    errorMessage = errorMessage.replace("=", " value ")
    return errorMessage


def isUniqueViolation(e: IntegrityError) -> bool:
    diag = getattr(e.orig, "diag", None)
    if diag is not None:
        return diag.sqlstate == UNIQUE_VIOLATION
    return "UNIQUE" in str(e.orig).upper()


def logException(e: Exception) -> None:
    """Log an exception with traceback using Uvicorn's error logger."""
    detail = str(format_exception(type(e), e, e.__traceback__))
    logger = getLogger("uvicorn.error")
    logger.error(detail)


# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------
class APIException(HTTPException):
    """
    Base class for all application-specific exceptions.

    Provides default handling of status_code, detail, and headers.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    detail = None
    headers = None

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("status_code", self.status_code)
        kwargs.setdefault("detail", self.detail)
        kwargs.setdefault("headers", self.headers)
        super().__init__(*args, **kwargs)


# ---------------------------------------------------------------------------
# Exception handling entrypoint
# ---------------------------------------------------------------------------
def handle(e: Exception):
    """
    Normalize and re-raise exceptions as API-friendly errors.

    Converts raw exceptions from DB, Pydantic, Redis, etc. into
    corresponding APIException subclasses.
    """
    if isinstance(e, APIException):
        raise e
    if isinstance(e, IntegrityError) and isUniqueViolation(e):
        raise UniqueViolation(formatIntegrityError(e))
    if isinstance(e, OperationalError):
        logException(e)
        raise PersistenceFailure()
    if isinstance(e, ValidationError):
        raise PydanticError(detail=e.errors())
    if isinstance(e, RedisError):
        raise RedisDBError(detail=str(e))

    logException(e)
    raise e


# ---------------------------------------------------------------------------
# Exception Classes
# ---------------------------------------------------------------------------
class PydanticError(APIException):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    headers = {"X-Error": "PydanticError"}

    def __init__(self, detail: str):
        super().__init__(detail=detail)


class UniqueViolation(APIException):
    status_code = status.HTTP_409_CONFLICT
    headers = {"X-Error": "UniqueViolation"}

    def __init__(self, detail: str):
        super().__init__(detail=detail)


class InvalidIdentifier(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Invalid ID provided"
    headers = {"X-Error": "InvalidIdentifier"}

    def __init__(self, orm_class=None, pk=None):
        if orm_class is None:
            super().__init__()
        else:
            super().__init__(detail=f"{orm_class.__name__} with id {pk} not found")


class DuplicateCode(APIException):
    status_code = status.HTTP_409_CONFLICT
    headers = {"X-Error": "DuplicateCode"}

    def __init__(self, orm_class, code: str):
        detail = f"{orm_class.__name__} code {code} already exists"
        super().__init__(detail=detail)


class StatusUnchanged(APIException):
    status_code = status.HTTP_409_CONFLICT
    headers = {"X-Error": "StatusUnchanged"}

    def __init__(self, orm_class, state: str):
        detail = f"The {orm_class.__name__} is already in state {state}"
        super().__init__(detail=detail)


class SchedulerBusy(APIException):
    status_code = status.HTTP_409_CONFLICT
    detail = "A fare transition run is already in progress"
    headers = {"X-Error": "SchedulerBusy"}


class PersistenceFailure(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "The data store is unreachable or rejected the write"
    headers = {"X-Error": "PersistenceFailure"}


class RedisDBError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    headers = {"X-Error": "RedisAPIError"}

    def __init__(self, detail: str):
        super().__init__(detail=detail)
