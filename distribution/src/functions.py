from datetime import datetime
from typing import Dict, List, Optional

from distribution.src import schemas
from distribution.src.constants import TMZ_PRIMARY
from distribution.src.exceptions import APIException


def makeExceptionResponses(exceptions: List[APIException]) -> Dict[int, dict]:
    """
    Generate OpenAPI response documentation by fusing multiple APIException instances.

    Args:
        exceptions (List[APIException]): List of instantiated exceptions or
            exception classes with class-level defaults.

    Returns:
        Dict[int, dict]: A dictionary of OpenAPI response specs grouped by status code.
    """
    responses = {}

    for exception in exceptions:
        status_code = exception.status_code
        example_key = (
            exception.__name__
            if isinstance(exception, type)
            else type(exception).__name__
        )
        example_value = {
            "summary": str(exception.headers),
            "value": {"detail": exception.detail},
        }

        if status_code not in responses:
            responses[status_code] = {
                "model": schemas.ErrorResponse,
                "content": {
                    "application/json": {"examples": {example_key: example_value}}
                },
            }
        else:
            responses[status_code]["content"]["application/json"]["examples"][
                example_key
            ] = example_value

    return responses


def enumStr(enumClass) -> str:
    """
    Convert an Enum class into a comma-separated string of its members.

    Each enum member is formatted as "<NAME>: <VALUE>".

    Example:
        >>> from enum import Enum
        >>> class Color(Enum):
        ...     RED = 1
        ...     GREEN = 2
        >>> enumStr(Color)
        'RED: 1, GREEN: 2'
    """
    return ", ".join(f"{x.name}: {x.value}" for x in enumClass)


def utcNow() -> datetime:
    """Current instant in the primary timezone (UTC)."""
    return datetime.now(TMZ_PRIMARY)


def asUTC(moment: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to an aware UTC datetime.

    Naive values are read back from stores that drop the offset, they were
    written as UTC and are tagged as such rather than shifted.

    Example:
        >>> asUTC(datetime(2025, 11, 1, 5, 0))
        datetime.datetime(2025, 11, 1, 5, 0, tzinfo=zoneinfo.ZoneInfo(key='UTC'))
    """
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=TMZ_PRIMARY)
    return moment.astimezone(TMZ_PRIMARY)


def overwriteFields(targetObj, sourceObj, fields: List[str]) -> None:
    """
    Copy every listed attribute from a source object onto a target object,
    including None values.

    Used by full updates where the request replaces all mutable fields,
    as opposed to partial patches.

    Example:
        >>> overwriteFields(route, fParam, [Route.name.key, Route.zones.key])
    """
    for field in fields:
        setattr(targetObj, field, getattr(sourceObj, field, None))
