from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status, Body
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from distribution.src.db import Fare, sessionMaker
from distribution.src import exceptions, getters
from distribution.src.lifecycle import fareService
from distribution.src.loggers import logEvent
from distribution.src.enums import FareType, Status
from distribution.src.functions import enumStr, makeExceptionResponses
from distribution.src.urls import (
    URL_FARE,
    URL_FARE_ACTIVATE,
    URL_FARE_DEACTIVATE,
    URL_FARE_ID,
)

route_admin = APIRouter()


## Output Schema
class FareSchema(BaseModel):
    id: int
    organization_id: str
    code: str
    name: str
    fare_type: FareType
    amount: Decimal
    effective_date: datetime
    status: Status
    updated_on: Optional[datetime]
    created_on: datetime


## Input Forms
class CreateForm(BaseModel):
    organization_id: str = Field(Body(max_length=64))
    name: str = Field(Body(max_length=128))
    fare_type: FareType = Field(Body(description=enumStr(FareType)))
    amount: Decimal = Field(Body(ge=0))
    effective_date: datetime = Field(Body())


class UpdateForm(CreateForm):
    effective_date: datetime | None = Field(Body(default=None))


## Query Parameters
class QueryParams(BaseModel):
    status: Status | None = Field(Query(default=None, description=enumStr(Status)))
    organization_id: str | None = Field(Query(default=None))


## API endpoints [Admin]
@route_admin.post(
    URL_FARE,
    tags=["Fare"],
    response_model=FareSchema,
    status_code=status.HTTP_201_CREATED,
    responses=makeExceptionResponses([exceptions.DuplicateCode(Fare, "TAR001")]),
    description="""
    Create a new fare for an organization.
    The fare code is generated from the highest existing code (TAR001, TAR002, ...).
    The status is derived from the effective date, ACTIVE when the current time is on or before it, INACTIVE otherwise.
    An ACTIVE fare deactivates every other ACTIVE fare of the same organization.
    Log the fare creation activity.
    """,
)
async def create_fare(
    fParam: CreateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        fare = fareService(session).create(fParam)

        fareData = jsonable_encoder(fare)
        logEvent(request_info, fareData)
        return fare
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.put(
    URL_FARE_ID,
    tags=["Fare"],
    response_model=FareSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Replaces the mutable fields of an existing fare.
    The code and creation time never change.
    The effective date is kept when not provided and the status is derived again from it.
    An ACTIVE fare deactivates every other ACTIVE fare of the same organization.
    Log the fare updating activity.
    """,
)
async def update_fare(
    id: int,
    fParam: UpdateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        fare = fareService(session).update(id, fParam)

        logEvent(request_info, jsonable_encoder(fare))
        return fare
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.delete(
    URL_FARE_ID,
    tags=["Fare"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Permanently removes an existing fare.
    Log the deletion activity.
    """,
)
async def delete_fare(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        fareService(session).delete(id)

        logEvent(request_info, {"id": id})
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_FARE_ACTIVATE,
    tags=["Fare"],
    response_model=FareSchema,
    responses=makeExceptionResponses(
        [
            exceptions.InvalidIdentifier,
            exceptions.StatusUnchanged(Fare, Status.ACTIVE.value),
        ]
    ),
    description="""
    Activates a fare and deactivates every other ACTIVE fare of the same organization.
    Fails with a conflict when the fare is already ACTIVE.
    Log the fare activation.
    """,
)
async def activate_fare(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        fare = fareService(session).activate(id)

        logEvent(request_info, jsonable_encoder(fare))
        return fare
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_FARE_DEACTIVATE,
    tags=["Fare"],
    response_model=FareSchema,
    responses=makeExceptionResponses(
        [
            exceptions.InvalidIdentifier,
            exceptions.StatusUnchanged(Fare, Status.INACTIVE.value),
        ]
    ),
    description="""
    Deactivates a fare.
    Fails with a conflict when the fare is already INACTIVE.
    Log the fare deactivation.
    """,
)
async def deactivate_fare(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        fare = fareService(session).deactivate(id)

        logEvent(request_info, jsonable_encoder(fare))
        return fare
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_FARE_ID,
    tags=["Fare"],
    response_model=FareSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Fetches a single fare by its ID.
    """,
)
async def fetch_fare_by_id(id: int):
    try:
        session = sessionMaker()
        return fareService(session).getById(id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_FARE,
    tags=["Fare"],
    response_model=List[FareSchema],
    description="""
    Fetches the list of fares.
    Supports filtering by status and organization ID.
    An empty list is returned when nothing matches.
    """,
)
async def fetch_fare(qParam: QueryParams = Depends()):
    try:
        session = sessionMaker()
        return fareService(session).search(qParam.status, qParam.organization_id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
