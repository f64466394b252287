from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status, Body
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from distribution.src.db import Schedule, sessionMaker
from distribution.src import exceptions, getters
from distribution.src.constants import MAX_DURATION_HOURS, REGEX_TIME_OF_DAY
from distribution.src.lifecycle import scheduleService
from distribution.src.loggers import logEvent
from distribution.src.enums import Day, Status
from distribution.src.functions import enumStr, makeExceptionResponses
from distribution.src.urls import (
    URL_SCHEDULE,
    URL_SCHEDULE_ACTIVATE,
    URL_SCHEDULE_DEACTIVATE,
    URL_SCHEDULE_ID,
)

route_admin = APIRouter()


## Output Schema
class ScheduleSchema(BaseModel):
    id: int
    organization_id: str
    code: str
    zone_id: Optional[str]
    street_id: Optional[str]
    name: str
    days_of_week: List[Day]
    start_time: str
    end_time: str
    duration_hours: Optional[int]
    status: Status
    updated_on: Optional[datetime]
    created_on: datetime


## Input Forms
class CreateForm(BaseModel):
    organization_id: str = Field(Body(max_length=64))
    zone_id: str | None = Field(Body(default=None, max_length=64))
    street_id: str | None = Field(Body(default=None, max_length=64))
    name: str = Field(Body(max_length=128))
    days_of_week: List[Day] | None = Field(
        Body(default=None, max_length=7, description=enumStr(Day))
    )
    start_time: str = Field(Body(pattern=REGEX_TIME_OF_DAY))
    end_time: str = Field(Body(pattern=REGEX_TIME_OF_DAY))
    duration_hours: int | None = Field(
        Body(default=None, ge=0, le=MAX_DURATION_HOURS)
    )


class UpdateForm(CreateForm):
    pass


## Query Parameters
class QueryParams(BaseModel):
    status: Status | None = Field(Query(default=None, description=enumStr(Status)))
    organization_id: str | None = Field(Query(default=None))


## API endpoints [Admin]
@route_admin.post(
    URL_SCHEDULE,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    status_code=status.HTTP_201_CREATED,
    responses=makeExceptionResponses(
        [exceptions.DuplicateCode(Schedule, "HOR001")]
    ),
    description="""
    Create a new recurring distribution schedule.
    The schedule code is generated from the highest existing code (HOR001, HOR002, ...).
    New schedules are always ACTIVE.
    Log the schedule creation activity.
    """,
)
async def create_schedule(
    fParam: CreateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        schedule = scheduleService(session).create(fParam)

        logEvent(request_info, jsonable_encoder(schedule))
        return schedule
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.put(
    URL_SCHEDULE_ID,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Replaces the mutable fields of an existing schedule.
    The code, creation time and status never change through this endpoint.
    Log the schedule updating activity.
    """,
)
async def update_schedule(
    id: int,
    fParam: UpdateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        schedule = scheduleService(session).update(id, fParam)

        logEvent(request_info, jsonable_encoder(schedule))
        return schedule
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.delete(
    URL_SCHEDULE_ID,
    tags=["Schedule"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Permanently removes an existing schedule.
    Log the deletion activity.
    """,
)
async def delete_schedule(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        scheduleService(session).delete(id)

        logEvent(request_info, {"id": id})
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_SCHEDULE_ACTIVATE,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Sets the schedule status to ACTIVE, succeeding when it already is.
    Log the schedule activation.
    """,
)
async def activate_schedule(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        schedule = scheduleService(session).activate(id)

        logEvent(request_info, jsonable_encoder(schedule))
        return schedule
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_SCHEDULE_DEACTIVATE,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Sets the schedule status to INACTIVE, succeeding when it already is.
    Log the schedule deactivation.
    """,
)
async def deactivate_schedule(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        schedule = scheduleService(session).deactivate(id)

        logEvent(request_info, jsonable_encoder(schedule))
        return schedule
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_SCHEDULE_ID,
    tags=["Schedule"],
    response_model=ScheduleSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Fetches a single schedule by its ID.
    """,
)
async def fetch_schedule_by_id(id: int):
    try:
        session = sessionMaker()
        return scheduleService(session).getById(id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_SCHEDULE,
    tags=["Schedule"],
    response_model=List[ScheduleSchema],
    description="""
    Fetches the list of schedules, optionally filtered by status and organization ID.
    """,
)
async def fetch_schedule(qParam: QueryParams = Depends()):
    try:
        session = sessionMaker()
        return scheduleService(session).search(qParam.status, qParam.organization_id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
