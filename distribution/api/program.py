from datetime import date, datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status, Body
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from distribution.src.db import Program, sessionMaker
from distribution.src import exceptions, getters
from distribution.src.constants import REGEX_TIME_OF_DAY
from distribution.src.lifecycle import programService
from distribution.src.loggers import logEvent
from distribution.src.enums import ProgramStatus
from distribution.src.functions import enumStr, makeExceptionResponses
from distribution.src.urls import (
    URL_PROGRAM,
    URL_PROGRAM_ACTIVATE,
    URL_PROGRAM_DEACTIVATE,
    URL_PROGRAM_ID,
)

route_admin = APIRouter()


## Output Schema
class ProgramSchema(BaseModel):
    id: int
    organization_id: str
    code: str
    schedule_id: Optional[int]
    route_id: Optional[int]
    zone_id: Optional[str]
    street_id: Optional[str]
    program_date: date
    planned_start_time: str
    planned_end_time: str
    actual_start_time: Optional[str]
    actual_end_time: Optional[str]
    responsible_user_id: Optional[str]
    observations: Optional[str]
    status: ProgramStatus
    updated_on: Optional[datetime]
    created_on: datetime


## Input Forms
class CreateForm(BaseModel):
    organization_id: str = Field(Body(max_length=64))
    schedule_id: int | None = Field(Body(default=None))
    route_id: int | None = Field(Body(default=None))
    zone_id: str | None = Field(Body(default=None, max_length=64))
    street_id: str | None = Field(Body(default=None, max_length=64))
    program_date: date = Field(Body())
    planned_start_time: str = Field(Body(pattern=REGEX_TIME_OF_DAY))
    planned_end_time: str = Field(Body(pattern=REGEX_TIME_OF_DAY))
    actual_start_time: str | None = Field(
        Body(default=None, pattern=REGEX_TIME_OF_DAY)
    )
    actual_end_time: str | None = Field(Body(default=None, pattern=REGEX_TIME_OF_DAY))
    responsible_user_id: str | None = Field(Body(default=None, max_length=64))
    observations: str | None = Field(Body(default=None, max_length=2048))


class UpdateForm(CreateForm):
    pass


## Query Parameters
class QueryParams(BaseModel):
    status: ProgramStatus | None = Field(
        Query(default=None, description=enumStr(ProgramStatus))
    )
    organization_id: str | None = Field(Query(default=None))


## API endpoints [Admin]
@route_admin.post(
    URL_PROGRAM,
    tags=["Program"],
    response_model=ProgramSchema,
    status_code=status.HTTP_201_CREATED,
    responses=makeExceptionResponses([exceptions.DuplicateCode(Program, "PRG001")]),
    description="""
    Create a new distribution program.
    The program code is generated from the highest existing code (PRG001, PRG002, ...).
    The program starts as PLANNED, or IN_PROGRESS when an actual start or end time is provided.
    Log the program creation activity.
    """,
)
async def create_program(
    fParam: CreateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        program = programService(session).create(fParam)

        logEvent(request_info, jsonable_encoder(program))
        return program
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.put(
    URL_PROGRAM_ID,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Replaces the mutable fields of an existing program.
    The code, creation time and status never change through this endpoint.
    Actual times are kept when not provided.
    Log the program updating activity.
    """,
)
async def update_program(
    id: int,
    fParam: UpdateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        program = programService(session).update(id, fParam)

        logEvent(request_info, jsonable_encoder(program))
        return program
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.delete(
    URL_PROGRAM_ID,
    tags=["Program"],
    status_code=status.HTTP_204_NO_CONTENT,
    description="""
    Removes a program.
    Deleting an unknown ID is not an error.
    Log the deletion activity.
    """,
)
async def delete_program(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        programService(session).delete(id)

        logEvent(request_info, {"id": id})
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_PROGRAM_ACTIVATE,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Sets the program status to ACTIVE.
    Activating an already ACTIVE program succeeds.
    Log the program activation.
    """,
)
async def activate_program(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        program = programService(session).activate(id)

        logEvent(request_info, jsonable_encoder(program))
        return program
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_PROGRAM_DEACTIVATE,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Sets the program status to INACTIVE.
    Deactivating an already INACTIVE program succeeds.
    Log the program deactivation.
    """,
)
async def deactivate_program(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        program = programService(session).deactivate(id)

        logEvent(request_info, jsonable_encoder(program))
        return program
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_PROGRAM_ID,
    tags=["Program"],
    response_model=ProgramSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Fetches a single program by its ID.
    """,
)
async def fetch_program_by_id(id: int):
    try:
        session = sessionMaker()
        return programService(session).getById(id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_PROGRAM,
    tags=["Program"],
    response_model=List[ProgramSchema],
    description="""
    Fetches the list of programs.
    Supports filtering by status and organization ID.
    """,
)
async def fetch_program(qParam: QueryParams = Depends()):
    try:
        session = sessionMaker()
        return programService(session).search(qParam.status, qParam.organization_id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
