from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status, Body
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from distribution.src.db import Route, sessionMaker
from distribution.src import exceptions, getters
from distribution.src.constants import MAX_ZONES_IN_ROUTE
from distribution.src.lifecycle import routeService
from distribution.src.loggers import logEvent
from distribution.src.enums import Status
from distribution.src.functions import enumStr, makeExceptionResponses
from distribution.src.urls import (
    URL_ROUTE,
    URL_ROUTE_ACTIVATE,
    URL_ROUTE_DEACTIVATE,
    URL_ROUTE_ID,
)

route_admin = APIRouter()


## Output Schema
class ZoneOrder(BaseModel):
    zone_id: str = Field(max_length=64)
    order: int | None = Field(default=None, ge=0)
    estimated_duration: int | None = Field(default=None, ge=0)


class RouteSchema(BaseModel):
    id: int
    organization_id: str
    code: str
    name: str
    zones: List[ZoneOrder]
    total_estimated_duration: int
    responsible_user_id: Optional[str]
    status: Status
    updated_on: Optional[datetime]
    created_on: datetime


## Input Forms
class CreateForm(BaseModel):
    organization_id: str = Field(Body(max_length=64))
    name: str = Field(Body(max_length=128))
    zones: List[ZoneOrder] | None = Field(
        Body(default=None, max_length=MAX_ZONES_IN_ROUTE)
    )
    total_estimated_duration: int | None = Field(Body(default=None, ge=0))
    responsible_user_id: str | None = Field(Body(default=None, max_length=64))


class UpdateForm(CreateForm):
    pass


## Query Parameters
class QueryParams(BaseModel):
    status: Status | None = Field(Query(default=None, description=enumStr(Status)))
    organization_id: str | None = Field(Query(default=None))


## API endpoints [Admin]
@route_admin.post(
    URL_ROUTE,
    tags=["Route"],
    response_model=RouteSchema,
    status_code=status.HTTP_201_CREATED,
    responses=makeExceptionResponses([exceptions.DuplicateCode(Route, "RUT001")]),
    description="""
    Create a new distribution route as an ordered list of zones.
    The route code is generated from the highest existing code (RUT001, RUT002, ...).
    Missing zone order and estimated duration default to 0.
    New routes are always ACTIVE.
    Log the route creation activity.
    """,
)
async def create_route(
    fParam: CreateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        route = routeService(session).create(fParam)

        logEvent(request_info, jsonable_encoder(route))
        return route
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.put(
    URL_ROUTE_ID,
    tags=["Route"],
    response_model=RouteSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Replaces the mutable fields of an existing route, including its zone list.
    The code, creation time and status never change through this endpoint.
    Log the route updating activity.
    """,
)
async def update_route(
    id: int,
    fParam: UpdateForm = Depends(),
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        route = routeService(session).update(id, fParam)

        logEvent(request_info, jsonable_encoder(route))
        return route
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.delete(
    URL_ROUTE_ID,
    tags=["Route"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Permanently removes an existing route.
    Log the deletion activity.
    """,
)
async def delete_route(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        routeService(session).delete(id)

        logEvent(request_info, {"id": id})
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_ROUTE_ACTIVATE,
    tags=["Route"],
    response_model=RouteSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Sets the route status to ACTIVE, succeeding when it already is.
    Log the route activation.
    """,
)
async def activate_route(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        route = routeService(session).activate(id)

        logEvent(request_info, jsonable_encoder(route))
        return route
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.patch(
    URL_ROUTE_DEACTIVATE,
    tags=["Route"],
    response_model=RouteSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Sets the route status to INACTIVE, succeeding when it already is.
    Log the route deactivation.
    """,
)
async def deactivate_route(
    id: int,
    request_info=Depends(getters.requestInfo),
):
    try:
        session = sessionMaker()
        route = routeService(session).deactivate(id)

        logEvent(request_info, jsonable_encoder(route))
        return route
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_ROUTE_ID,
    tags=["Route"],
    response_model=RouteSchema,
    responses=makeExceptionResponses([exceptions.InvalidIdentifier]),
    description="""
    Fetches a single route by its ID.
    """,
)
async def fetch_route_by_id(id: int):
    try:
        session = sessionMaker()
        return routeService(session).getById(id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_ROUTE,
    tags=["Route"],
    response_model=List[RouteSchema],
    description="""
    Fetches the list of routes, optionally filtered by status and organization ID.
    """,
)
async def fetch_route(qParam: QueryParams = Depends()):
    try:
        session = sessionMaker()
        return routeService(session).search(qParam.status, qParam.organization_id)
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
