from typing import Dict
from fastapi import APIRouter
from pydantic import BaseModel

from distribution.src.db import Fare, Program, Route, Schedule, sessionMaker
from distribution.src import exceptions
from distribution.src.enums import ProgramStatus, Status
from distribution.src.repository import Repository
from distribution.src.urls import URL_DASHBOARD_STATS, URL_DASHBOARD_SUMMARY

route_admin = APIRouter()


## Output Schema
class StatsSchema(BaseModel):
    programs: int
    routes: int
    schedules: int
    fares: int
    active_fares: int


class SummarySchema(BaseModel):
    programs: Dict[ProgramStatus, int]
    active_routes: int
    active_schedules: int


## API endpoints [Admin]
@route_admin.get(
    URL_DASHBOARD_STATS,
    tags=["Dashboard"],
    response_model=StatsSchema,
    description="""
    Totals of every distribution entity kind, plus the number of ACTIVE fares.
    """,
)
async def fetch_stats():
    try:
        session = sessionMaker()
        fares = Repository(session, Fare)
        return StatsSchema(
            programs=Repository(session, Program).count(),
            routes=Repository(session, Route).count(),
            schedules=Repository(session, Schedule).count(),
            fares=fares.count(),
            active_fares=fares.count(Status.ACTIVE.value),
        )
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()


@route_admin.get(
    URL_DASHBOARD_SUMMARY,
    tags=["Dashboard"],
    response_model=SummarySchema,
    description="""
    Program counts per status, every status listed even when zero,
    along with the number of ACTIVE routes and schedules.
    """,
)
async def fetch_summary():
    try:
        session = sessionMaker()
        programs = Repository(session, Program)
        return SummarySchema(
            programs={
                programStatus: programs.count(programStatus.value)
                for programStatus in ProgramStatus
            },
            active_routes=Repository(session, Route).count(Status.ACTIVE.value),
            active_schedules=Repository(session, Schedule).count(Status.ACTIVE.value),
        )
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
