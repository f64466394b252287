from fastapi import APIRouter, Depends, status

from distribution.src.db import sessionMaker
from distribution.src import exceptions, getters
from distribution.src.loggers import logEvent
from distribution.src.functions import makeExceptionResponses
from distribution.src.scheduler import triggerFareTransitions
from distribution.src.schemas import TransitionReport
from distribution.src.urls import URL_FARE_TRANSITION

route_admin = APIRouter()


## API endpoints [Admin]
@route_admin.post(
    URL_FARE_TRANSITION,
    tags=["Fare"],
    response_model=TransitionReport,
    status_code=status.HTTP_200_OK,
    responses=makeExceptionResponses([exceptions.SchedulerBusy]),
    description="""
    Runs the fare reconciliation immediately instead of waiting for the scheduler.
    The supersession, activation and expiration sweeps run in that order against the current time.
    Fails with a conflict when another run is already in progress.
    Individual fare write failures are reported in the response, not raised.
    Log the trigger activity.
    """,
)
async def trigger_fare_transitions(request_info=Depends(getters.requestInfo)):
    try:
        session = sessionMaker()
        report = triggerFareTransitions(session)
        if report.skipped:
            raise exceptions.SchedulerBusy()

        logEvent(request_info, report.model_dump())
        return report
    except Exception as e:
        exceptions.handle(e)
    finally:
        session.close()
