"""
Fare reconciliation scheduler.

Effective dates elapse without any request touching the fare, so a
periodic run re-derives fare status from the current time. Each run, in
order:

1. Supersession sweep: once the pricing-epoch cutover has passed, ACTIVE
   fares effective before it are forced INACTIVE.
2. Activation sweep: INACTIVE fares whose effective date is at or before
   now become ACTIVE, and every other ACTIVE fare of the same organization
   is deactivated. Fares the expiration sweep would close again in the same
   run (effective strictly before now) stay INACTIVE and displace nothing.
3. Expiration sweep: ACTIVE fares whose effective date is strictly before
   now become INACTIVE.

Every fare write is independent; a failed write is logged and counted and
the sweep moves on. The periodic loop and the operator trigger share
`triggerFareTransitions`, guarded by a non-blocking Redis lock so that
overlapping runs are skipped.
"""

import time
import logging
from datetime import datetime
from typing import Callable, Optional
from sqlalchemy.orm import Session

from distribution.src.constants import (
    FARE_SCHEDULER_INTERVAL,
    FARE_TRANSITION_DATE,
    FARE_TRANSITION_LOCK_TIMEOUT,
)
from distribution.src.db import sessionMaker, Fare
from distribution.src.enums import Status
from distribution.src.fares import enforceExclusivity, supersedeFares
from distribution.src.functions import asUTC, utcNow
from distribution.src.redis import acquireLock, releaseLock
from distribution.src.repository import FareRepository
from distribution.src.schemas import TransitionReport
from distribution.src.status import isFareDue, isFareElapsed


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("Scheduler")

TRANSITION_LOCK = f"{Fare.__tablename__}:transition"


def activateDueFares(
    repository: FareRepository, now: datetime, report: TransitionReport
) -> None:
    dueFares = [
        fare
        for fare in repository.findAllByStatus(Status.INACTIVE.value)
        if isFareDue(now, fare.effective_date)
        and not isFareElapsed(now, fare.effective_date)
    ]
    # The most recently effective fare of an organization is activated last
    dueFares.sort(key=lambda fare: (asUTC(fare.effective_date), fare.id))
    for fare in dueFares:
        code = fare.code
        try:
            fare.status = Status.ACTIVE.value
            repository.save(fare)
            report.activated += 1
            logger.info(f"Fare {code} activated")
        except Exception:
            report.failed += 1
            logger.exception(f"Failed to activate fare {code}")
            continue
        deactivated, failed = enforceExclusivity(repository, fare)
        report.deactivated += deactivated
        report.failed += failed


def expireElapsedFares(
    repository: FareRepository, now: datetime, report: TransitionReport
) -> None:
    elapsedFares = [
        fare
        for fare in repository.findAllByStatus(Status.ACTIVE.value)
        if isFareElapsed(now, fare.effective_date)
    ]
    for fare in elapsedFares:
        code = fare.code
        try:
            fare.status = Status.INACTIVE.value
            repository.save(fare)
            report.expired += 1
            logger.info(f"Fare {code} expired")
        except Exception:
            report.failed += 1
            logger.exception(f"Failed to expire fare {code}")


def runFareTransitions(
    session: Session,
    now: datetime,
    cutover: Optional[datetime] = FARE_TRANSITION_DATE,
) -> TransitionReport:
    """
    Run the three fare sweeps once against `now`.

    Args:
        session (Session): Active SQLAlchemy session.
        now (datetime): Instant every rule is evaluated against.
        cutover (datetime | None): Pricing-epoch cutover, None skips supersession.

    Returns:
        TransitionReport: Counts of the fares changed by each sweep and of
        the writes that failed.
    """
    repository = FareRepository(session)
    report = TransitionReport()

    report.superseded, report.failed = supersedeFares(repository, now, cutover)
    activateDueFares(repository, now, report)
    expireElapsedFares(repository, now, report)
    return report


def triggerFareTransitions(
    session: Session,
    clock: Callable[[], datetime] = utcNow,
    cutover: Optional[datetime] = FARE_TRANSITION_DATE,
) -> TransitionReport:
    """
    Run the fare sweeps unless another run holds the transition lock.

    Returns:
        TransitionReport: The run report, with `skipped` set when a run was
        already in progress and nothing was done.
    """
    lock = acquireLock(TRANSITION_LOCK, timeOut=FARE_TRANSITION_LOCK_TIMEOUT)
    if lock is None:
        logger.warning("Fare transition run already in progress, skipping")
        return TransitionReport(skipped=True)
    try:
        report = runFareTransitions(session, clock(), cutover)
    finally:
        releaseLock(lock)

    if report.failed:
        report.error = f"{report.failed} fare writes failed"
        logger.error(f"Fare transition processing finished with errors: {report}")
    else:
        logger.info(f"Fare transition processing completed: {report}")
    return report


def runScheduler(interval: int = FARE_SCHEDULER_INTERVAL):
    while True:
        try:
            with sessionMaker() as session:
                triggerFareTransitions(session)
        except Exception:
            logger.exception("Scheduler loop failed")
        finally:
            time.sleep(interval)


def main():
    try:
        runScheduler()
    except Exception:
        logger.exception("scheduler.py failed")


if __name__ == "__main__":
    main()
