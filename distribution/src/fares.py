"""
Fare rules shared by the request path and the fare scheduler.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from distribution.src.db import Fare
from distribution.src.enums import Status
from distribution.src.repository import FareRepository
from distribution.src.status import isFareSuperseded


logger = logging.getLogger("Scheduler")


def enforceExclusivity(repository: FareRepository, activated: Fare) -> Tuple[int, int]:
    """
    Deactivate every other ACTIVE fare of the activated fare's organization.

    Each sibling is written on its own; a failing write is logged and the
    remaining siblings are still processed.

    Returns:
        Tuple[int, int]: Number of fares deactivated and number of failed writes.
    """
    deactivated = failed = 0
    activatedId, activatedCode = activated.id, activated.code
    siblings = repository.findByOrganizationAndStatusOrderByEffectiveDateDesc(
        activated.organization_id, Status.ACTIVE.value
    )
    for fare in siblings:
        if fare.id == activatedId:
            continue
        code = fare.code
        try:
            fare.status = Status.INACTIVE.value
            repository.save(fare)
            deactivated += 1
            logger.info(f"Fare {code} deactivated in favour of {activatedCode}")
        except Exception:
            failed += 1
            logger.exception(f"Failed to deactivate fare {code}")
    return deactivated, failed


def supersedeFares(
    repository: FareRepository, now: datetime, cutover: Optional[datetime]
) -> Tuple[int, int]:
    """
    Force INACTIVE every ACTIVE fare that predates the pricing-epoch cutover,
    once the cutover has passed.

    Returns:
        Tuple[int, int]: Number of fares superseded and number of failed writes.
    """
    superseded = failed = 0
    if cutover is None:
        return superseded, failed
    for fare in repository.findAllByStatus(Status.ACTIVE.value):
        if not isFareSuperseded(now, fare.effective_date, cutover):
            continue
        code = fare.code
        try:
            fare.status = Status.INACTIVE.value
            repository.save(fare)
            superseded += 1
            logger.info(f"Fare {code} superseded by the pricing epoch")
        except Exception:
            failed += 1
            logger.exception(f"Failed to supersede fare {code}")
    return superseded, failed
