"""
Status derivation from temporal facts.

All functions are pure: the current instant is always passed in.
"""

from datetime import datetime
from typing import Optional

from distribution.src.enums import ProgramStatus, Status
from distribution.src.functions import asUTC


def deriveFareStatus(now: datetime, effectiveDate: datetime) -> Status:
    """A fare is ACTIVE while `now` is on or before its effective date."""
    if asUTC(now) <= asUTC(effectiveDate):
        return Status.ACTIVE
    return Status.INACTIVE


def deriveInitialProgramStatus(
    actualStart: Optional[str], actualEnd: Optional[str]
) -> ProgramStatus:
    """Applied at creation only, later changes are operator driven."""
    if actualStart is not None or actualEnd is not None:
        return ProgramStatus.IN_PROGRESS
    return ProgramStatus.PLANNED


def isFareDue(now: datetime, effectiveDate: Optional[datetime]) -> bool:
    """The fare's effective date has arrived (at or before now)."""
    return effectiveDate is not None and asUTC(effectiveDate) <= asUTC(now)


def isFareElapsed(now: datetime, effectiveDate: Optional[datetime]) -> bool:
    """The fare's effective date is strictly in the past."""
    return effectiveDate is not None and asUTC(effectiveDate) < asUTC(now)


def isFareSuperseded(
    now: datetime, effectiveDate: Optional[datetime], cutover: Optional[datetime]
) -> bool:
    """
    The pricing epoch changed at `cutover` and the fare predates it.

    Only true once `now` is strictly past the cutover.
    """
    if cutover is None or effectiveDate is None:
        return False
    cutover = asUTC(cutover)
    return asUTC(now) > cutover and asUTC(effectiveDate) < cutover
