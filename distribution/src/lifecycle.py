"""
Lifecycle orchestration of the coded distribution entities.

Programs, routes, schedules and fares share one routine: generate the next
code, derive the status, persist, and hand the stored record back. The
differences between the kinds are captured by an `EntityKind` record
(code prefix, status rules, field mapping, status-change policy) so the
routine itself is written once in `LifecycleService`.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm.session import Session

from distribution.src import exceptions
from distribution.src.codes import nextCode
from distribution.src.constants import (
    FARE_CODE_PREFIX,
    PROGRAM_CODE_PREFIX,
    ROUTE_CODE_PREFIX,
    SCHEDULE_CODE_PREFIX,
)
from distribution.src.db import Fare, Program, Route, Schedule
from distribution.src.enums import Status
from distribution.src.fares import enforceExclusivity
from distribution.src.functions import asUTC, overwriteFields, utcNow
from distribution.src.repository import FareRepository, Repository
from distribution.src.status import deriveFareStatus, deriveInitialProgramStatus


logger = logging.getLogger("uvicorn.error")


class EntityKind:
    """
    Capabilities of one entity kind.

    Args:
        orm_class: ORM model of the kind.
        codePrefix (str): Prefix of the generated codes.
        fieldMapper (Callable): `(record, fParam)` copying every mutable field
            of a create/update form onto the record.
        deriveInitialStatus (Callable): `(record, now)` status of a new record.
        deriveUpdatedStatus (Callable | None): `(record, now)` status after an
            update, None keeps the stored status.
        strictStatusChange (bool): Reject activate/deactivate when the record
            is already in the requested status instead of succeeding silently.
        deleteChecksExistence (bool): Signal NotFound when deleting an
            unknown id instead of deleting unconditionally.
        exclusiveActivation (bool): An ACTIVE record displaces every other
            ACTIVE record of its organization.
    """

    def __init__(
        self,
        orm_class,
        codePrefix: str,
        fieldMapper: Callable,
        deriveInitialStatus: Callable,
        deriveUpdatedStatus: Optional[Callable] = None,
        strictStatusChange: bool = False,
        deleteChecksExistence: bool = True,
        exclusiveActivation: bool = False,
        repositoryClass=None,
    ):
        self.orm_class = orm_class
        self.codePrefix = codePrefix
        self.fieldMapper = fieldMapper
        self.deriveInitialStatus = deriveInitialStatus
        self.deriveUpdatedStatus = deriveUpdatedStatus
        self.strictStatusChange = strictStatusChange
        self.deleteChecksExistence = deleteChecksExistence
        self.exclusiveActivation = exclusiveActivation
        self.repositoryClass = repositoryClass

    @property
    def name(self) -> str:
        return self.orm_class.__name__

    def makeRepository(self, session: Session) -> Repository:
        if self.repositoryClass is not None:
            return self.repositoryClass(session)
        return Repository(session, self.orm_class)


class LifecycleService:
    def __init__(
        self,
        session: Session,
        kind: EntityKind,
        clock: Callable[[], datetime] = utcNow,
    ):
        self.kind = kind
        self.clock = clock
        self.repository = kind.makeRepository(session)

    ## Reads
    def getById(self, pk: int):
        record = self.repository.findById(pk)
        if record is None:
            raise exceptions.InvalidIdentifier(self.kind.orm_class, pk)
        return record

    def listAll(self) -> List:
        return self.repository.findAll()

    def listByStatus(self, status: str) -> List:
        return self.repository.findAllByStatus(status)

    def listByOrganization(self, organizationId: str) -> List:
        return self.repository.findAllByOrganization(organizationId)

    def search(
        self, status: Optional[str] = None, organizationId: Optional[str] = None
    ) -> List:
        status = getattr(status, "value", status)
        if organizationId is None:
            return self.listAll() if status is None else self.listByStatus(status)
        records = self.listByOrganization(organizationId)
        if status is not None:
            records = [record for record in records if record.status == status]
        return records

    ## Writes
    def generateCode(self) -> str:
        last = self.repository.findHighestByCode(self.kind.codePrefix)
        return nextCode(self.kind.codePrefix, last.code if last else None)

    def create(self, fParam):
        now = self.clock()
        code = self.generateCode()
        if self.repository.existsByCode(code):
            raise exceptions.DuplicateCode(self.kind.orm_class, code)

        record = self.kind.orm_class(code=code, created_on=now)
        self.kind.fieldMapper(record, fParam)
        record.status = self.kind.deriveInitialStatus(record, now).value
        record = self.repository.save(record)
        logger.info(f"{self.kind.name} {record.code} created as {record.status}")
        self._afterWrite(record)
        return record

    def update(self, pk: int, fParam):
        record = self.getById(pk)
        code, createdOn = record.code, record.created_on

        self.kind.fieldMapper(record, fParam)
        if self.kind.deriveUpdatedStatus is not None:
            record.status = self.kind.deriveUpdatedStatus(record, self.clock()).value
        record.code, record.created_on = code, createdOn
        record = self.repository.save(record)
        self._afterWrite(record)
        return record

    def activate(self, pk: int):
        return self.changeStatus(pk, Status.ACTIVE.value)

    def deactivate(self, pk: int):
        return self.changeStatus(pk, Status.INACTIVE.value)

    def changeStatus(self, pk: int, status: str):
        record = self.getById(pk)
        if self.kind.strictStatusChange and record.status == status:
            raise exceptions.StatusUnchanged(self.kind.orm_class, status)

        record.status = status
        record = self.repository.save(record)
        logger.info(f"{self.kind.name} {record.code} set to {status}")
        self._afterWrite(record)
        return record

    def delete(self, pk: int) -> None:
        if not self.kind.deleteChecksExistence:
            self.repository.deleteById(pk)
            return
        record = self.getById(pk)
        self.repository.delete(record)

    def _afterWrite(self, record) -> None:
        if self.kind.exclusiveActivation and record.status == Status.ACTIVE.value:
            enforceExclusivity(self.repository, record)


# ----------------------------------- Field mappers -------------------------------------------#
def mapProgram(program: Program, fParam) -> None:
    overwriteFields(
        program,
        fParam,
        [
            Program.organization_id.key,
            Program.schedule_id.key,
            Program.route_id.key,
            Program.zone_id.key,
            Program.street_id.key,
            Program.program_date.key,
            Program.planned_start_time.key,
            Program.planned_end_time.key,
            Program.responsible_user_id.key,
            Program.observations.key,
        ],
    )
    # Actual times are recorded at creation, updates keep them unless sent
    if program.id is None or fParam.actual_start_time is not None:
        program.actual_start_time = fParam.actual_start_time
    if program.id is None or fParam.actual_end_time is not None:
        program.actual_end_time = fParam.actual_end_time


def mapRoute(route: Route, fParam) -> None:
    overwriteFields(
        route,
        fParam,
        [Route.organization_id.key, Route.name.key, Route.responsible_user_id.key],
    )
    route.zones = [
        {
            "zone_id": zone["zone_id"],
            "order": zone.get("order") or 0,
            "estimated_duration": zone.get("estimated_duration") or 0,
        }
        for zone in jsonable_encoder(fParam.zones or [])
    ]
    route.total_estimated_duration = fParam.total_estimated_duration or 0


def mapSchedule(schedule: Schedule, fParam) -> None:
    overwriteFields(
        schedule,
        fParam,
        [
            Schedule.organization_id.key,
            Schedule.zone_id.key,
            Schedule.street_id.key,
            Schedule.name.key,
            Schedule.start_time.key,
            Schedule.end_time.key,
            Schedule.duration_hours.key,
        ],
    )
    schedule.days_of_week = jsonable_encoder(fParam.days_of_week or [])


def mapFare(fare: Fare, fParam) -> None:
    overwriteFields(
        fare,
        fParam,
        [Fare.organization_id.key, Fare.name.key, Fare.amount.key],
    )
    fare.fare_type = jsonable_encoder(fParam.fare_type)
    # Stored in UTC, kept when an update does not send one
    if fParam.effective_date is not None:
        fare.effective_date = asUTC(fParam.effective_date)


def fareStatus(fare: Fare, now: datetime) -> Status:
    return deriveFareStatus(now, fare.effective_date)


# ----------------------------------- Entity kinds --------------------------------------------#
PROGRAM = EntityKind(
    Program,
    PROGRAM_CODE_PREFIX,
    fieldMapper=mapProgram,
    deriveInitialStatus=lambda program, now: deriveInitialProgramStatus(
        program.actual_start_time, program.actual_end_time
    ),
    deleteChecksExistence=False,
)

ROUTE = EntityKind(
    Route,
    ROUTE_CODE_PREFIX,
    fieldMapper=mapRoute,
    deriveInitialStatus=lambda route, now: Status.ACTIVE,
)

SCHEDULE = EntityKind(
    Schedule,
    SCHEDULE_CODE_PREFIX,
    fieldMapper=mapSchedule,
    deriveInitialStatus=lambda schedule, now: Status.ACTIVE,
)

# Fares reject redundant activate/deactivate calls, the other kinds accept them
FARE = EntityKind(
    Fare,
    FARE_CODE_PREFIX,
    fieldMapper=mapFare,
    deriveInitialStatus=fareStatus,
    deriveUpdatedStatus=fareStatus,
    strictStatusChange=True,
    exclusiveActivation=True,
    repositoryClass=FareRepository,
)


def programService(session: Session, clock=utcNow) -> LifecycleService:
    return LifecycleService(session, PROGRAM, clock)


def routeService(session: Session, clock=utcNow) -> LifecycleService:
    return LifecycleService(session, ROUTE, clock)


def scheduleService(session: Session, clock=utcNow) -> LifecycleService:
    return LifecycleService(session, SCHEDULE, clock)


def fareService(session: Session, clock=utcNow) -> LifecycleService:
    return LifecycleService(session, FARE, clock)
