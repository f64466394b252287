"""
Tests for distribution.src.lifecycle against an in-memory database.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from distribution.src import exceptions
from distribution.src.db import Fare, Route
from distribution.src.enums import Day, FareType, ProgramStatus, Status
from distribution.src.functions import asUTC
from distribution.src.lifecycle import (
    fareService,
    programService,
    routeService,
    scheduleService,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def fareForm(**fields):
    values = dict(
        organization_id="ORG-1",
        name="Monthly residential",
        fare_type=FareType.MONTHLY,
        amount=Decimal("25.50"),
        effective_date=NOW + timedelta(days=10),
    )
    values.update(fields)
    return SimpleNamespace(**values)


def programForm(**fields):
    values = dict(
        organization_id="ORG-1",
        schedule_id=1,
        route_id=1,
        zone_id="ZONE-A",
        street_id="STREET-1",
        program_date=date(2025, 6, 16),
        planned_start_time="06:00",
        planned_end_time="09:00",
        actual_start_time=None,
        actual_end_time=None,
        responsible_user_id="USER-1",
        observations=None,
    )
    values.update(fields)
    return SimpleNamespace(**values)


def routeForm(**fields):
    values = dict(
        organization_id="ORG-1",
        name="North loop",
        zones=[{"zone_id": "ZONE-A", "order": 1, "estimated_duration": 30}],
        total_estimated_duration=30,
        responsible_user_id=None,
    )
    values.update(fields)
    return SimpleNamespace(**values)


def scheduleForm(**fields):
    values = dict(
        organization_id="ORG-1",
        zone_id="ZONE-A",
        street_id=None,
        name="Weekday mornings",
        days_of_week=[Day.MONDAY, Day.FRIDAY],
        start_time="06:00",
        end_time="09:00",
        duration_hours=3,
    )
    values.update(fields)
    return SimpleNamespace(**values)


def insertFare(session, code, **fields):
    values = dict(
        organization_id="ORG-1",
        name="Legacy fare",
        fare_type=FareType.MONTHLY.value,
        amount=Decimal("10.00"),
        effective_date=NOW - timedelta(days=100),
        status=Status.INACTIVE.value,
        created_on=NOW - timedelta(days=100),
    )
    values.update(fields)
    fare = Fare(code=code, **values)
    session.add(fare)
    session.commit()
    return fare


# ---------------------------------- Code generation ----------------------------------------#
def test_first_fare_gets_first_code_and_is_active(session, clock):
    fare = fareService(session, clock).create(fareForm(effective_date=NOW))
    assert fare.code == "TAR001"
    assert fare.status == Status.ACTIVE.value
    assert asUTC(fare.created_on) == NOW


def test_code_follows_highest_existing(session, clock):
    insertFare(session, "TAR005")
    fare = fareService(session, clock).create(fareForm())
    assert fare.code == "TAR006"


def test_code_ranks_wider_numbers_higher(session, clock):
    insertFare(session, "TAR999")
    insertFare(session, "TAR1000")
    fare = fareService(session, clock).create(fareForm())
    assert fare.code == "TAR1001"


def test_malformed_history_does_not_drive_generation(session, clock):
    insertFare(session, "TAR005")
    insertFare(session, "TARLEGACY")
    fare = fareService(session, clock).create(fareForm())
    assert fare.code == "TAR006"


def test_zero_padded_legacy_code_ranks_by_number(session, clock):
    insertFare(session, "TAR005")
    insertFare(session, "TAR006")
    insertFare(session, "TAR0005")
    service = fareService(session, clock)
    assert service.generateCode() == "TAR007"
    assert service.create(fareForm()).code == "TAR007"


def test_each_kind_has_its_own_sequence(session, clock):
    assert programService(session, clock).create(programForm()).code == "PRG001"
    assert routeService(session, clock).create(routeForm()).code == "RUT001"
    assert scheduleService(session, clock).create(scheduleForm()).code == "HOR001"
    assert programService(session, clock).create(programForm()).code == "PRG002"


def test_existing_generated_code_is_a_conflict(session, clock, monkeypatch):
    insertFare(session, "TAR001")
    service = fareService(session, clock)
    monkeypatch.setattr(service, "generateCode", lambda: "TAR001")
    with pytest.raises(exceptions.DuplicateCode):
        service.create(fareForm())


# ---------------------------------- Status derivation --------------------------------------#
def test_program_with_actual_start_is_in_progress(session, clock):
    program = programService(session, clock).create(
        programForm(actual_start_time="06:05")
    )
    assert program.status == ProgramStatus.IN_PROGRESS.value


def test_program_without_actual_times_is_planned(session, clock):
    program = programService(session, clock).create(programForm())
    assert program.status == ProgramStatus.PLANNED.value


def test_route_and_schedule_start_active(session, clock):
    assert routeService(session, clock).create(routeForm()).status == Status.ACTIVE.value
    assert (
        scheduleService(session, clock).create(scheduleForm()).status
        == Status.ACTIVE.value
    )


def test_fare_with_past_effective_date_is_inactive(session, clock):
    fare = fareService(session, clock).create(
        fareForm(effective_date=NOW - timedelta(days=1))
    )
    assert fare.status == Status.INACTIVE.value


def test_fare_effective_date_is_stored_in_utc(session, clock):
    lima = timezone(timedelta(hours=-5))
    fare = fareService(session, clock).create(
        fareForm(effective_date=datetime(2025, 6, 20, 7, 0, tzinfo=lima))
    )
    assert asUTC(fare.effective_date) == datetime(2025, 6, 20, 12, 0, tzinfo=timezone.utc)


def test_route_zone_defaults(session, clock):
    route = routeService(session, clock).create(
        routeForm(zones=[{"zone_id": "ZONE-B"}], total_estimated_duration=None)
    )
    assert route.zones == [{"zone_id": "ZONE-B", "order": 0, "estimated_duration": 0}]
    assert route.total_estimated_duration == 0


def test_schedule_days_are_stored_as_names(session, clock):
    schedule = scheduleService(session, clock).create(scheduleForm())
    assert schedule.days_of_week == ["MONDAY", "FRIDAY"]


# ---------------------------------- Reads --------------------------------------------------#
def test_unknown_id_is_not_found(session, clock):
    with pytest.raises(exceptions.InvalidIdentifier):
        routeService(session, clock).getById(404)


def test_empty_lists_are_not_errors(session, clock):
    service = scheduleService(session, clock)
    assert service.listAll() == []
    assert service.listByStatus(Status.INACTIVE.value) == []
    assert service.listByOrganization("ORG-404") == []


def test_search_filters_by_status_and_organization(session, clock):
    service = routeService(session, clock)
    first = service.create(routeForm())
    service.create(routeForm(organization_id="ORG-2"))
    service.deactivate(first.id)

    assert [r.id for r in service.search(Status.INACTIVE)] == [first.id]
    assert len(service.search(organizationId="ORG-2")) == 1
    assert service.search(Status.INACTIVE, "ORG-2") == []


# ---------------------------------- Updates ------------------------------------------------#
@pytest.mark.parametrize(
    "makeService, makeForm, changes",
    [
        (programService, programForm, {"observations": "Low pressure"}),
        (routeService, routeForm, {"name": "South loop"}),
        (scheduleService, scheduleForm, {"name": "Weekend mornings"}),
        (fareService, fareForm, {"amount": Decimal("30.00")}),
    ],
)
def test_update_preserves_code_and_creation_time(
    session, makeService, makeForm, changes
):
    record = makeService(session, lambda: NOW).create(makeForm())
    code, createdOn = record.code, asUTC(record.created_on)

    later = NOW + timedelta(days=2)
    updated = makeService(session, lambda: later).update(record.id, makeForm(**changes))

    assert updated.code == code
    assert asUTC(updated.created_on) == createdOn
    for field, value in changes.items():
        assert getattr(updated, field) == value


def test_update_unknown_id_is_not_found(session, clock):
    with pytest.raises(exceptions.InvalidIdentifier):
        scheduleService(session, clock).update(404, scheduleForm())


def test_fare_update_derives_status_again(session, clock):
    service = fareService(session, clock)
    fare = service.create(fareForm())
    assert fare.status == Status.ACTIVE.value

    fare = service.update(fare.id, fareForm(effective_date=NOW - timedelta(days=1)))
    assert fare.status == Status.INACTIVE.value


def test_fare_update_keeps_effective_date_when_not_sent(session, clock):
    service = fareService(session, clock)
    fare = service.create(fareForm())
    effectiveDate = asUTC(fare.effective_date)

    fare = service.update(fare.id, fareForm(effective_date=None, name="Renamed"))
    assert asUTC(fare.effective_date) == effectiveDate
    assert fare.name == "Renamed"


def test_program_update_keeps_actual_times_unless_sent(session, clock):
    service = programService(session, clock)
    program = service.create(programForm(actual_start_time="06:05"))

    program = service.update(program.id, programForm())
    assert program.actual_start_time == "06:05"
    assert program.status == ProgramStatus.IN_PROGRESS.value

    program = service.update(program.id, programForm(actual_end_time="08:50"))
    assert program.actual_end_time == "08:50"


# ---------------------------------- Activation ---------------------------------------------#
def test_activating_active_fare_is_a_conflict_without_write(session, clock):
    service = fareService(session, clock)
    fare = service.create(fareForm())
    assert fare.updated_on is None

    with pytest.raises(exceptions.StatusUnchanged):
        service.activate(fare.id)

    session.expire_all()
    stored = session.get(Fare, fare.id)
    assert stored.status == Status.ACTIVE.value
    assert stored.updated_on is None


def test_deactivating_inactive_fare_is_a_conflict(session, clock):
    service = fareService(session, clock)
    fare = service.create(fareForm(effective_date=NOW - timedelta(days=1)))
    with pytest.raises(exceptions.StatusUnchanged):
        service.deactivate(fare.id)


def test_activating_active_route_is_idempotent(session, clock):
    service = routeService(session, clock)
    route = service.create(routeForm())
    assert service.activate(route.id).status == Status.ACTIVE.value
    assert service.activate(route.id).status == Status.ACTIVE.value


def test_program_status_changes_are_operator_driven(session, clock):
    service = programService(session, clock)
    program = service.create(programForm())
    assert service.activate(program.id).status == Status.ACTIVE.value
    assert service.deactivate(program.id).status == Status.INACTIVE.value
    assert service.deactivate(program.id).status == Status.INACTIVE.value


def test_activate_unknown_id_is_not_found(session, clock):
    with pytest.raises(exceptions.InvalidIdentifier):
        fareService(session, clock).activate(404)


# ---------------------------------- Fare exclusivity ---------------------------------------#
def test_new_active_fare_displaces_previous_one(session, clock):
    service = fareService(session, clock)
    first = service.create(fareForm(effective_date=NOW + timedelta(days=10)))
    second = service.create(fareForm(effective_date=NOW + timedelta(days=5)))

    session.expire_all()
    assert session.get(Fare, first.id).status == Status.INACTIVE.value
    assert session.get(Fare, second.id).status == Status.ACTIVE.value


def test_exclusivity_is_scoped_to_the_organization(session, clock):
    service = fareService(session, clock)
    first = service.create(fareForm(organization_id="ORG-1"))
    service.create(fareForm(organization_id="ORG-2"))

    session.expire_all()
    assert session.get(Fare, first.id).status == Status.ACTIVE.value


def test_manual_activation_displaces_siblings(session, clock):
    service = fareService(session, clock)
    older = service.create(fareForm(effective_date=NOW + timedelta(days=3)))
    newer = service.create(fareForm(effective_date=NOW + timedelta(days=6)))
    assert session.get(Fare, older.id).status == Status.INACTIVE.value

    service.activate(older.id)
    session.expire_all()
    assert session.get(Fare, older.id).status == Status.ACTIVE.value
    assert session.get(Fare, newer.id).status == Status.INACTIVE.value


# ---------------------------------- Deletion -----------------------------------------------#
def test_program_delete_is_unconditional(session, clock):
    service = programService(session, clock)
    service.delete(404)

    program = service.create(programForm())
    service.delete(program.id)
    assert service.listAll() == []


def test_route_delete_of_unknown_id_is_not_found(session, clock):
    with pytest.raises(exceptions.InvalidIdentifier):
        routeService(session, clock).delete(404)


def test_delete_removes_record(session, clock):
    service = routeService(session, clock)
    route = service.create(routeForm())
    service.delete(route.id)
    assert session.get(Route, route.id) is None
