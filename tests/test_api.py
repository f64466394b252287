"""
Tests for the admin HTTP surface.

These tests use FastAPI TestClient against the application mounted at
/admin, backed by the in-memory database of conftest.py.
"""

from decimal import Decimal

from distribution.src import openobserve
from distribution.src.enums import AppID

FUTURE = "2099-01-01T00:00:00Z"
PAST = "2000-01-01T00:00:00Z"


def fareData(**fields):
    data = {
        "organization_id": "ORG-1",
        "name": "Monthly residential",
        "fare_type": "MONTHLY",
        "amount": "25.50",
        "effective_date": FUTURE,
    }
    data.update(fields)
    return data


def programData(**fields):
    data = {
        "organization_id": "ORG-1",
        "schedule_id": 1,
        "route_id": 1,
        "zone_id": "ZONE-A",
        "street_id": "STREET-1",
        "program_date": "2025-06-16",
        "planned_start_time": "06:00",
        "planned_end_time": "09:00",
    }
    data.update(fields)
    return data


def routeData(**fields):
    data = {
        "organization_id": "ORG-1",
        "name": "North loop",
        "zones": [{"zone_id": "ZONE-A", "order": 1}, {"zone_id": "ZONE-B"}],
    }
    data.update(fields)
    return data


def scheduleData(**fields):
    data = {
        "organization_id": "ORG-1",
        "name": "Weekday mornings",
        "days_of_week": ["MONDAY", "THURSDAY"],
        "start_time": "06:00",
        "end_time": "09:00:00",
        "duration_hours": 3,
    }
    data.update(fields)
    return data


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_create_fare(client, events):
    response = client.post("/admin/fare", json=fareData())
    assert response.status_code == 201
    fare = response.json()
    assert fare["code"] == "TAR001"
    assert fare["status"] == "ACTIVE"
    assert Decimal(fare["amount"]) == Decimal("25.50")

    assert len(events) == 1
    assert events[0]["_app_id"] == AppID.ADMIN
    assert events[0]["_method"] == "POST"
    assert events[0]["_path"] == "/admin/fare"
    assert events[0]["code"] == "TAR001"


def test_create_fare_in_the_past_is_inactive(client):
    response = client.post("/admin/fare", json=fareData(effective_date=PAST))
    assert response.json()["status"] == "INACTIVE"


def test_create_fare_requires_effective_date(client):
    data = fareData()
    del data["effective_date"]
    response = client.post("/admin/fare", json=data)
    assert response.status_code == 422


def test_negative_amount_is_rejected(client):
    response = client.post("/admin/fare", json=fareData(amount="-1"))
    assert response.status_code == 422


def test_activate_active_fare_conflicts(client):
    fare = client.post("/admin/fare", json=fareData()).json()
    response = client.patch(f"/admin/fare/{fare['id']}/activate")
    assert response.status_code == 409
    assert response.headers["X-Error"] == "StatusUnchanged"

    response = client.patch(f"/admin/fare/{fare['id']}/deactivate")
    assert response.status_code == 200
    assert response.json()["status"] == "INACTIVE"


def test_second_fare_displaces_first(client):
    first = client.post("/admin/fare", json=fareData()).json()
    second = client.post("/admin/fare", json=fareData(name="Revised")).json()
    assert second["code"] == "TAR002"

    assert client.get(f"/admin/fare/{first['id']}").json()["status"] == "INACTIVE"
    active = client.get("/admin/fare", params={"status": "ACTIVE"}).json()
    assert [fare["id"] for fare in active] == [second["id"]]


def test_update_fare_keeps_code(client):
    fare = client.post("/admin/fare", json=fareData()).json()
    data = fareData(name="Renamed", amount="30.00")
    del data["effective_date"]

    response = client.put(f"/admin/fare/{fare['id']}", json=data)
    assert response.status_code == 200
    updated = response.json()
    assert updated["code"] == fare["code"]
    assert updated["created_on"] == fare["created_on"]
    assert updated["effective_date"] == fare["effective_date"]
    assert updated["name"] == "Renamed"


def test_create_program(client):
    planned = client.post("/admin/program", json=programData())
    assert planned.status_code == 201
    assert planned.json()["code"] == "PRG001"
    assert planned.json()["status"] == "PLANNED"

    started = client.post(
        "/admin/program", json=programData(actual_start_time="06:05")
    ).json()
    assert started["code"] == "PRG002"
    assert started["status"] == "IN_PROGRESS"

    listed = client.get("/admin/program", params={"status": "IN_PROGRESS"}).json()
    assert [program["id"] for program in listed] == [started["id"]]


def test_invalid_time_of_day_is_rejected(client):
    response = client.post("/admin/program", json=programData(planned_start_time="25:00"))
    assert response.status_code == 422


def test_program_delete_never_checks_existence(client, events):
    response = client.delete("/admin/program/404")
    assert response.status_code == 204
    assert events[-1] == {
        "_method": "DELETE",
        "_path": "/admin/program/404",
        "_app_id": AppID.ADMIN,
        "id": 404,
    }


def test_route_lifecycle(client):
    response = client.post("/admin/route", json=routeData())
    assert response.status_code == 201
    route = response.json()
    assert route["code"] == "RUT001"
    assert route["status"] == "ACTIVE"
    assert route["zones"] == [
        {"zone_id": "ZONE-A", "order": 1, "estimated_duration": 0},
        {"zone_id": "ZONE-B", "order": 0, "estimated_duration": 0},
    ]
    assert route["total_estimated_duration"] == 0

    for _ in range(2):
        response = client.patch(f"/admin/route/{route['id']}/activate")
        assert response.status_code == 200

    response = client.delete(f"/admin/route/{route['id']}")
    assert response.status_code == 204
    response = client.delete(f"/admin/route/{route['id']}")
    assert response.status_code == 404
    assert response.headers["X-Error"] == "InvalidIdentifier"


def test_list_by_organization(client):
    client.post("/admin/route", json=routeData())
    client.post("/admin/route", json=routeData(organization_id="ORG-2"))

    listed = client.get("/admin/route", params={"organization_id": "ORG-2"}).json()
    assert len(listed) == 1
    assert listed[0]["organization_id"] == "ORG-2"
    assert client.get("/admin/route", params={"organization_id": "ORG-3"}).json() == []


def test_schedule_lifecycle(client):
    response = client.post("/admin/schedule", json=scheduleData())
    assert response.status_code == 201
    schedule = response.json()
    assert schedule["code"] == "HOR001"
    assert schedule["days_of_week"] == ["MONDAY", "THURSDAY"]

    response = client.put(
        f"/admin/schedule/{schedule['id']}", json=scheduleData(name="Weekend")
    )
    assert response.json()["name"] == "Weekend"
    assert response.json()["code"] == "HOR001"

    response = client.patch(f"/admin/schedule/{schedule['id']}/deactivate")
    assert response.json()["status"] == "INACTIVE"


def test_unknown_day_is_rejected(client):
    response = client.post("/admin/schedule", json=scheduleData(days_of_week=["FUNDAY"]))
    assert response.status_code == 422


def test_unknown_id_is_not_found(client):
    for kind in ["program", "route", "schedule", "fare"]:
        response = client.get(f"/admin/{kind}/404")
        assert response.status_code == 404
        assert response.headers["X-Error"] == "InvalidIdentifier"


def test_audit_sink_failure_does_not_fail_request(client, monkeypatch):
    def unreachable(data):
        raise ConnectionError("OpenObserve is down")

    monkeypatch.setattr(openobserve, "logEvent", unreachable)
    response = client.post("/admin/route", json=routeData())
    assert response.status_code == 201


def test_manual_fare_transition(client, events):
    client.post("/admin/fare", json=fareData(effective_date=PAST))
    upcoming = client.post("/admin/fare", json=fareData(name="Upcoming")).json()

    response = client.post("/admin/fare/transition")
    assert response.status_code == 200
    report = response.json()
    assert report["activated"] == 0
    assert report["deactivated"] == 0
    assert report["skipped"] is False
    assert events[-1]["_path"] == "/admin/fare/transition"
    assert client.get(f"/admin/fare/{upcoming['id']}").json()["status"] == "ACTIVE"


def test_manual_fare_transition_when_busy(client, transitionLock):
    transitionLock.held = True
    response = client.post("/admin/fare/transition")
    assert response.status_code == 409
    assert response.headers["X-Error"] == "SchedulerBusy"


def test_dashboard(client):
    client.post("/admin/program", json=programData())
    client.post("/admin/program", json=programData(actual_end_time="09:10"))
    route = client.post("/admin/route", json=routeData()).json()
    client.patch(f"/admin/route/{route['id']}/deactivate")
    client.post("/admin/schedule", json=scheduleData())
    client.post("/admin/fare", json=fareData())

    stats = client.get("/admin/dashboard/stats").json()
    assert stats == {
        "programs": 2,
        "routes": 1,
        "schedules": 1,
        "fares": 1,
        "active_fares": 1,
    }

    summary = client.get("/admin/dashboard/summary").json()
    assert summary["programs"] == {
        "PLANNED": 1,
        "IN_PROGRESS": 1,
        "ACTIVE": 0,
        "INACTIVE": 0,
    }
    assert summary["active_routes"] == 0
    assert summary["active_schedules"] == 1
