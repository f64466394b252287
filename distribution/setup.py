import argparse
from http import HTTPStatus
from requests import post
from datetime import date, datetime, timedelta

from distribution.src.enums import Day, FareType
from distribution.src.constants import TMZ_PRIMARY
from distribution.src.urls import (
    URL_PROGRAM,
    URL_ROUTE,
    URL_SCHEDULE,
    URL_FARE,
    URL_FARE_TRANSITION,
)
from distribution.src.db import sessionMaker, engine, ORMbase


# ----------------------------------- Project Setup -------------------------------------------#
def removeTables():
    session = sessionMaker()
    ORMbase.metadata.drop_all(engine)
    session.commit()
    print("* All tables deleted")
    session.close()


def createTables():
    session = sessionMaker()
    ORMbase.metadata.create_all(engine)
    session.commit()
    print("* All tables created")
    session.close()


def POST(URL: str, status_code: int = HTTPStatus.CREATED, **kwargs):
    response = post(URL, **kwargs)
    if response.status_code != status_code:
        assert response.status_code == status_code
    else:
        return response


def testDB():
    # Base URL
    BASE_URL = "http://127.0.0.1:8080/admin"
    organizationId = "ORG-TEST-001"

    # Create Route
    routeData = {
        "organization_id": organizationId,
        "name": "Test route",
        "zones": [
            {"zone_id": "ZONE-A", "order": 1, "estimated_duration": 45},
            {"zone_id": "ZONE-B", "order": 2, "estimated_duration": 30},
            {"zone_id": "ZONE-C", "order": 3},
        ],
        "total_estimated_duration": 75,
        "responsible_user_id": "USER-001",
    }
    route = POST((BASE_URL + URL_ROUTE), json=routeData)
    print(f"* Created route {route.json()['code']}")

    # Create Schedule
    scheduleData = {
        "organization_id": organizationId,
        "zone_id": "ZONE-A",
        "street_id": "STREET-001",
        "name": "Weekday mornings",
        "days_of_week": [Day.MONDAY, Day.WEDNESDAY, Day.FRIDAY],
        "start_time": "06:00",
        "end_time": "09:00",
        "duration_hours": 3,
    }
    schedule = POST((BASE_URL + URL_SCHEDULE), json=scheduleData)
    print(f"* Created schedule {schedule.json()['code']}")

    # Create Programs, one planned and one already started
    programData = {
        "organization_id": organizationId,
        "schedule_id": schedule.json()["id"],
        "route_id": route.json()["id"],
        "zone_id": "ZONE-A",
        "street_id": "STREET-001",
        "program_date": (date.today() + timedelta(days=1)).isoformat(),
        "planned_start_time": "06:00",
        "planned_end_time": "09:00",
        "responsible_user_id": "USER-001",
    }
    POST((BASE_URL + URL_PROGRAM), json=programData)
    programData["program_date"] = date.today().isoformat()
    programData["actual_start_time"] = "06:10"
    POST((BASE_URL + URL_PROGRAM), json=programData)
    print("* Created programs")

    # Create Fares, a past one and an upcoming one
    now = datetime.now(TMZ_PRIMARY)
    fareData = {
        "organization_id": organizationId,
        "name": "Residential monthly",
        "fare_type": FareType.MONTHLY,
        "amount": "25.50",
        "effective_date": (now - timedelta(days=30)).isoformat(),
    }
    POST((BASE_URL + URL_FARE), json=fareData)
    fareData["name"] = "Residential monthly (revised)"
    fareData["amount"] = "27.00"
    fareData["effective_date"] = (now + timedelta(days=30)).isoformat()
    POST((BASE_URL + URL_FARE), json=fareData)
    print("* Created fares")

    report = POST((BASE_URL + URL_FARE_TRANSITION), status_code=HTTPStatus.OK)
    print(f"* Fare transitions: {report.json()}")


# Setup database
if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    # remove tables
    parser.add_argument("-rm", action="store_true", help="remove tables")
    parser.add_argument("-cr", action="store_true", help="create tables")
    parser.add_argument("-test", action="store_true", help="add test data")
    args = parser.parse_args()

    if args.cr:
        createTables()
    if args.test:
        testDB()
    if args.rm:
        removeTables()
