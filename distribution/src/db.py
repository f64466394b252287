from sqlalchemy import (
    JSON,
    TEXT,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    create_engine,
    func,
)
from sqlalchemy.orm import declarative_base, sessionmaker

from distribution.src.constants import (
    PSQL_DB_DRIVER,
    PSQL_DB_HOST,
    PSQL_DB_PASSWORD,
    PSQL_DB_NAME,
    PSQL_DB_PORT,
    PSQL_DB_USERNAME,
)
from distribution.src.enums import ProgramStatus, Status


# Global DBMS variables
dbURL = f"{PSQL_DB_DRIVER}://{PSQL_DB_USERNAME}:{PSQL_DB_PASSWORD}@{PSQL_DB_HOST}:{PSQL_DB_PORT}/{PSQL_DB_NAME}"
engine = create_engine(url=dbURL, echo=False)
sessionMaker = sessionmaker(bind=engine, expire_on_commit=False)
ORMbase = declarative_base()


# ---------------------------------- Distribution DB Models -----------------------------------#
class Program(ORMbase):
    """
    Represents a single water distribution run planned for a zone and street
    of an organization, following a schedule along a route.

    Columns:
        id (Integer):
            Primary key. Unique identifier assigned by the database.

        organization_id (String(64)):
            Identifier of the owning organization, issued by the identity provider.
            Indexed for organization based lookups.

        code (String(32)):
            Human readable sequential code in the form `PRG001`.
            Unique and immutable once assigned.

        schedule_id (Integer), route_id (Integer):
            The schedule and route the program follows.

        zone_id (String(64)), street_id (String(64)):
            Location references of the external zone catalogue.

        program_date (Date):
            Calendar date of the distribution.

        planned_start_time (String(8)), planned_end_time (String(8)):
            Planned time of day in `HH:MM` or `HH:MM:SS` format.

        actual_start_time (String(8)), actual_end_time (String(8)):
            Actual time of day, optional. Presence of either at creation
            marks the program as `IN_PROGRESS`.

        responsible_user_id (String(64)):
            User in charge of the distribution.

        observations (TEXT):
            Free text notes.

        status (String(16)):
            One of `ProgramStatus`. Never null.

        updated_on (DateTime):
            Timestamp automatically updated whenever the record is modified.

        created_on (DateTime):
            Timestamp of creation, immutable.
    """

    __tablename__ = "program"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String(64), nullable=False, index=True)
    code = Column(String(32), nullable=False, unique=True, index=True)
    schedule_id = Column(Integer)
    route_id = Column(Integer)
    zone_id = Column(String(64))
    street_id = Column(String(64))
    program_date = Column(Date, nullable=False)
    planned_start_time = Column(String(8), nullable=False)
    planned_end_time = Column(String(8), nullable=False)
    actual_start_time = Column(String(8))
    actual_end_time = Column(String(8))
    responsible_user_id = Column(String(64))
    observations = Column(TEXT)
    status = Column(String(16), nullable=False, default=ProgramStatus.PLANNED.value)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False)


class Route(ORMbase):
    """
    Represents an ordered path through the zones of an organization.

    Columns:
        id (Integer):
            Primary key.

        organization_id (String(64)):
            Owning organization.

        code (String(32)):
            Sequential code in the form `RUT001`. Unique and immutable.

        name (String(128)):
            Human readable route name.

        zones (JSON):
            Ordered list of `{"zone_id", "order", "estimated_duration"}` objects.

        total_estimated_duration (Integer):
            Estimated duration of the whole route (in hours).

        responsible_user_id (String(64)):
            User in charge of the route.

        status (String(16)):
            `ACTIVE` or `INACTIVE`, toggled by operators.
    """

    __tablename__ = "route"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String(64), nullable=False, index=True)
    code = Column(String(32), nullable=False, unique=True, index=True)
    name = Column(String(128), nullable=False)
    zones = Column(JSON, nullable=False, default=list)
    total_estimated_duration = Column(Integer, nullable=False, default=0)
    responsible_user_id = Column(String(64))
    status = Column(String(16), nullable=False, default=Status.ACTIVE.value)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False)


class Schedule(ORMbase):
    """
    Represents the recurring weekly time window in which water is
    distributed to a zone and street.

    Columns:
        id (Integer):
            Primary key.

        organization_id (String(64)):
            Owning organization.

        code (String(32)):
            Sequential code in the form `HOR001`. Unique and immutable.

        zone_id (String(64)), street_id (String(64)):
            Location references.

        name (String(128)):
            Human readable schedule name.

        days_of_week (JSON):
            Ordered list of `Day` names.

        start_time (String(8)), end_time (String(8)):
            Time of day window.

        duration_hours (Integer):
            Length of the window in hours.

        status (String(16)):
            `ACTIVE` or `INACTIVE`, created `ACTIVE`.
    """

    __tablename__ = "schedule"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String(64), nullable=False, index=True)
    code = Column(String(32), nullable=False, unique=True, index=True)
    zone_id = Column(String(64))
    street_id = Column(String(64))
    name = Column(String(128), nullable=False)
    days_of_week = Column(JSON, nullable=False, default=list)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    duration_hours = Column(Integer)
    status = Column(String(16), nullable=False, default=Status.ACTIVE.value)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False)


class Fare(ORMbase):
    """
    Represents the price an organization charges for the water service.

    Unlike the other distribution entities the status of a fare is derived
    from time: it is `ACTIVE` while the current instant is on or before the
    `effective_date` and is re-derived periodically by the fare scheduler.
    At most one fare per organization is expected to be `ACTIVE`.

    Columns:
        id (Integer):
            Primary key.

        organization_id (String(64)):
            Owning organization. Indexed, used by the exclusivity check.

        code (String(32)):
            Sequential code in the form `TAR001`. Unique and immutable.

        name (String(128)):
            Human readable fare name.

        fare_type (String(16)):
            One of `FareType`.

        amount (Numeric(12, 2)):
            Price in the organization's currency.

        effective_date (DateTime):
            Instant from which the fare applies.

        status (String(16)):
            `ACTIVE` or `INACTIVE`, time derived.
    """

    __tablename__ = "fare"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String(64), nullable=False, index=True)
    code = Column(String(32), nullable=False, unique=True, index=True)
    name = Column(String(128), nullable=False)
    fare_type = Column(String(16), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    effective_date = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(16), nullable=False, default=Status.ACTIVE.value)
    # Metadata
    updated_on = Column(DateTime(timezone=True), onupdate=func.now())
    created_on = Column(DateTime(timezone=True), nullable=False)
