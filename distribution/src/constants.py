"""
Application configuration and constants for the Distribution API Server.

This module centralizes environment-based configuration, code generation
parameters, fare reconciliation settings, timezones, and other constants.

Configuration values can be overridden via environment variables.
"""

from os import environ
from datetime import datetime
from zoneinfo import ZoneInfo


# ---------------------------------------------------------------------------
# Application metadata
# ---------------------------------------------------------------------------
API_TITLE = "Distribution API Server"
API_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# PostgreSQL configuration
# ---------------------------------------------------------------------------
PSQL_DB_DRIVER = environ.get("PSQL_DB_DRIVER", "postgresql")
PSQL_DB_USERNAME = environ.get("PSQL_DB_USERNAME", "postgres")
PSQL_DB_PORT = environ.get("PSQL_DB_PORT", "5432")
PSQL_DB_PASSWORD = environ.get("PSQL_DB_PASSWORD", "password")
PSQL_DB_HOST = environ.get("PSQL_DB_HOST", "localhost")
PSQL_DB_NAME = environ.get("PSQL_DB_NAME", "postgres")


# ---------------------------------------------------------------------------
# OpenObserve configuration
# ---------------------------------------------------------------------------
OPENOBSERVE_PROTOCOL = environ.get("OPENOBSERVE_PROTOCOL", "http")
OPENOBSERVE_HOST = environ.get("OPENOBSERVE_HOST", "localhost")
OPENOBSERVE_PORT = environ.get("OPENOBSERVE_PORT", "5080")
OPENOBSERVE_USERNAME = environ.get("OPENOBSERVE_USERNAME", "admin@distribution.org")
OPENOBSERVE_PASSWORD = environ.get("OPENOBSERVE_PASSWORD", "password")
OPENOBSERVE_ORG = environ.get("OPENOBSERVE_ORG", "distribution")
OPENOBSERVE_STREAM = environ.get("OPENOBSERVE_STREAM", "distribution-core-server")
OPENOBSERVE_TIMEOUT = 5  # HTTP timeout for event shipping (in seconds)


# ---------------------------------------------------------------------------
# Redis configuration
# ---------------------------------------------------------------------------
REDIS_HOST = environ.get("REDIS_HOST", "localhost")
REDIS_PORT = environ.get("REDIS_PORT", "6379")
REDIS_PASSWORD = environ.get("REDIS_PASSWORD", "password")


# ---------------------------------------------------------------------------
# Redis mutex lock constants
# ---------------------------------------------------------------------------
FARE_TRANSITION_LOCK_TIMEOUT = 15 * 60  # Upper bound of one reconciliation run


# ---------------------------------------------------------------------------
# Code generation
# ---------------------------------------------------------------------------
PROGRAM_CODE_PREFIX = "PRG"
ROUTE_CODE_PREFIX = "RUT"
SCHEDULE_CODE_PREFIX = "HOR"
FARE_CODE_PREFIX = "TAR"
CODE_NUMBER_WIDTH = 3  # Zero padding of the numeric part, never truncated
CODE_NUMBER_LIMIT = 2**31 - 1  # Larger numeric parts are treated as malformed


# ---------------------------------------------------------------------------
# Regex constants
# ---------------------------------------------------------------------------
REGEX_CODE_NUMBER = r"^[0-9]+$"
REGEX_TIME_OF_DAY = r"^([01][0-9]|2[0-3]):[0-5][0-9](:[0-5][0-9])?$"


# ---------------------------------------------------------------------------
# Timezone constants
# ---------------------------------------------------------------------------
TMZ_PRIMARY = ZoneInfo("UTC")


# ---------------------------------------------------------------------------
# Fare reconciliation
# ---------------------------------------------------------------------------
# Pricing-epoch cutover, fares effective before it are superseded once it passes.
# An empty value disables the supersession sweep.
_FARE_TRANSITION_DATE = environ.get("FARE_TRANSITION_DATE", "2025-11-01T00:00:00-05:00")
FARE_TRANSITION_DATE = (
    datetime.fromisoformat(_FARE_TRANSITION_DATE) if _FARE_TRANSITION_DATE else None
)
FARE_SCHEDULER_INTERVAL = int(environ.get("FARE_SCHEDULER_INTERVAL", 60 * 60))


# ---------------------------------------------------------------------------
# Resource upper limits
# ---------------------------------------------------------------------------
MAX_ZONES_IN_ROUTE = 256
MAX_DURATION_HOURS = 24
